from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from blobrelay.config import FetchConfig
from blobrelay.errors import FetchTimeout, SecurityBlocked, TooLarge, UpstreamError, ValidationError
from blobrelay.security.url_guard import check_url, parse_candidate
from blobrelay.services.bounded_reader import check_declared_length, read_bounded
from blobrelay.telemetry.logging import redact_url
from blobrelay.telemetry.metrics import relay_fetch_bytes, relay_fetch_total

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/*"


@dataclass(frozen=True)
class FetchResult:
    content_type: str
    size: int
    data: bytes


def _media_type(header: str | None) -> str:
    mt = (header or "").lower().split(";", 1)[0].strip()
    return mt or DEFAULT_CONTENT_TYPE


class SecureFetcher:
    """Fetches a user supplied URL with SSRF, size and time limits.

    One GET per call (redirect hops are followed by httpx), no retries. The
    URL guard runs on the requested URL before any I/O and again on the URL
    the response actually came from.
    """

    def __init__(self, config: FetchConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.config.timeout_sec,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> FetchResult:
        try:
            parts = parse_candidate(url)
        except ValueError as e:
            raise ValidationError("Invalid URL") from e

        verdict = check_url(parts)
        if not verdict:
            logger.info("fetch blocked: url=%s reason=%s", redact_url(url), verdict.reason)
            relay_fetch_total.labels(result="blocked").inc()
            raise SecurityBlocked()

        try:
            async with asyncio.timeout(self.config.timeout_sec):
                result = await self._fetch(parts.geturl())
        except TimeoutError as e:
            logger.info("fetch timed out: host=%s", parts.hostname)
            relay_fetch_total.labels(result="timeout").inc()
            raise FetchTimeout() from e
        except httpx.TimeoutException as e:
            logger.info("fetch timed out in transport: host=%s", parts.hostname)
            relay_fetch_total.labels(result="timeout").inc()
            raise FetchTimeout() from e
        except httpx.InvalidURL as e:
            # urlsplit accepted it but httpx did not (over-long URL, bad host label)
            logger.info("fetch rejected by client: url=%s err=%s", redact_url(url), e)
            relay_fetch_total.labels(result="invalid").inc()
            raise ValidationError("Invalid URL") from e
        except httpx.HTTPError as e:
            logger.info("fetch transport error: host=%s err=%s", parts.hostname, type(e).__name__)
            relay_fetch_total.labels(result="upstream_error").inc()
            raise UpstreamError() from e

        relay_fetch_total.labels(result="ok").inc()
        relay_fetch_bytes.observe(result.size)
        return result

    async def _fetch(self, url: str) -> FetchResult:
        max_bytes = self.config.max_bytes
        async with self._client() as client:
            async with client.stream("GET", url) as res:
                self._check_final_url(res)

                if not res.is_success:
                    logger.info("fetch upstream status=%d host=%s", res.status_code, res.url.host)
                    relay_fetch_total.labels(result="upstream_error").inc()
                    raise UpstreamError()

                declared = res.headers.get("content-length")
                try:
                    check_declared_length(declared, max_bytes)
                    data = await read_bounded(res.aiter_bytes(), max_bytes)
                except TooLarge:
                    relay_fetch_total.labels(result="too_large").inc()
                    raise

                return FetchResult(
                    content_type=_media_type(res.headers.get("content-type")),
                    size=len(data),
                    data=data,
                )

    @staticmethod
    def _check_final_url(res: httpx.Response) -> None:
        final = str(res.url)
        try:
            verdict = check_url(final)
        except ValueError:
            # An unparseable final URL is not a guard hit; keep going.
            logger.debug("could not parse final url after redirects")
            return
        if not verdict:
            logger.warning(
                "fetch blocked after redirect: url=%s reason=%s hops=%d",
                redact_url(final),
                verdict.reason,
                len(res.history),
            )
            relay_fetch_total.labels(result="blocked").inc()
            raise SecurityBlocked()
