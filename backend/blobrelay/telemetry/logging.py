from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import urlsplit, urlunsplit

import structlog

SERVICE_NAME = "blobrelay"


def _resolve_level(level: str | None) -> int:
    return getattr(logging, (level or "INFO").upper(), logging.INFO)


def init_logging(level: str | None = None) -> None:
    """Configure structlog + stdlib logging for JSON output.

    Request log lines carry: ts, level, service, trace_id, action,
    duration_ms, result, status. URLs are logged without query or fragment.
    """
    lvl = _resolve_level(level)
    logging.basicConfig(level=lvl, format="%(message)s")

    # Access logs carry client IPs
    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("gunicorn.access").disabled = True
    # httpx logs every request line with the full URL, query string included
    logging.getLogger("httpx").setLevel(max(lvl, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            _add_service,
            _lowercase_level,
            _drop_sensitive_keys,
            _strip_url_secrets,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(lvl),
        cache_logger_on_first_use=True,
    )


def _add_service(logger: Any, method_name: str, event_dict: Mapping[str, Any]):
    event_dict = dict(event_dict)
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _lowercase_level(logger: Any, method_name: str, event_dict: Mapping[str, Any]):
    level = event_dict.get("level") or event_dict.get("levelname")
    if not level:
        return event_dict
    event_dict = dict(event_dict)
    event_dict["level"] = str(level).lower()
    event_dict.pop("levelname", None)
    return event_dict


# Client addresses, request headers and store credentials never reach the logs
SENSITIVE_KEYS = frozenset(
    {"client", "client_ip", "client_addr", "headers", "request_headers", "authorization", "token", "content"}
)
URL_KEYS = ("url", "final_url", "location")


def _drop_sensitive_keys(logger: Any, method_name: str, event_dict: Mapping[str, Any]):
    if SENSITIVE_KEYS.isdisjoint(event_dict.keys()):
        return event_dict
    return {k: v for k, v in event_dict.items() if k not in SENSITIVE_KEYS}


def redact_url(url: str) -> str:
    """Drop userinfo, query and fragment from a URL before it is logged."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return "<invalid url>"
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        host = f"{host}:{port}"
    return urlunsplit((parts.scheme, host, parts.path, "", ""))


def _strip_url_secrets(logger: Any, method_name: str, event_dict: Mapping[str, Any]):
    present = [k for k in URL_KEYS if isinstance(event_dict.get(k), str)]
    if not present:
        return event_dict
    event_dict = dict(event_dict)
    for k in present:
        event_dict[k] = redact_url(event_dict[k])
    return event_dict


def get_logger(**initial: Any) -> structlog.stdlib.BoundLogger:  # type: ignore[name-defined]
    return structlog.get_logger(**initial)
