from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

from blobrelay.errors import ConfigError

MAX_BYTES = 24 * 1024 * 1024
FETCH_TIMEOUT_SEC = 10.0


def _parse_origins(val: str | List[str] | None) -> List[str]:
    """
    Accepts a JSON array or a CSV string and returns a de-duplicated list without empty items.
    Supports '*' (any origin).
    """
    if val is None:
        return ["*"]
    if isinstance(val, list):
        out = [s.strip() for s in val if s and s.strip()]
    else:
        s = val.strip()
        if not s:
            return []
        if s == "*":
            return ["*"]
        try:
            arr = json.loads(s)
            if isinstance(arr, list):
                out = [str(x).strip() for x in arr if str(x).strip()]
            else:
                out = [s]
        except json.JSONDecodeError:
            out = [item.strip() for item in s.split(",") if item.strip()]

    seen: set[str] = set()
    uniq: list[str] = []
    for o in out:
        if o not in seen:
            seen.add(o)
            uniq.append(o)
    return uniq


def _mask(s: str | None, keep: int = 4) -> str | None:
    if not s:
        return None
    return (s[:keep] + "…") if len(s) > keep else "…"


@dataclass(frozen=True)
class StoreConfig:
    repo: str
    token: str
    api_url: str = "https://api.github.com"
    user_agent: str = "blobrelay"
    prefix: str = "public"
    timeout_sec: float = 15.0
    max_bytes: int = MAX_BYTES


@dataclass(frozen=True)
class FetchConfig:
    max_bytes: int = MAX_BYTES
    timeout_sec: float = FETCH_TIMEOUT_SEC
    user_agent: str = "blobrelay-fetch"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Blob store (GitHub contents API) ---
    store_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    store_repo: Optional[str] = Field(default=None, alias="GITHUB_REPO")
    store_api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")
    store_user_agent: str = Field(default="blobrelay", alias="STORE_USER_AGENT")
    store_prefix: str = Field(default="public", alias="STORE_PREFIX")
    store_timeout_sec: PositiveFloat = Field(default=15.0, alias="STORE_TIMEOUT_SEC")

    # --- Public links ---
    base_url: Optional[str] = Field(default=None, alias="BASE_URL")

    # --- Limits ---
    max_bytes: PositiveInt = Field(default=MAX_BYTES, alias="MAX_BYTES")
    fetch_timeout_sec: PositiveFloat = Field(default=FETCH_TIMEOUT_SEC, alias="FETCH_TIMEOUT_SEC")
    fetch_user_agent: str = Field(default="blobrelay-fetch", alias="FETCH_USER_AGENT")

    # --- CORS ---
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def cors_origins(self) -> list[str]:
        return _parse_origins(self.cors_origins_raw)

    @property
    def store_configured(self) -> bool:
        return bool(self.store_token and self.store_repo)

    def store_config(self) -> StoreConfig:
        """Store settings for one request; missing credentials are a server-side fault."""
        if not self.store_configured:
            raise ConfigError()
        return StoreConfig(
            repo=str(self.store_repo).strip("/"),
            token=str(self.store_token),
            api_url=self.store_api_url.rstrip("/"),
            user_agent=self.store_user_agent,
            prefix=self.store_prefix.strip("/"),
            timeout_sec=float(self.store_timeout_sec),
            max_bytes=int(self.max_bytes),
        )

    def fetch_config(self) -> FetchConfig:
        return FetchConfig(
            max_bytes=int(self.max_bytes),
            timeout_sec=float(self.fetch_timeout_sec),
            user_agent=self.fetch_user_agent,
        )

    def debug_dump(self) -> dict[str, Any]:
        return {
            "store_repo": self.store_repo,
            "store_token": _mask(self.store_token),
            "store_api_url": self.store_api_url,
            "store_prefix": self.store_prefix,
            "base_url": self.base_url,
            "max_bytes": self.max_bytes,
            "fetch_timeout_sec": self.fetch_timeout_sec,
            "cors_origins": self.cors_origins,
            "log_level": self.log_level,
        }
