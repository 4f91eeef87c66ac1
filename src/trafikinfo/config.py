"""Configuration: frozen Config resolved once per client."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()

DEFAULT_URL = "https://api.trafikinfo.trafikverket.se/v2/data.xml"
DEFAULT_TIMEOUT_MS = 30_000

_API_KEY_ENV_VAR = "TRAFIKINFO_API_KEY"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for a ``TrafficInformation`` client.

    Nothing is validated: a wrong key or URL surfaces later as a transport or
    decode error. To change settings at runtime, build a new config (and a new
    client) instead of mutating a shared one.

    Example:
        config = Config(api_key="...", timeout_ms=10_000)
        # or leave api_key unset and export TRAFIKINFO_API_KEY
    """

    #: Auto-resolved from ``TRAFIKINFO_API_KEY`` when *None*; empty if unset.
    api_key: str | None = None
    url: str = DEFAULT_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    #: XML-escape the credential and attribute values when building requests.
    escape_values: bool = False

    def __post_init__(self) -> None:
        """Auto-resolve the API key from the environment."""
        if self.api_key is None:
            object.__setattr__(self, "api_key", os.environ.get(_API_KEY_ENV_VAR, ""))

    @property
    def timeout_s(self) -> float:
        """Timeout in seconds, the unit ``httpx`` expects."""
        return self.timeout_ms / 1000

    def replace(self, **changes: Any) -> Config:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(api_key={'[REDACTED]' if self.api_key else None}, "
            f"url={self.url!r}, timeout_ms={self.timeout_ms!r}, "
            f"escape_values={self.escape_values!r})"
        )

    __repr__ = __str__
