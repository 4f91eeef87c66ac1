"""HTTP transport: one POST per request document, no retries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from trafikinfo.errors import TransportError

if TYPE_CHECKING:
    from trafikinfo.config import Config

logger = logging.getLogger(__name__)

XML_HEADERS = {"Content-Type": "text/xml"}


class HttpTransport:
    """Posts request documents to the configured service URL."""

    def __init__(self, config: Config, *, client: httpx.Client | None = None) -> None:
        """Initialize with a config; an injected *client* is not closed here."""
        self.url = config.url
        self.timeout = httpx.Timeout(config.timeout_s)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=self.timeout)

    def post(self, document: str) -> str:
        """Send *document* and return the response body as text.

        A non-success status is logged and its body returned anyway; whether it
        decodes is up to the caller.
        """
        try:
            response = self._client.post(
                self.url,
                content=document,
                headers=XML_HEADERS,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request to {self.url} timed out: {e}",
                url=self.url,
                hint="Increase Config.timeout_ms or narrow the query.",
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Request to {self.url} failed: {e}",
                url=self.url,
            ) from e

        if response.is_error:
            logger.warning(
                "Service returned HTTP %s for %s", response.status_code, self.url
            )
        else:
            logger.debug(
                "Service returned HTTP %s (%d bytes)",
                response.status_code,
                len(response.content),
            )
        return response.text

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()
