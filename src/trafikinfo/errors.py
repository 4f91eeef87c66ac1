"""Exception hierarchy for trafikinfo."""

from __future__ import annotations


class TrafikinfoError(Exception):
    """Base exception for all trafikinfo errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class TransportError(TrafikinfoError):
    """The HTTP call failed before a response body was received.

    Covers connection failures, timeouts and protocol errors. Nothing is
    retried; the original ``httpx`` exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.url = url


class ArchiveError(TrafikinfoError):
    """Reading a saved response or persisting a new one failed."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.path = path


class DecodeError(TrafikinfoError):
    """Response content is not XML for the expected result schema."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        object_type: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.object_type = object_type


class DecoderBuildError(DecodeError):
    """A decoder could not be constructed for a result schema."""
