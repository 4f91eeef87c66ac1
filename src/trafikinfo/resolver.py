"""Response resolution: raw XML from the network or an archive to results."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeAlias

from trafikinfo.decoding import LOCAL_DECODERS, REMOTE_DECODERS, DecoderCache
from trafikinfo.errors import ArchiveError
from trafikinfo.telemetry import TelemetryContext

if TYPE_CHECKING:
    from trafikinfo.models import Result
    from trafikinfo.schemas import ResultSchema
    from trafikinfo.telemetry import TelemetryContextProtocol
    from trafikinfo.transport import HttpTransport

logger = logging.getLogger(__name__)

#: Encoding used for persisted responses.
ARCHIVE_ENCODING = "utf-8"

PathLike: TypeAlias = str | os.PathLike[str]


class ResponseResolver:
    """Decodes responses, fetched or archived, with the per-path caches."""

    def __init__(
        self,
        transport: HttpTransport,
        *,
        local_decoders: DecoderCache | None = None,
        remote_decoders: DecoderCache | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self.transport = transport
        self.local_decoders = local_decoders if local_decoders is not None else LOCAL_DECODERS
        self.remote_decoders = (
            remote_decoders if remote_decoders is not None else REMOTE_DECODERS
        )
        self._tele = telemetry if telemetry is not None else TelemetryContext()

    def from_archive(self, schema: ResultSchema, path: PathLike) -> list[Result[Any]]:
        """Decode a previously saved response file."""
        with self._tele("load", object_type=schema.object_type):
            try:
                content = Path(path).read_bytes()
            except OSError as e:
                raise ArchiveError(
                    f"Cannot read archived response {os.fspath(path)!r}: {e}",
                    path=os.fspath(path),
                ) from e
            logger.debug("Loaded %d bytes for %s from %s", len(content), schema, path)
            return self._decode(self.local_decoders, schema, content)

    def from_network(
        self,
        schema: ResultSchema,
        document: str,
        save_to: PathLike | None = None,
    ) -> list[Result[Any]]:
        """Post *document*, optionally persist the raw body, then decode it.

        The body is written before decoding, so a response that fails to
        decode is still on disk for inspection.
        """
        with self._tele("fetch", object_type=schema.object_type):
            with self._tele("transport.post", object_type=schema.object_type):
                text = self.transport.post(document)
            if save_to is not None:
                self._persist(text, save_to)
            return self._decode(self.remote_decoders, schema, text)

    def _persist(self, text: str, path: PathLike) -> None:
        try:
            Path(path).write_text(text, encoding=ARCHIVE_ENCODING, newline="")
        except OSError as e:
            raise ArchiveError(
                f"Cannot save response to {os.fspath(path)!r}: {e}",
                path=os.fspath(path),
            ) from e
        logger.debug("Saved response to %s", path)

    def _decode(
        self, cache: DecoderCache, schema: ResultSchema, content: str | bytes
    ) -> list[Result[Any]]:
        decoder = cache.get_or_create(
            schema,
            on_build=lambda: self._tele.count(
                "decoder.build", object_type=schema.object_type
            ),
        )
        with self._tele("decode", object_type=schema.object_type):
            return decoder.decode(content)
