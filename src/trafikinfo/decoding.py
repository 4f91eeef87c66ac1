"""XML decoders and the per-schema decoder caches.

A decoder turns a service ``RESPONSE`` document into ``list[Result]`` for one
result schema. Building one generates the pydantic validation schema for the
record model, so decoders are built lazily and kept for the process lifetime.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
import logging
import threading
from typing import TYPE_CHECKING, Any, Generic
from xml.etree import ElementTree

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from trafikinfo._singleflight import singleflight_cached
from trafikinfo.errors import DecodeError, DecoderBuildError
from trafikinfo.models import Record, RecordT, Result

if TYPE_CHECKING:
    from collections.abc import Callable

    from trafikinfo.schemas import ResultSchema

logger = logging.getLogger(__name__)

RESPONSE_TAG = "RESPONSE"
RESULT_TAG = "RESULT"
INFO_TAG = "INFO"
ERROR_TAG = "ERROR"
TEXT_KEY = "value"


def local_tag(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def element_to_value(element: ElementTree.Element) -> Any:
    """Convert an element to plain Python data.

    Leaves without attributes become their text (``None`` when empty).
    Anything else becomes a dict of attributes and children; a child tag seen
    more than once collects into a list. Text next to attributes or children
    is kept under ``TEXT_KEY`` unless an attribute or child already uses it.
    """
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text or None

    data: dict[str, Any] = {local_tag(k): v for k, v in element.attrib.items()}
    for child in children:
        tag = local_tag(child.tag)
        value = element_to_value(child)
        if tag not in data:
            data[tag] = value
        elif isinstance(data[tag], list):
            data[tag].append(value)
        else:
            data[tag] = [data[tag], value]
    if text:
        data.setdefault(TEXT_KEY, text)
    return data


class XmlDecoder(Generic[RecordT]):
    """Decoder for one result schema."""

    def __init__(self, schema: ResultSchema) -> None:
        model = schema.record_model
        if not (isinstance(model, type) and issubclass(model, Record)):
            raise DecoderBuildError(
                f"Record model for {schema} is not a Record subclass: {model!r}",
                object_type=schema.object_type,
            )
        try:
            adapter = TypeAdapter(list[Result[model]])  # type: ignore[valid-type]
        except PydanticUserError as e:
            raise DecoderBuildError(
                f"Cannot build decoder for {schema}: {e}",
                object_type=schema.object_type,
            ) from e
        self.schema = schema
        self._adapter = adapter

    def decode(self, content: str | bytes) -> list[Result[RecordT]]:
        """Decode a ``RESPONSE`` document into one ``Result`` per ``RESULT``."""
        object_type = self.schema.object_type
        try:
            root = ElementTree.fromstring(content)
        except ElementTree.ParseError as e:
            raise DecodeError(
                f"Response for {self.schema} is not valid XML: {e}",
                object_type=object_type,
                hint="Inspect the raw body; the service may have returned an HTML error page.",
            ) from e

        if local_tag(root.tag) != RESPONSE_TAG:
            raise DecodeError(
                f"Expected <{RESPONSE_TAG}> root for {self.schema}, got <{local_tag(root.tag)}>",
                object_type=object_type,
            )

        payload = [
            self._result_payload(element)
            for element in root
            if local_tag(element.tag) == RESULT_TAG
        ]
        try:
            return self._adapter.validate_python(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Response does not match {self.schema}: {e}",
                object_type=object_type,
            ) from e

    def _result_payload(self, element: ElementTree.Element) -> dict[str, Any]:
        payload: dict[str, Any] = {"records": []}
        for child in element:
            tag = local_tag(child.tag)
            if tag == self.schema.object_type:
                payload["records"].append(element_to_value(child) or {})
            elif tag == INFO_TAG:
                payload["info"] = element_to_value(child) or {}
            elif tag == ERROR_TAG:
                payload["error"] = element_to_value(child) or {}
            else:
                logger.debug("Ignoring <%s> in result for %s", tag, self.schema)
        return payload


@dataclass(eq=False)
class DecoderCache:
    """Lazily built decoders keyed by result schema.

    Concurrent first use of one schema builds a single decoder; the others
    wait for it. Build failures are raised and not cached.
    """

    factory: Callable[[ResultSchema], XmlDecoder[Any]] = XmlDecoder
    _entries: dict[ResultSchema, XmlDecoder[Any]] = field(default_factory=dict)
    _inflight: dict[ResultSchema, Future[XmlDecoder[Any]]] = field(
        default_factory=dict
    )
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, schema: ResultSchema) -> XmlDecoder[Any] | None:
        """Return the cached decoder, if built."""
        return self._entries.get(schema)

    def _set(self, schema: ResultSchema, decoder: XmlDecoder[Any]) -> None:
        self._entries[schema] = decoder

    def get_or_create(
        self,
        schema: ResultSchema,
        *,
        on_build: Callable[[], None] | None = None,
    ) -> XmlDecoder[Any]:
        """Return the decoder for *schema*, building it on first use.

        *on_build* runs once per successful construction, in the thread that
        built it; callers that only waited on another thread's build skip it.
        """

        def _work() -> XmlDecoder[Any]:
            logger.debug("Building decoder for %s", schema)
            try:
                decoder = self.factory(schema)
            except DecoderBuildError:
                logger.error("Decoder construction failed for %s", schema, exc_info=True)
                raise
            except Exception as e:
                logger.error("Decoder construction failed for %s", schema, exc_info=True)
                raise DecoderBuildError(
                    f"Cannot build decoder for {schema}: {e}",
                    object_type=schema.object_type,
                ) from e
            if on_build is not None:
                on_build()
            return decoder

        return singleflight_cached(
            schema,
            lock=self._lock,
            inflight=self._inflight,
            cache_get=self.get,
            cache_set=self._set,
            work=_work,
        )

    def __contains__(self, schema: object) -> bool:
        return schema in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Drop all cached decoders (testing convenience)."""
        with self._lock:
            self._entries.clear()


# Process-wide caches, one per call path.
LOCAL_DECODERS = DecoderCache()
REMOTE_DECODERS = DecoderCache()
