"""Request envelope: query attributes and the LOGIN/QUERY document.

Attribute values and the query body are interpolated as-is. The caller is
responsible for well-formed content unless ``escape=True`` is passed, which
XML-escapes the credential and attribute values. The query body is an XML
fragment (FILTER, INCLUDE, ...) and is never escaped.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any
from xml.sax.saxutils import escape as _xml_escape

REQUEST_TEMPLATE = (
    "<REQUEST>\n"
    '  <LOGIN authenticationkey="{key}" />\n'
    "  <QUERY{attributes}>\n"
    "    {query}\n"
    "  </QUERY>\n"
    "</REQUEST>"
)

OBJECT_TYPE = "objecttype"
SCHEMA_VERSION = "schemaversion"

_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


class QueryAttributes(MutableMapping[str, str]):
    """Case-insensitive mapping of QUERY attributes, iterated in key order.

    Keys compare case-insensitively and iterate in ascending case-insensitive
    order. The first spelling of a key is kept; setting it again under another
    case only replaces the value.
    """

    def __init__(
        self, data: Mapping[str, str] | None = None, /, **kwargs: str
    ) -> None:
        self._store: dict[str, tuple[str, str]] = {}
        if data is not None:
            self.update(data)
        self.update(kwargs)

    @staticmethod
    def _fold(key: str) -> str:
        return key.lower()

    def __setitem__(self, key: str, value: str) -> None:
        folded = self._fold(key)
        existing = self._store.get(folded)
        self._store[folded] = (existing[0] if existing else key, value)

    def __getitem__(self, key: str) -> str:
        return self._store[self._fold(key)][1]

    def __delitem__(self, key: str) -> None:
        del self._store[self._fold(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._fold(key) in self._store

    def __iter__(self) -> Iterator[str]:
        for folded in sorted(self._store):
            yield self._store[folded][0]

    def __len__(self) -> int:
        return len(self._store)

    def copy(self) -> QueryAttributes:
        return QueryAttributes(self)

    def __repr__(self) -> str:
        return f"QueryAttributes({dict(self.items())!r})"


def render_attributes(attributes: Mapping[str, Any], *, escape: bool = False) -> str:
    """Render ``' name="value"'`` pairs in the mapping's iteration order."""
    parts = []
    for key, value in attributes.items():
        text = str(value)
        if escape:
            text = _xml_escape(text, _ATTRIBUTE_ENTITIES)
        parts.append(f' {key}="{text}"')
    return "".join(parts)


def build_request(
    attributes: Mapping[str, str] | None,
    object_type: str,
    schema_version: str,
    query: str | None,
    *,
    api_key: str,
    escape: bool = False,
) -> str:
    """Build the request document for one QUERY.

    ``objecttype`` and ``schemaversion`` are added only when the caller did not
    supply them (in any case). The caller's mapping is copied, never mutated.

    Example:
        build_request(None, "Camera", "1", None, api_key="abc")
        # <REQUEST>
        #   <LOGIN authenticationkey="abc" />
        #   <QUERY objecttype="Camera" schemaversion="1">
        #   ...
    """
    attrs = QueryAttributes(attributes)
    attrs.setdefault(OBJECT_TYPE, object_type)
    attrs.setdefault(SCHEMA_VERSION, schema_version)

    key = _xml_escape(api_key, _ATTRIBUTE_ENTITIES) if escape else api_key
    return REQUEST_TEMPLATE.format(
        key=key,
        attributes=render_attributes(attrs, escape=escape),
        query=query or "",
    )
