"""trafikinfo: typed client for the Trafikverket traffic information XML API.

Public API:
    - TrafficInformation: fetch or load results per object type
    - Config: Immutable client configuration
    - QueryAttributes: Case-insensitive, ordered QUERY attributes
    - CATALOG / get_schema: Supported object types
"""

from __future__ import annotations

import logging

from trafikinfo.client import CategoryView, Endpoint, TrafficInformation
from trafikinfo.config import Config
from trafikinfo.decoding import DecoderCache, XmlDecoder
from trafikinfo.errors import (
    ArchiveError,
    DecodeError,
    DecoderBuildError,
    TrafikinfoError,
    TransportError,
)
from trafikinfo.models import Info, Record, Result, ResultError
from trafikinfo.request import QueryAttributes, build_request
from trafikinfo.schemas import CATALOG, Category, ResultSchema, get_schema, schemas_for

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("trafikinfo")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("trafikinfo").addHandler(logging.NullHandler())

__all__ = [
    "CATALOG",
    "ArchiveError",
    "Category",
    "CategoryView",
    "Config",
    "DecodeError",
    "DecoderBuildError",
    "DecoderCache",
    "Endpoint",
    "Info",
    "QueryAttributes",
    "Record",
    "Result",
    "ResultError",
    "ResultSchema",
    "TrafficInformation",
    "TrafikinfoError",
    "TransportError",
    "XmlDecoder",
    "build_request",
    "get_schema",
    "schemas_for",
]
