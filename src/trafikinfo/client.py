"""Client: generic fetch/load plus per-category endpoint views."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Self

from trafikinfo.config import Config
from trafikinfo.request import QueryAttributes, build_request
from trafikinfo.resolver import ResponseResolver
from trafikinfo.schemas import Category, ResultSchema, get_schema, schemas_for
from trafikinfo.transport import HttpTransport

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from types import TracebackType

    from trafikinfo.decoding import DecoderCache
    from trafikinfo.models import Result
    from trafikinfo.resolver import PathLike
    from trafikinfo.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


def _resolve_schema(schema: ResultSchema | str) -> ResultSchema:
    return schema if isinstance(schema, ResultSchema) else get_schema(schema)


class TrafficInformation:
    """Client for the traffic information XML API.

    Every supported object type has two operations: ``fetch`` queries the
    service (optionally saving the raw response), ``load`` decodes a saved one.

    Example:
        with TrafficInformation(Config(api_key="...")) as client:
            attrs = client.create_query_attributes(limit="10")
            results = client.road.camera.fetch(attrs, save_to="camera.xml")
            again = client.road.camera.load("camera.xml")
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: HttpTransport | None = None,
        local_decoders: DecoderCache | None = None,
        remote_decoders: DecoderCache | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        self._config = config if config is not None else Config()
        self._telemetry = telemetry
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else HttpTransport(self._config)
        self._resolver = ResponseResolver(
            self._transport,
            local_decoders=local_decoders,
            remote_decoders=remote_decoders,
            telemetry=telemetry,
        )
        self.railroad = CategoryView(self, Category.RAILROAD)
        self.road = CategoryView(self, Category.ROAD)
        self.road_surface = CategoryView(self, Category.ROAD_SURFACE)

    @property
    def config(self) -> Config:
        return self._config

    def with_config(self, **changes: Any) -> TrafficInformation:
        """Return a new client with *changes* applied to the config.

        The new client gets its own transport and shares the decoder caches.
        """
        return TrafficInformation(
            self._config.replace(**changes),
            local_decoders=self._resolver.local_decoders,
            remote_decoders=self._resolver.remote_decoders,
            telemetry=self._telemetry,
        )

    def create_query_attributes(self, **initial: str) -> QueryAttributes:
        return QueryAttributes(initial)

    def build_request(
        self,
        schema: ResultSchema | str,
        attributes: Mapping[str, str] | None = None,
        query: str | None = None,
    ) -> str:
        schema = _resolve_schema(schema)
        return build_request(
            attributes,
            schema.object_type,
            schema.schema_version,
            query,
            api_key=self._config.api_key or "",
            escape=self._config.escape_values,
        )

    def fetch(
        self,
        schema: ResultSchema | str,
        attributes: Mapping[str, str] | None = None,
        query: str | None = None,
        *,
        save_to: PathLike | None = None,
    ) -> list[Result[Any]]:
        """Query the service for *schema* and return the decoded results.

        Args:
            schema: A catalog entry or its name, e.g. ``"train_station"``.
            attributes: Extra QUERY attributes (limit, orderby, ...).
            query: Body of the QUERY element, e.g. a ``<FILTER>`` fragment.
            save_to: When given, the raw response is written there as UTF-8.
        """
        schema = _resolve_schema(schema)
        document = self.build_request(schema, attributes, query)
        logger.debug("Fetching %s from %s", schema, self._config.url)
        return self._resolver.from_network(schema, document, save_to)

    def load(self, schema: ResultSchema | str, path: PathLike) -> list[Result[Any]]:
        """Decode a response previously saved with ``fetch(..., save_to=...)``."""
        return self._resolver.from_archive(_resolve_schema(schema), path)

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"TrafficInformation({self._config})"


@dataclass(frozen=True)
class Endpoint:
    """One object type bound to a client."""

    client: TrafficInformation
    schema: ResultSchema

    def fetch(
        self,
        attributes: Mapping[str, str] | None = None,
        query: str | None = None,
        *,
        save_to: PathLike | None = None,
    ) -> list[Result[Any]]:
        return self.client.fetch(self.schema, attributes, query, save_to=save_to)

    def load(self, path: PathLike) -> list[Result[Any]]:
        return self.client.load(self.schema, path)


class CategoryView:
    """Endpoints of one category as attributes, e.g. ``client.road.camera``."""

    def __init__(self, client: TrafficInformation, category: Category) -> None:
        self.category = category
        self._endpoints = {
            schema.name: Endpoint(client, schema) for schema in schemas_for(category)
        }

    def __getattr__(self, name: str) -> Endpoint:
        endpoints = self.__dict__.get("_endpoints", {})
        try:
            return endpoints[name]
        except KeyError:
            raise AttributeError(f"No endpoint named {name!r}") from None

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._endpoints})

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints.values())

    def __repr__(self) -> str:
        return f"CategoryView({self.category.value!r}, {sorted(self._endpoints)})"
