"""Result schema identifiers and the table of supported object types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from trafikinfo import models

if TYPE_CHECKING:
    from trafikinfo.models import Record


class Category(str, Enum):
    """Data category an object type belongs to."""

    RAILROAD = "railroad"
    ROAD = "road"
    ROAD_SURFACE = "road_surface"


@dataclass(frozen=True)
class ResultSchema:
    """Identifies how one object type is requested and decoded.

    Used as the decoder cache key. ``object_type`` and ``schema_version`` go
    into the QUERY element; ``object_type`` also names the record elements
    inside each ``RESULT``.
    """

    name: str
    category: Category
    object_type: str
    schema_version: str
    record_model: type[Record]

    def __str__(self) -> str:
        return f"{self.object_type} v{self.schema_version}"


def _schema(
    name: str, category: Category, object_type: str, version: str
) -> ResultSchema:
    return ResultSchema(
        name=name,
        category=category,
        object_type=object_type,
        schema_version=version,
        record_model=getattr(models, object_type),
    )


_RAIL = Category.RAILROAD
_ROAD = Category.ROAD
_SURFACE = Category.ROAD_SURFACE

CATALOG: tuple[ResultSchema, ...] = (
    _schema("rail_crossing", _RAIL, "RailCrossing", "1.4"),
    _schema("reason_code", _RAIL, "ReasonCode", "1"),
    _schema("train_announcement", _RAIL, "TrainAnnouncement", "1.6"),
    _schema("train_message", _RAIL, "TrainMessage", "1.6"),
    _schema("train_station", _RAIL, "TrainStation", "1"),
    _schema("camera", _ROAD, "Camera", "1"),
    _schema("ferry_announcement", _ROAD, "FerryAnnouncement", "1.2"),
    _schema("ferry_route", _ROAD, "FerryRoute", "1.2"),
    _schema("icon", _ROAD, "Icon", "1"),
    _schema("parking", _ROAD, "Parking", "1.4"),
    _schema("road_condition_overview", _ROAD, "RoadConditionOverview", "1"),
    _schema("road_condition", _ROAD, "RoadCondition", "1.2"),
    _schema("situation", _ROAD, "Situation", "1.4"),
    _schema("traffic_flow", _ROAD, "TrafficFlow", "1.4"),
    _schema("traffic_safety_camera", _ROAD, "TrafficSafetyCamera", "1"),
    _schema("travel_time_route", _ROAD, "TravelTimeRoute", "1.5"),
    _schema("weather_station", _ROAD, "WeatherStation", "1"),
    _schema("measurement_data_100", _SURFACE, "MeasurementData100", "1"),
    _schema("measurement_data_20", _SURFACE, "MeasurementData20", "1"),
    _schema("pavement_data", _SURFACE, "PavementData", "1"),
    _schema("road_data", _SURFACE, "RoadData", "1"),
    _schema("road_geometry", _SURFACE, "RoadGeometry", "1"),
)

_BY_NAME: dict[str, ResultSchema] = {schema.name: schema for schema in CATALOG}


def get_schema(name: str) -> ResultSchema:
    """Look up a catalog entry by name, e.g. ``"camera"``."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown result schema: {name!r}") from None


def schemas_for(category: Category | str) -> tuple[ResultSchema, ...]:
    """Return the catalog entries of one category, in table order."""
    category = Category(category)
    return tuple(schema for schema in CATALOG if schema.category is category)
