"""Typed shapes for decoded service responses.

A response holds one ``RESULT`` per QUERY. Each result carries the records for
its object type plus optional ``INFO`` and ``ERROR`` elements. Service-side
errors (bad key, bad filter) arrive as ``ERROR`` content, not as failed calls.

Record fields use the service's PascalCase element names as aliases. Fields not
declared on a model are kept as extras, so every record model accepts the full
element even when only a few fields are typed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class Record(BaseModel):
    """Base for one object-type element inside a ``RESULT``."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


RecordT = TypeVar("RecordT", bound=Record)


class Geometry(Record):
    """Point or line geometry in the two reference systems the service uses."""

    wgs84: str | None = Field(default=None, alias="WGS84")
    sweref99tm: str | None = Field(default=None, alias="SWEREF99TM")


class Info(Record):
    """``INFO`` element: change tracking and server-sent-events metadata."""

    last_change_id: str | None = Field(default=None, alias="LASTCHANGEID")
    eval_result: object | None = Field(default=None, alias="EVALRESULT")
    sse_url: str | None = Field(default=None, alias="SSEURL")


class ResultError(Record):
    """``ERROR`` element reported inside a result."""

    source: str | None = Field(default=None, alias="SOURCE")
    message: str | None = Field(default=None, alias="MESSAGE")


class Result(BaseModel, Generic[RecordT]):
    """One decoded ``RESULT`` element."""

    model_config = ConfigDict(frozen=True)

    records: list[RecordT] = Field(default_factory=list)
    info: Info | None = None
    error: ResultError | None = None


# --- Railroad ---


class RailCrossing(Record):
    pass


class ReasonCode(Record):
    pass


class TrainAnnouncement(Record):
    activity_id: str | None = None
    activity_type: str | None = None
    advertised_train_ident: str | None = None
    advertised_time_at_location: datetime | None = None
    location_signature: str | None = None
    canceled: bool | None = None
    modified_time: datetime | None = None


class TrainMessage(Record):
    event_id: str | None = None
    header: str | None = None
    external_description: str | None = None
    geometry: Geometry | None = None
    modified_time: datetime | None = None


class TrainStation(Record):
    advertised_location_name: str | None = None
    location_signature: str | None = None
    advertised: bool | None = None
    country_code: str | None = None
    geometry: Geometry | None = None
    modified_time: datetime | None = None


# --- Road ---


class Camera(Record):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    type: str | None = None
    active: bool | None = None
    photo_url: str | None = None
    geometry: Geometry | None = None
    modified_time: datetime | None = None


class FerryAnnouncement(Record):
    pass


class FerryRoute(Record):
    pass


class Icon(Record):
    pass


class Parking(Record):
    pass


class RoadConditionOverview(Record):
    pass


class RoadCondition(Record):
    pass


class Situation(Record):
    id: str | None = None
    modified_time: datetime | None = None


class TrafficFlow(Record):
    pass


class TrafficSafetyCamera(Record):
    pass


class TravelTimeRoute(Record):
    pass


class WeatherStation(Record):
    id: str | None = None
    name: str | None = None
    active: bool | None = None
    geometry: Geometry | None = None
    modified_time: datetime | None = None


# --- Road surface ---


class MeasurementData100(Record):
    pass


class MeasurementData20(Record):
    pass


class PavementData(Record):
    pass


class RoadData(Record):
    pass


class RoadGeometry(Record):
    pass
