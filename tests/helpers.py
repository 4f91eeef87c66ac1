"""Test helpers: canned service responses and small parsing utilities.

Keep this file tiny and purpose-built: responses here mirror what the service
returns so decode tests do not grow lots of one-off XML strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re

import httpx

from trafikinfo.models import Record
from trafikinfo.schemas import Category, ResultSchema

CAMERA_XML = """<?xml version="1.0" encoding="utf-8"?>
<RESPONSE>
  <RESULT>
    <Camera>
      <Active>true</Active>
      <Description>Kamera mot norr</Description>
      <Geometry>
        <SWEREF99TM>POINT (674130 6579686)</SWEREF99TM>
        <WGS84>POINT (18.0686 59.3293)</WGS84>
      </Geometry>
      <Id>SE_STA_CAMERA_1</Id>
      <Name>Essingeleden</Name>
      <PhotoUrl>https://api.trafikinfo.trafikverket.se/v1/Images/Camera_1.Jpeg</PhotoUrl>
      <Type>Trafikflödeskamera</Type>
      <ModifiedTime>2023-05-01T12:00:00.000+02:00</ModifiedTime>
      <CountyNo>1</CountyNo>
      <CountyNo>2</CountyNo>
    </Camera>
    <Camera>
      <Active>false</Active>
      <Id>SE_STA_CAMERA_2</Id>
      <Name>Södertäljevägen</Name>
    </Camera>
    <INFO>
      <LASTCHANGEID>7224512245718810705</LASTCHANGEID>
    </INFO>
  </RESULT>
</RESPONSE>
"""

ERROR_XML = """<RESPONSE>
  <RESULT>
    <ERROR>
      <SOURCE>Authentication</SOURCE>
      <MESSAGE>Invalid authentication key</MESSAGE>
    </ERROR>
  </RESULT>
</RESPONSE>
"""

TWO_RESULTS_XML = """<RESPONSE>
  <RESULT>
    <TrainStation>
      <AdvertisedLocationName>Stockholm C</AdvertisedLocationName>
      <LocationSignature>Cst</LocationSignature>
      <Advertised>true</Advertised>
    </TrainStation>
  </RESULT>
  <RESULT>
    <TrainStation>
      <AdvertisedLocationName>Göteborg C</AdvertisedLocationName>
      <LocationSignature>G</LocationSignature>
      <Advertised>true</Advertised>
    </TrainStation>
    <TrainStation>
      <AdvertisedLocationName>Malmö C</AdvertisedLocationName>
      <LocationSignature>M</LocationSignature>
      <Advertised>true</Advertised>
    </TrainStation>
  </RESULT>
</RESPONSE>
"""

MALFORMED_XML = "<RESPONSE><RESULT><Camera></RESULT>"

HTML_ERROR_PAGE = "<html><body><h1>502 Bad Gateway</h1></body></html>"

_ATTRIBUTE_RE = re.compile(r' ([^\s=]+)="([^"]*)"')


def query_attributes(document: str) -> list[tuple[str, str]]:
    """Return the (name, value) pairs of the QUERY element, in document order."""
    query_line = document.splitlines()[2]
    assert query_line.startswith("  <QUERY")
    return _ATTRIBUTE_RE.findall(query_line)


def broken_schema(record_model: object = int) -> ResultSchema:
    """A schema whose record model cannot back a decoder."""
    return ResultSchema(
        name="broken",
        category=Category.ROAD,
        object_type="Broken",
        schema_version="1",
        record_model=record_model,  # type: ignore[arg-type]
    )


class Widget(Record):
    name: str | None = None


def widget_schema() -> ResultSchema:
    return ResultSchema(
        name="widget",
        category=Category.ROAD,
        object_type="Widget",
        schema_version="2",
        record_model=Widget,
    )


@dataclass
class FakeService:
    """In-process stand-in for the XML API, served through ``httpx.MockTransport``.

    Records every request and answers with ``body``/``status_code``, or raises
    ``error`` when set.
    """

    body: str = CAMERA_XML
    status_code: int = 200
    error: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    @property
    def last_body(self) -> str:
        return self.requests[-1].content.decode("utf-8")
