"""Wire-level report request and transport response."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from pygeotrack._constants import (
    FIELD_DRIVER_ID,
    FIELD_LATITUDE,
    FIELD_LONGITUDE,
    FIELD_ORDER_ID,
    FORM_CONTENT_TYPE,
    bearer,
)


class ReportRequest(BaseModel):
    """One location report as sent to the collection endpoint.

    Coordinates are carried as strings because the endpoint receives a
    form-encoded body.  The auth token is excluded from ``repr`` so a
    request can be logged safely.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    latitude: str
    longitude: str
    driver_id: str
    order_id: str
    auth_token: str = Field(repr=False)

    def form_fields(self) -> dict[str, str]:
        return {
            FIELD_LATITUDE: self.latitude,
            FIELD_LONGITUDE: self.longitude,
            FIELD_DRIVER_ID: self.driver_id,
            FIELD_ORDER_ID: self.order_id,
        }

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": bearer(self.auth_token),
            "Content-Type": FORM_CONTENT_TYPE,
        }

    def encode_body(self) -> str:
        """Form-encode :meth:`form_fields` in wire order."""
        return urlencode(self.form_fields())


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status and body returned by a transport submission."""

    status_code: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
