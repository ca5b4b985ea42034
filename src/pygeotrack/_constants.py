"""Internal constants shared across the library."""

#: Seconds between the starts of two consecutive ticks.
DEFAULT_INTERVAL: float = 5.0

#: Per-request timeout applied by :class:`pygeotrack._transport.AiohttpTransport`.
DEFAULT_REQUEST_TIMEOUT: float = 15.0

USER_AGENT = "pygeotrack"

DEFAULT_INDICATOR_TITLE = "Location tracking"
DEFAULT_INDICATOR_DESCRIPTION = "Sharing your location with dispatch while the trip is active."

# ------------------------------------------------------------------
# Wire format of a location report
# ------------------------------------------------------------------

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
FIELD_LATITUDE = "lat"
FIELD_LONGITUDE = "long"
FIELD_DRIVER_ID = "driver_id"
FIELD_ORDER_ID = "order_id"


def bearer(token: str) -> str:
    """Return the ``Authorization`` header value for *token*."""
    return f"Bearer {token}"
