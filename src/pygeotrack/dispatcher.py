"""Formats location samples into reports and submits them."""

from __future__ import annotations

import logging

from pygeotrack._transport import Transport
from pygeotrack.config import TrackingConfig
from pygeotrack.exceptions import DeliveryFailedError, TrackerTransportError
from pygeotrack.models.location import LocationSample
from pygeotrack.models.report import ReportRequest
from pygeotrack.models.results import DeliveryResult

_logger = logging.getLogger(__name__)


def build_report_request(sample: LocationSample, config: TrackingConfig) -> ReportRequest:
    """Build the wire request for *sample*."""
    return ReportRequest(
        latitude=str(sample.latitude),
        longitude=str(sample.longitude),
        driver_id=config.driver_id,
        order_id=config.order_id,
        auth_token=config.auth_token,
    )


class ReportDispatcher:
    """Sends each sample once, fire-and-forget.

    Failures never raise: they come back as a :class:`DeliveryResult`
    whose ``error`` is a :class:`DeliveryFailedError`.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def send(self, sample: LocationSample, counter: int, config: TrackingConfig) -> DeliveryResult:
        request = build_report_request(sample, config)
        url = config.endpoint_url

        try:
            response = await self._transport.submit(url, request.headers(), request.encode_body())
        except TrackerTransportError as exc:
            error = DeliveryFailedError(f"Report #{counter} not delivered: {exc}", endpoint=url)
            error.__cause__ = exc
            _logger.warning("Report #%d delivery failed: %s", counter, exc)
            return DeliveryResult(counter=counter, request=request, error=error)
        except Exception as exc:
            error = DeliveryFailedError(f"Report #{counter} not delivered: {exc!r}", endpoint=url)
            error.__cause__ = exc
            _logger.warning("Report #%d delivery failed unexpectedly", counter, exc_info=True)
            return DeliveryResult(counter=counter, request=request, error=error)

        if not response.ok:
            error = DeliveryFailedError(
                f"Report #{counter} rejected: HTTP {response.status_code} {response.body[:200]}",
                status_code=response.status_code,
                endpoint=url,
            )
            _logger.warning("Report #%d rejected: HTTP %d", counter, response.status_code)
            return DeliveryResult(counter=counter, request=request, response=response, error=error)

        _logger.debug("Report #%d delivered (HTTP %d)", counter, response.status_code)
        return DeliveryResult(counter=counter, request=request, response=response)
