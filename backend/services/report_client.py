"""
Client for the sustainability report service.
"""
import logging
from typing import Any, Dict, Optional

import requests

from domain.models import ReportPayload
from settings import settings

logger = logging.getLogger(__name__)

GENERIC_REPORT_ERROR = "Failed to fetch sustainability report."

_session = requests.Session()


class ReportServiceError(Exception):
    """Report request failed; ``message`` is safe to show to the user."""

    def __init__(self, message: str = GENERIC_REPORT_ERROR, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_detail(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        detail = body["detail"]
        return detail if isinstance(detail, str) else None
    return None


def request_report(
    latitude: float,
    longitude: float,
    url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> ReportPayload:
    """
    POST a point to the report service and return the decoded payload.

    Raises ReportServiceError carrying the server's ``detail`` message when
    one is present, otherwise a generic message.
    """
    target = url or settings.REPORT_SERVICE_URL
    body: Dict[str, Any] = {"latitude": latitude, "longitude": longitude}
    try:
        resp = _session.post(
            target,
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=timeout or settings.REPORT_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        logger.warning("Report request to %s failed: %s", target, exc)
        raise ReportServiceError() from exc

    if not resp.ok:
        detail = _error_detail(resp)
        logger.warning(
            "Report service returned %s for lat=%s lon=%s: %s",
            resp.status_code,
            latitude,
            longitude,
            detail,
        )
        raise ReportServiceError(detail or GENERIC_REPORT_ERROR, status_code=resp.status_code)

    try:
        payload = resp.json()
    except ValueError as exc:
        logger.warning("Report service returned a non-JSON body for lat=%s lon=%s", latitude, longitude)
        raise ReportServiceError(status_code=resp.status_code) from exc

    if not isinstance(payload, dict):
        logger.warning("Report service returned %s instead of an object", type(payload).__name__)
        payload = {}
    logger.info("Report received for lat=%s lon=%s", latitude, longitude)
    return payload
