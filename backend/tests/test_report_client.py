from unittest.mock import MagicMock, patch

import pytest
import requests

from services.report_client import GENERIC_REPORT_ERROR, ReportServiceError, request_report


def _response(status_code, payload=None, json_error=False):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if json_error:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = payload
    return resp


@patch("services.report_client._session.post")
def test_posts_coordinates_and_returns_payload(mock_post):
    mock_post.return_value = _response(200, {"report": {}, "recommendations": ""})

    payload = request_report(12.5, 77.25, url="http://reports.test/sustainability-result")

    assert payload == {"report": {}, "recommendations": ""}
    args, kwargs = mock_post.call_args
    assert args[0] == "http://reports.test/sustainability-result"
    assert kwargs["json"] == {"latitude": 12.5, "longitude": 77.25}
    assert kwargs["headers"]["Content-Type"] == "application/json"


@patch("services.report_client._session.post")
def test_error_detail_is_surfaced(mock_post):
    mock_post.return_value = _response(400, {"detail": "Invalid coordinates"})
    with pytest.raises(ReportServiceError) as excinfo:
        request_report(1.0, 2.0)
    assert excinfo.value.message == "Invalid coordinates"
    assert excinfo.value.status_code == 400


@patch("services.report_client._session.post")
def test_error_without_detail_uses_generic_message(mock_post):
    mock_post.return_value = _response(500, json_error=True)
    with pytest.raises(ReportServiceError) as excinfo:
        request_report(1.0, 2.0)
    assert excinfo.value.message == GENERIC_REPORT_ERROR


@patch("services.report_client._session.post")
def test_network_failure_uses_generic_message(mock_post):
    mock_post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(ReportServiceError) as excinfo:
        request_report(1.0, 2.0)
    assert excinfo.value.message == GENERIC_REPORT_ERROR
    assert excinfo.value.status_code is None


@patch("services.report_client._session.post")
def test_non_object_body_becomes_empty_payload(mock_post):
    mock_post.return_value = _response(200, ["unexpected"])
    assert request_report(1.0, 2.0) == {}
