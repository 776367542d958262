from unittest.mock import MagicMock, patch

import pytest
import requests

from services import http


def _resp(status):
    resp = MagicMock()
    resp.status_code = status
    return resp


@patch("services.http.time.sleep")
@patch("services.http._session.request")
def test_retries_transient_status_then_succeeds(mock_request, mock_sleep):
    mock_request.side_effect = [_resp(503), _resp(429), _resp(200)]

    resp = http.request_with_retry("GET", "https://example.test", max_attempts=3, base_delay=0.01)

    assert resp.status_code == 200
    assert mock_request.call_count == 3
    assert mock_sleep.call_count == 2


@patch("services.http.time.sleep")
@patch("services.http._session.request")
def test_client_errors_are_not_retried(mock_request, mock_sleep):
    mock_request.return_value = _resp(404)

    resp = http.request_with_retry("GET", "https://example.test", max_attempts=3)

    assert resp.status_code == 404
    assert mock_request.call_count == 1
    mock_sleep.assert_not_called()


@patch("services.http.time.sleep")
@patch("services.http._session.request")
def test_last_retryable_response_is_returned(mock_request, mock_sleep):
    mock_request.return_value = _resp(500)

    resp = http.request_with_retry("GET", "https://example.test", max_attempts=2, base_delay=0.01)

    assert resp.status_code == 500
    assert mock_request.call_count == 2


@patch("services.http.time.sleep")
@patch("services.http._session.request")
def test_timeouts_raise_after_last_attempt(mock_request, mock_sleep):
    mock_request.side_effect = requests.Timeout("slow")

    with pytest.raises(requests.Timeout):
        http.request_with_retry("GET", "https://example.test", max_attempts=3, base_delay=0.01)

    assert mock_request.call_count == 3


@patch("services.http._session.request")
def test_timeout_is_passed_through(mock_request):
    mock_request.return_value = _resp(200)

    http.request_with_retry("HEAD", "https://example.test", timeout=2.5, max_attempts=1)

    _, kwargs = mock_request.call_args
    assert kwargs["timeout"] == 2.5
