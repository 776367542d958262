from unittest.mock import MagicMock, patch

import requests

from services.link_follower import RedirectFollower


def _resp(location=None, status=302):
    resp = MagicMock()
    resp.status_code = status if location else 200
    resp.headers = {"Location": location} if location else {}
    return resp


@patch("services.link_follower.request_with_retry")
def test_follows_location_headers_until_final(mock_request):
    mock_request.side_effect = [
        _resp("https://goo.gl/maps/step"),
        _resp("https://www.google.com/maps/place/X/data=!1sF1"),
        _resp(None),
    ]
    follower = RedirectFollower(max_redirects=5)

    assert follower.follow("https://maps.app.goo.gl/abc") == "https://www.google.com/maps/place/X/data=!1sF1"
    methods = [c.args[0] for c in mock_request.call_args_list]
    assert methods == ["HEAD", "HEAD", "HEAD"]
    assert all(c.kwargs["allow_redirects"] is False for c in mock_request.call_args_list)


@patch("services.link_follower.request_with_retry")
def test_falls_back_to_get_when_head_has_no_location(mock_request):
    mock_request.side_effect = [
        _resp(None),
        _resp("https://www.google.com/maps/place/X/data=!1sF1"),
        _resp(None),
    ]
    follower = RedirectFollower(max_redirects=5)

    assert follower.follow("https://maps.app.goo.gl/abc") == "https://www.google.com/maps/place/X/data=!1sF1"
    methods = [c.args[0] for c in mock_request.call_args_list]
    assert methods == ["HEAD", "GET", "HEAD"]


@patch("services.link_follower.request_with_retry")
def test_no_redirect_returns_input_url(mock_request):
    mock_request.return_value = _resp(None)
    url = "https://www.google.com/maps/place/X/data=!1sF1"

    assert RedirectFollower().follow(url) == url


@patch("services.link_follower.request_with_retry")
def test_relative_location_is_joined(mock_request):
    mock_request.side_effect = [_resp("/maps/place/X/data=!1sF1"), _resp(None)]

    resolved = RedirectFollower().follow("https://www.google.com/maps?cid=1")

    assert resolved == "https://www.google.com/maps/place/X/data=!1sF1"


@patch("services.link_follower.request_with_retry")
def test_transport_error_keeps_last_url(mock_request):
    mock_request.side_effect = requests.ConnectionError("offline")
    url = "https://maps.app.goo.gl/abc"

    assert RedirectFollower().follow(url) == url


@patch("services.link_follower.request_with_retry")
def test_redirect_hops_are_bounded(mock_request):
    mock_request.side_effect = [_resp(f"https://example.test/{i}") for i in range(10)]

    resolved = RedirectFollower(max_redirects=3).follow("https://example.test/start")

    assert resolved == "https://example.test/2"
    assert mock_request.call_count == 3
