from unittest.mock import MagicMock, patch

import pytest
import requests

from domain.errors import IdentifierNotFound, LookupUnavailable
from domain.models import GeoPoint
from services.places_client import GooglePlacesClient, place_from_payload

DETAILS_NEW = {
    "id": "XYZ1",
    "displayName": {"text": "Blue Bottle Coffee", "languageCode": "en"},
    "formattedAddress": "123 Main St",
    "location": {"latitude": 37.7765, "longitude": -122.4233},
    "websiteUri": "https://bluebottlecoffee.com",
    "nationalPhoneNumber": "(510) 555-0100",
    "regularOpeningHours": {
        "weekdayDescriptions": [
            "Monday: 7:00 AM – 6:00 PM",
            "Tuesday: 7:00 AM – 6:00 PM",
            "Sunday: Closed",
        ]
    },
    "rating": 4.5,
    "userRatingCount": 1234,
}


def _resp(status, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    return resp


def test_place_from_payload_new_api_shape():
    place = place_from_payload("XYZ1", DETAILS_NEW)
    assert place.place_id == "XYZ1"
    assert place.name == "Blue Bottle Coffee"
    assert place.formatted_address == "123 Main St"
    assert place.location == GeoPoint(lat=37.7765, lon=-122.4233)
    assert place.website == "https://bluebottlecoffee.com"
    assert place.phone == "(510) 555-0100"
    assert place.opening_hours == {
        "Monday": "7:00 AM – 6:00 PM",
        "Tuesday": "7:00 AM – 6:00 PM",
        "Sunday": "Closed",
    }
    assert place.rating == 4.5
    assert place.rating_count == 1234
    assert place.raw["displayName"]["text"] == "Blue Bottle Coffee"


def test_place_from_payload_legacy_shape():
    legacy = {
        "name": "Old Cafe",
        "formatted_address": "1 Old Rd",
        "geometry": {"location": {"lat": 1.5, "lng": 103.8}},
        "formatted_phone_number": "555",
        "opening_hours": {"weekday_text": ["Monday: 9 AM – 5 PM"]},
        "user_ratings_total": "42",
    }
    place = place_from_payload("OLD1", legacy)
    assert place.name == "Old Cafe"
    assert place.location == GeoPoint(lat=1.5, lon=103.8)
    assert place.phone == "555"
    assert place.opening_hours == {"Monday": "9 AM – 5 PM"}
    assert place.rating is None
    assert place.rating_count == 42


def test_place_from_payload_drops_out_of_range_rating():
    place = place_from_payload("X", {"rating": 7.0, "userRatingCount": -1})
    assert place.rating is None
    assert place.rating_count is None
    assert place.location is None
    assert place.opening_hours is None


@patch("services.places_client.request_with_retry")
def test_find_place_id_returns_top_result(mock_request):
    mock_request.return_value = _resp(200, {"places": [{"id": "XYZ1"}, {"id": "XYZ2"}]})
    client = GooglePlacesClient(api_key="k", base_url="https://places.test/v1")

    assert client.find_place_id_from_text("Blue Bottle downtown cafe") == "XYZ1"

    args, kwargs = mock_request.call_args
    assert args == ("POST", "https://places.test/v1/places:searchText")
    assert kwargs["json"] == {"textQuery": "Blue Bottle downtown cafe"}
    assert kwargs["headers"]["X-Goog-Api-Key"] == "k"
    assert kwargs["headers"]["X-Goog-FieldMask"] == "places.id"


@patch("services.places_client.request_with_retry")
def test_find_place_id_zero_results_is_none(mock_request):
    mock_request.return_value = _resp(200, {})
    client = GooglePlacesClient(api_key="k")
    assert client.find_place_id_from_text("nowhere") is None


@patch("services.places_client.request_with_retry")
def test_find_place_id_auth_error_is_unavailable(mock_request):
    mock_request.return_value = _resp(403, {"error": {"status": "PERMISSION_DENIED"}})
    client = GooglePlacesClient(api_key="bad")
    with pytest.raises(LookupUnavailable):
        client.find_place_id_from_text("Blue Bottle")


@patch("services.places_client.request_with_retry")
def test_transport_error_is_unavailable(mock_request):
    mock_request.side_effect = requests.ConnectionError("down")
    client = GooglePlacesClient(api_key="k")
    with pytest.raises(LookupUnavailable) as excinfo:
        client.get_place_details("XYZ1")
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_missing_api_key_is_unavailable():
    client = GooglePlacesClient(api_key="")
    with pytest.raises(LookupUnavailable):
        client.find_place_id_from_text("Blue Bottle")


@patch("services.places_client.request_with_retry")
def test_get_place_details_maps_payload(mock_request):
    mock_request.return_value = _resp(200, DETAILS_NEW)
    client = GooglePlacesClient(api_key="k", base_url="https://places.test/v1")

    place = client.get_place_details("XYZ1")

    assert place.name == "Blue Bottle Coffee"
    args, kwargs = mock_request.call_args
    assert args == ("GET", "https://places.test/v1/places/XYZ1")
    assert "regularOpeningHours" in kwargs["headers"]["X-Goog-FieldMask"]


@patch("services.places_client.request_with_retry")
def test_get_place_details_unknown_id(mock_request):
    mock_request.return_value = _resp(404, {"error": {"status": "NOT_FOUND"}})
    client = GooglePlacesClient(api_key="k")
    with pytest.raises(IdentifierNotFound):
        client.get_place_details("gone")
