import pytest

from domain.models import GeoPoint
from services.maps_url import (
    extract_coordinates,
    extract_feature_id,
    extract_place_name,
    guess_category,
    is_http_url,
)

RESOLVED = (
    "https://maps.example/place/Blue+Bottle/@37.7,-122.4,17z/"
    "data=!4m6!3m5!1sABC123:DEF!2sBlue!8m2!3d37.7!4d-122.4"
)


def test_extract_feature_id_stops_at_next_bang():
    assert extract_feature_id(RESOLVED) == "ABC123:DEF"


def test_extract_feature_id_runs_to_end_of_string():
    assert extract_feature_id("https://maps.example/data=!3m1!1s0x1:0x2") == "0x1:0x2"


def test_extract_feature_id_decodes_percent_encoding():
    assert extract_feature_id("https://maps.example/data=!1s0x1%3A0x2!2s") == "0x1:0x2"


def test_extract_feature_id_missing_segment():
    assert extract_feature_id("https://maps.example/place/Blue+Bottle/@37.7,-122.4,17z") is None


def test_extract_place_name_replaces_plus_and_stops_at_at_sign():
    assert extract_place_name(RESOLVED) == "Blue Bottle"
    assert extract_place_name("https://maps.example/place/Caf%C3%A9+Lumi@1.0,2.0") == "Café Lumi"


def test_extract_place_name_absent():
    assert extract_place_name("https://maps.example/search/coffee") is None


def test_extract_coordinates():
    assert extract_coordinates(RESOLVED) == GeoPoint(lat=37.7, lon=-122.4)
    assert extract_coordinates("https://maps.example/place/X/@-33.8688,151.2093,15z") == GeoPoint(
        lat=-33.8688, lon=151.2093
    )


@pytest.mark.parametrize(
    "url",
    [
        "https://maps.example/place/X/",
        "https://maps.example/place/X/@37,-122,17z",  # integers only
        "https://maps.example/place/X/@95.0,10.0,17z",  # latitude out of range
    ],
)
def test_extract_coordinates_best_effort(url):
    assert extract_coordinates(url) is None


def test_guess_category():
    assert guess_category("https://maps.example/place/Blue+Bottle+Coffee") == "Cafe"
    assert guess_category("https://maps.example/place/Luigi's+Restaurant") == "Restaurant"
    assert guess_category("https://maps.example/place/Grand+Hotel") == "Hotel"
    assert guess_category("https://maps.example/place/City+Library") == "Place"


def test_is_http_url():
    assert is_http_url("https://maps.app.goo.gl/abc")
    assert is_http_url("  http://goo.gl/maps/xyz ")
    assert not is_http_url("")
    assert not is_http_url(None)
    assert not is_http_url("maps.app.goo.gl/abc")
    assert not is_http_url("ftp://example.com/x")
