import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock

import pytest
import requests

from app.core.config import Settings
from app.models.geo import GeoPoint
from app.services.provider.adapter import (
    GoogleMapsProviderAdapter,
    NullProviderAdapter,
    build_provider,
)
from app.services.provider.google_maps_client import GoogleMapsClient

NYC_BOUNDS = (40.49, -74.26, 40.92, -73.70)


def ok_response(body):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = body
    return response


def make_client(*side_effect):
    session = MagicMock()
    session.get.side_effect = list(side_effect)
    client = GoogleMapsClient(api_key="test-key", session=session, strict_timeout=1.0, lenient_timeout=5.0)
    return client, session


def test_nearby_search_sends_distance_ranked_query():
    client, session = make_client(ok_response({"status": "OK", "results": [{"name": "NYPD 5th Precinct"}]}))

    results = client.nearby_search(40.71, -73.99, "NYPD precinct")

    assert results == [{"name": "NYPD 5th Precinct"}]
    url = session.get.call_args.args[0]
    params = session.get.call_args.kwargs["params"]
    assert url == "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    assert params == {
        "location": "40.71,-73.99",
        "rankby": "distance",
        "keyword": "NYPD precinct",
        "key": "test-key",
    }
    assert session.get.call_args.kwargs["timeout"] == 1.0


@pytest.mark.parametrize(
    "body",
    [
        {"status": "ZERO_RESULTS", "results": []},
        {"status": "OK", "results": []},
        {"status": "REQUEST_DENIED"},
        {"status": "OK", "results": "garbage"},
    ],
)
def test_non_ok_envelopes_are_not_found(body):
    client, _ = make_client(ok_response(body))
    assert client.reverse_geocode(40.7, -73.9) == []


def test_timeout_retries_with_lenient_budget():
    client, session = make_client(
        requests.exceptions.Timeout("slow"),
        ok_response({"status": "OK", "results": [{"formatted_address": "1 Police Plaza"}]}),
    )

    assert client.reverse_geocode(40.7, -73.9) == [{"formatted_address": "1 Police Plaza"}]
    timeouts = [c.kwargs["timeout"] for c in session.get.call_args_list]
    assert timeouts == [1.0, 5.0]


def test_both_attempts_failing_returns_nothing():
    client, session = make_client(
        requests.exceptions.ConnectionError("down"),
        requests.exceptions.Timeout("still down"),
    )
    assert client.nearby_search(40.7, -73.9, "NYPD precinct") == []
    assert session.get.call_count == 2


def test_http_error_is_not_retried():
    response = MagicMock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("403")
    client, session = make_client(response)

    assert client.geocode("1 Main St") == []
    assert session.get.call_count == 1


def test_malformed_json_is_not_found():
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.side_effect = ValueError("not json")
    client, _ = make_client(response)
    assert client.geocode("1 Main St") == []


def send_json(handler, status, body):
    payload = json.dumps(body).encode("utf-8")
    try:
        handler.send_response(status)
        handler.send_header("Content-Type", "application/json")
        handler.send_header("Content-Length", str(len(payload)))
        handler.end_headers()
        handler.wfile.write(payload)
    except (BrokenPipeError, ConnectionResetError):
        # Client already gave up on this request
        pass


def counting_handler(respond):
    hits = []

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            hits.append(self.path)
            respond(self, len(hits))

        def log_message(self, format, *args):
            pass

    return Handler, hits


@pytest.fixture
def local_server():
    servers = []

    def start(handler):
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_address[1]}"

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def test_slow_provider_stays_within_timeout_budget(local_server):
    """Timeouts are not retried by the transport, only by the strict/lenient pair"""

    def respond_slowly(handler, hit):
        time.sleep(1.0)
        send_json(handler, 200, {"status": "OK", "results": []})

    handler, hits = counting_handler(respond_slowly)
    client = GoogleMapsClient(
        api_key="test-key",
        base_url=local_server(handler),
        strict_timeout=0.2,
        lenient_timeout=0.4,
        max_retries=2,
    )

    started = time.monotonic()
    assert client.reverse_geocode(40.7, -73.9) == []
    elapsed = time.monotonic() - started

    assert len(hits) == 2
    assert elapsed < 1.5


def test_server_errors_are_retried_by_transport(local_server):
    def respond(handler, hit):
        if hit == 1:
            send_json(handler, 503, {})
        else:
            send_json(handler, 200, {"status": "OK", "results": [{"formatted_address": "1 Police Plaza"}]})

    handler, hits = counting_handler(respond)
    client = GoogleMapsClient(api_key="test-key", base_url=local_server(handler), max_retries=2)

    assert client.reverse_geocode(40.7, -73.9) == [{"formatted_address": "1 Police Plaza"}]
    assert len(hits) == 2



def geocode_result(lat, lng, address="somewhere"):
    return {"formatted_address": address, "geometry": {"location": {"lat": lat, "lng": lng}}}


@pytest.fixture
def maps_client():
    return MagicMock(spec=GoogleMapsClient)


@pytest.fixture
def adapter(maps_client):
    return GoogleMapsProviderAdapter(maps_client, geocode_bounds=NYC_BOUNDS)


def test_find_nearest_named_place(adapter, maps_client):
    maps_client.nearby_search.return_value = [
        {"name": "Deli"},
        {"name": "NYPD Housing Bureau PSA 4"},
        {"name": "NYPD - 13th Precinct"},
        {"name": "NYPD - 10th Precinct"},
    ]
    assert adapter.find_nearest_named_place(GeoPoint(40.736, -73.984), "NYPD precinct") == 13
    maps_client.nearby_search.assert_called_once_with(40.736, -73.984, "NYPD precinct")


def test_find_nearest_named_place_errors_are_swallowed(adapter, maps_client):
    maps_client.nearby_search.side_effect = RuntimeError("boom")
    assert adapter.find_nearest_named_place(GeoPoint(40.7, -73.9), "NYPD precinct") is None


def test_forward_geocode_appends_city_and_sends_filters(adapter, maps_client):
    maps_client.geocode.return_value = [geocode_result(40.7075, -74.0113)]

    point = adapter.forward_geocode("  1 Wall St ")

    assert point == GeoPoint(40.7075, -74.0113)
    maps_client.geocode.assert_called_once_with(
        "1 Wall St, New York City, NY",
        bounds="40.49,-74.26|40.92,-73.7",
        components="country:US|administrative_area:NY",
    )


def test_forward_geocode_keeps_queries_naming_the_city(adapter, maps_client):
    maps_client.geocode.return_value = [geocode_result(40.7, -73.9)]
    adapter.forward_geocode("100 Centre St, New York, NY")
    assert maps_client.geocode.call_args.args[0] == "100 Centre St, New York, NY"


def test_forward_geocode_prefers_first_in_bounds_candidate(adapter, maps_client):
    maps_client.geocode.return_value = [
        geocode_result(42.65, -73.75),  # Albany
        geocode_result(40.75, -73.99),
        geocode_result(40.80, -73.95),
    ]
    assert adapter.forward_geocode("Broadway") == GeoPoint(40.75, -73.99)


def test_forward_geocode_rejects_out_of_bounds(adapter, maps_client):
    maps_client.geocode.return_value = [geocode_result(42.65, -73.75)]
    assert adapter.forward_geocode("State St") is None

    maps_client.geocode.return_value = []
    assert adapter.forward_geocode("Nowhere") is None
    assert adapter.forward_geocode("   ") is None


def test_reverse_geocode(adapter, maps_client):
    maps_client.reverse_geocode.return_value = [{"types": []}, geocode_result(40.7, -73.9, "1 Police Plaza")]
    assert adapter.reverse_geocode(GeoPoint(40.7, -73.9)) == "1 Police Plaza"

    maps_client.reverse_geocode.side_effect = RuntimeError("boom")
    assert adapter.reverse_geocode(GeoPoint(40.7, -73.9)) is None


def test_build_provider_without_key_is_null():
    assert isinstance(build_provider(Settings(google_maps_api_key="")), NullProviderAdapter)
    assert isinstance(build_provider(Settings(google_maps_api_key="abc")), GoogleMapsProviderAdapter)


def test_null_provider_answers_nothing():
    provider = NullProviderAdapter()
    assert provider.find_nearest_named_place(GeoPoint(40.7, -73.9), "NYPD precinct") is None
    assert provider.forward_geocode("1 Main St") is None
    assert provider.reverse_geocode(GeoPoint(40.7, -73.9)) is None
