from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_provider, get_reference_data
from app.main import app
from app.models.geo import GeoPoint
from app.services.geo.loader import build_store
from app.services.provider.adapter import ProviderAdapter
from app.services.reference_data import ReferenceData
from app.services.schedule.book import ScheduleBook


def square(min_lng, min_lat, max_lng, max_lat):
    return [[min_lng, min_lat], [max_lng, min_lat], [max_lng, max_lat], [min_lng, max_lat]]


MIDTOWN_SOUTH = square(-73.995, 40.745, -73.980, 40.760)
MIDTOWN_NORTH = square(-73.995, 40.760, -73.980, 40.775)
FIRST_MAIN = square(-74.015, 40.700, -74.005, 40.710)
FIRST_ISLAND = square(-74.030, 40.690, -74.020, 40.695)

WEEK_HOURS = [
    {"day": "Sunday", "hours": "Closed", "isOpen": False},
    {"day": "Monday", "hours": "9am-5pm", "isOpen": True},
    {"day": "Tuesday", "hours": "9am-5pm", "isOpen": True},
    {"day": "Wednesday", "hours": "9am-5pm", "isOpen": True},
    {"day": "Thursday", "hours": "9am-5pm", "isOpen": True},
    {"day": "Friday", "hours": "9am-5pm", "isOpen": True},
    {"day": "Saturday", "hours": "10am-2pm", "isOpen": True},
]

RAW_PRECINCTS = [
    {
        "precinctNum": 1,
        "name": "1st Precinct",
        "address": "16 Ericsson Place",
        "phone": "212-334-0611",
        "borough": "Manhattan",
    },
    {
        "precinctNum": 14,
        "name": "Midtown South Precinct",
        "address": "357 West 35th Street",
        "phone": "212-239-9811",
        "borough": "Manhattan",
        "latitude": 40.7540,
        "longitude": -73.9935,
        "openingHours": WEEK_HOURS,
    },
    {
        "precinctNum": 18,
        "name": "Midtown North Precinct",
        "address": "306 West 54th Street",
        "phone": "212-767-8400",
        "borough": "Manhattan",
        "latitude": 40.7648,
        "longitude": -73.9843,
    },
    {
        "precinctNum": 120,
        "name": "120th Precinct",
        "address": "78 Richmond Terrace",
        "phone": "718-876-8500",
        "borough": "Staten Island",
        "latitude": 40.6363,
        "longitude": -74.0764,
    },
    # Corrupt seed rows
    {"precinctNum": 0, "name": "Broken"},
    {"precinctNum": "NaN", "name": "Also broken"},
]

RAW_BOUNDARIES = {
    "1": {"type": "MultiPolygon", "coordinates": [[FIRST_MAIN], [FIRST_ISLAND]]},
    "14": MIDTOWN_SOUTH,
    "18": [{"latitude": lat, "longitude": lng} for lng, lat in MIDTOWN_NORTH],
}

RAW_LOCATIONS = [{"num": 14, "lat": 40.7527, "lng": -73.9876}]


def sector_feature(pct, sector, geometry, **props):
    return {
        "type": "Feature",
        "properties": {"pct": pct, "sector": sector, **props},
        "geometry": geometry,
    }


RAW_SECTORS = {
    "type": "FeatureCollection",
    "features": [
        sector_feature(14, "14A", {"type": "Polygon", "coordinates": [square(-73.995, 40.745, -73.980, 40.7525)]},
                       patrol_bor="PBMS", phase="1", sq_miles="0.21"),
        sector_feature(14, "14B", {"type": "Polygon", "coordinates": [square(-73.995, 40.7525, -73.980, 40.760)]}),
        sector_feature("1", "1A", {"type": "MultiPolygon", "coordinates": [[FIRST_MAIN], [FIRST_ISLAND]]}),
        # Owned by a precinct that does not cover this area
        sector_feature(120, "120Z", {"type": "Polygon", "coordinates": [square(-73.960, 40.790, -73.950, 40.800)]}),
        sector_feature(None, "X", {"type": "Polygon", "coordinates": [MIDTOWN_SOUTH]}),
        sector_feature(14, "  ", {"type": "Polygon", "coordinates": [MIDTOWN_SOUTH]}),
    ],
}

RAW_SQUADS = [
    {"squadId": 2, "squadName": "Squad B", "displayOrder": 2},
    {"squadId": 1, "squadName": "Squad A", "displayOrder": 1},
    {"squadId": 3, "squadName": "Steady Days", "displayOrder": 3},
]

RAW_SCHEDULES = [
    {
        "scheduleId": 1,
        "squadId": 1,
        "patternType": "rotating",
        "cycleLength": 4,
        "patternArray": ["X", "X", "X", "O"],
        "anchorDate": "2024-01-01",
        "squadOffset": 0,
    },
    {
        "scheduleId": 2,
        "squadId": 2,
        "patternType": "rotating",
        "cycleLength": 4,
        "patternArray": "XXXO",
        "anchorDate": "2024-01-01",
        "squadOffset": 2,
    },
    {
        "scheduleId": 3,
        "squadId": 3,
        "patternType": "steady",
        "cycleLength": 7,
        "patternArray": ["O", "X", "X", "X", "X", "X", "O"],
        "anchorDate": "2024-01-01",
        "squadOffset": 0,
    },
    {"scheduleId": 4, "squadId": 9, "patternType": "weekly", "anchorDate": "2024-01-01"},
]


class FakeProvider(ProviderAdapter):
    def __init__(
        self,
        hint: Optional[int] = None,
        geocodes: Optional[Dict[str, GeoPoint]] = None,
        address: Optional[str] = None,
    ):
        self.hint = hint
        self.geocodes = geocodes or {}
        self.address = address
        self.hint_calls = 0

    def find_nearest_named_place(self, point, keyword):
        self.hint_calls += 1
        return self.hint

    def forward_geocode(self, address):
        return self.geocodes.get(address)

    def reverse_geocode(self, point):
        return self.address


class FailingProvider(ProviderAdapter):
    def find_nearest_named_place(self, point, keyword):
        raise TimeoutError("provider timed out")

    def forward_geocode(self, address):
        raise ConnectionError("provider unreachable")

    def reverse_geocode(self, point):
        raise ConnectionError("provider unreachable")


@pytest.fixture(scope="session")
def store():
    return build_store(RAW_PRECINCTS, RAW_BOUNDARIES, RAW_LOCATIONS, RAW_SECTORS)


@pytest.fixture(scope="session")
def schedule_book():
    return ScheduleBook.from_records(RAW_SQUADS, RAW_SCHEDULES)


@pytest.fixture(scope="session")
def reference_data(store, schedule_book):
    return ReferenceData(store=store, schedules=schedule_book)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def client(reference_data, provider):
    app.dependency_overrides[get_reference_data] = lambda: reference_data
    app.dependency_overrides[get_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()
