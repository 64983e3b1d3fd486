"""Coordinate normalisation: State Plane (US survey feet) or WGS84 pairs to GeoPoint."""

import logging
import math
from typing import Optional, Sequence, Tuple

from app.models.geo import BoundingBox, GeoPoint

logger = logging.getLogger(__name__)

US_SURVEY_FOOT_M = 1200.0 / 3937.0

# Accepted metro area; anything outside is rejected, not clamped
METRO_BOUNDS = BoundingBox(
    min_lat=40.45,
    max_lat=40.95,
    min_lng=-74.35,
    max_lng=-73.60,
)


class LambertConformalConic:
    """
    Two-standard-parallel Lambert Conformal Conic on an ellipsoid (Snyder, USGS PP 1395).

    Linear units of ``x``/``y`` are US survey feet; false easting/northing are
    given in meters as in the PROJ definition of the zone.
    """

    def __init__(
        self,
        lat_1: float,
        lat_2: float,
        lat_0: float,
        lon_0: float,
        x_0_m: float = 0.0,
        y_0_m: float = 0.0,
        a: float = 6378137.0,
        inv_f: float = 298.257222101,
    ):
        f = 1.0 / inv_f
        self.a = a
        self.e = math.sqrt(2 * f - f * f)
        self.lon_0 = math.radians(lon_0)
        self.x_0 = x_0_m
        self.y_0 = y_0_m

        phi_1 = math.radians(lat_1)
        phi_2 = math.radians(lat_2)
        m_1 = self._m(phi_1)
        m_2 = self._m(phi_2)
        t_0 = self._t(math.radians(lat_0))
        t_1 = self._t(phi_1)
        t_2 = self._t(phi_2)

        self.n = (math.log(m_1) - math.log(m_2)) / (math.log(t_1) - math.log(t_2))
        self.F = m_1 / (self.n * t_1 ** self.n)
        self.rho_0 = a * self.F * t_0 ** self.n

    def _m(self, phi: float) -> float:
        return math.cos(phi) / math.sqrt(1 - (self.e * math.sin(phi)) ** 2)

    def _t(self, phi: float) -> float:
        e_sin = self.e * math.sin(phi)
        return math.tan(math.pi / 4 - phi / 2) / ((1 - e_sin) / (1 + e_sin)) ** (self.e / 2)

    def inverse(self, x_ft: float, y_ft: float) -> Tuple[float, float]:
        """Projected feet -> (longitude, latitude) degrees."""
        x = x_ft * US_SURVEY_FOOT_M - self.x_0
        y = self.rho_0 - (y_ft * US_SURVEY_FOOT_M - self.y_0)

        sign = 1.0 if self.n > 0 else -1.0
        rho = sign * math.hypot(x, y)
        theta = math.atan2(sign * x, sign * y)
        t = (rho / (self.a * self.F)) ** (1 / self.n)

        phi = math.pi / 2 - 2 * math.atan(t)
        for _ in range(15):
            e_sin = self.e * math.sin(phi)
            next_phi = math.pi / 2 - 2 * math.atan(
                t * ((1 - e_sin) / (1 + e_sin)) ** (self.e / 2)
            )
            if abs(next_phi - phi) < 1e-12:
                phi = next_phi
                break
            phi = next_phi

        lam = theta / self.n + self.lon_0
        return math.degrees(lam), math.degrees(phi)

    def forward(self, lon: float, lat: float) -> Tuple[float, float]:
        """(longitude, latitude) degrees -> projected feet."""
        rho = self.a * self.F * self._t(math.radians(lat)) ** self.n
        theta = self.n * (math.radians(lon) - self.lon_0)
        x = rho * math.sin(theta) + self.x_0
        y = self.rho_0 - rho * math.cos(theta) + self.y_0
        return x / US_SURVEY_FOOT_M, y / US_SURVEY_FOOT_M


# NAD83 / New York Long Island (ftUS), EPSG:2263
NY_LONG_ISLAND = LambertConformalConic(
    lat_1=41.03333333333333,
    lat_2=40.66666666666666,
    lat_0=40.16666666666666,
    lon_0=-74.0,
    x_0_m=300000.0,
    y_0_m=0.0,
)


def is_projected(x: float, y: float) -> bool:
    """Pairs outside the degree range are State Plane feet."""
    return abs(x) > 180 or abs(y) > 90


def normalize(raw_pair: Sequence) -> Optional[GeoPoint]:
    """
    Convert a raw (x, y) vertex into a GeoPoint inside the metro bounds.

    Args:
        raw_pair: (longitude, latitude) in degrees, or (easting, northing) in
            State Plane US survey feet

    Returns:
        GeoPoint, or None when the pair is malformed or falls outside the metro area
    """
    try:
        x = float(raw_pair[0])
        y = float(raw_pair[1])
    except (TypeError, ValueError, IndexError, KeyError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None

    if is_projected(x, y):
        try:
            lng, lat = NY_LONG_ISLAND.inverse(x, y)
        except (ValueError, ZeroDivisionError, OverflowError):
            logger.debug(f"State Plane inverse failed for ({x}, {y})")
            return None
    else:
        lng, lat = x, y

    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    point = GeoPoint.from_lat_lng(lat, lng)
    if point is None or not METRO_BOUNDS.contains(point):
        return None
    return point


def to_state_plane(point: GeoPoint) -> Tuple[float, float]:
    """GeoPoint -> (easting, northing) in State Plane US survey feet."""
    return NY_LONG_ISLAND.forward(point.longitude, point.latitude)
