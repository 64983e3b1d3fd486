"""Boundary geometry, coordinate normalisation and the polygon store."""

from app.services.geo.coordinates import normalize
from app.services.geo.loader import build_store
from app.services.geo.polygon_store import PolygonStore

__all__ = ["normalize", "build_store", "PolygonStore"]
