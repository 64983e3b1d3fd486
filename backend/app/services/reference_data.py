"""Load the static reference tables from the data directory."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from app.core.config import Settings
from app.services.geo.loader import build_store
from app.services.geo.polygon_store import PolygonStore
from app.services.schedule.book import ScheduleBook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceData:
    """Everything loaded at startup; immutable for the lifetime of the process."""

    store: PolygonStore
    schedules: ScheduleBook

    @classmethod
    def empty(cls) -> "ReferenceData":
        return cls(PolygonStore([], []), ScheduleBook([], []))


def read_json(path: Path) -> Optional[Any]:
    """Parsed JSON file, or None (with a warning) when missing or unreadable."""
    if not path.exists():
        logger.warning(f"Reference file not found: {path}")
        return None
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read reference file {path}: {str(e)}")
        return None


def load_reference_data(settings: Settings) -> ReferenceData:
    data_dir = Path(settings.data_dir)
    logger.info(f"Loading reference data from {data_dir.resolve()}")

    store = build_store(
        raw_precincts=read_json(data_dir / settings.precinct_data_file),
        raw_boundaries=read_json(data_dir / settings.precinct_boundaries_file),
        raw_locations=read_json(data_dir / settings.precinct_locations_file),
        raw_sectors=read_json(data_dir / settings.sectors_file),
    )
    schedules = ScheduleBook.from_records(
        read_json(data_dir / settings.squads_file),
        read_json(data_dir / settings.rdo_schedules_file),
    )

    if store.is_empty:
        logger.error("No precincts loaded; jurisdiction resolution will return no precinct")
    return ReferenceData(store=store, schedules=schedules)
