"""Shape handling shared by the reference table loaders."""

from typing import Any, List, Mapping


def as_records(raw: Any) -> List[Mapping[str, Any]]:
    """Tables arrive either as a list of records or as a mapping keyed by id."""
    if isinstance(raw, Mapping):
        raw = list(raw.values())
    if not isinstance(raw, list):
        return []
    return [r for r in raw if isinstance(r, Mapping)]
