"""Extract NYPD precinct numbers from place names returned by the places search."""

import re
from typing import Iterable, Optional

VALID_PRECINCT_NUMS = frozenset([
    1, 5, 6, 7, 9, 10, 13, 14, 17, 18, 19, 20, 22, 23, 24, 25, 26, 28, 30, 32, 33, 34,
    40, 41, 42, 43, 44, 45, 46, 47, 48, 49, 50, 52,
    60, 61, 62, 63, 66, 67, 68, 69, 70, 71, 72, 73, 75, 76, 77, 78, 79, 81, 83, 84, 88, 90, 94,
    100, 101, 102, 103, 104, 105, 106, 107, 108, 109, 110, 111, 112, 113, 114, 115, 116,
    120, 121, 122,
])

# Precincts whose names carry no number: (words that must all appear, precinct number)
NAMED_PRECINCTS = (
    (("midtown", "south"), 14),
    (("midtown", "north"), 18),
    (("central park",), 22),
)

ORDINAL_PRECINCT_RE = re.compile(r"(\d+)\s*(?:st|nd|rd|th)?\s*(?:precinct|pct)", re.IGNORECASE)
ANY_NUMBER_RE = re.compile(r"(\d+)")
SHORT_NUMBER_RE = re.compile(r"\b(\d{1,3})\b")


def extract_precinct_num(name: str) -> Optional[int]:
    """
    Best-guess precinct number for a place name.

    Order: named precincts, "<n>th precinct"/"<n> pct", any number in a name
    mentioning "precinct", and finally a 1-3 digit number in an NYPD/police
    name that is a known precinct.
    """
    lower = name.lower()

    for words, number in NAMED_PRECINCTS:
        if all(word in lower for word in words):
            return number

    match = ORDINAL_PRECINCT_RE.search(name)
    if match:
        return int(match.group(1))

    match = ANY_NUMBER_RE.search(name)
    if match and "precinct" in lower:
        return int(match.group(1))

    if "nypd" in lower or "police" in lower:
        match = SHORT_NUMBER_RE.search(name)
        if match:
            number = int(match.group(1))
            if number in VALID_PRECINCT_NUMS:
                return number

    return None


def first_precinct_num(names: Iterable[str]) -> Optional[int]:
    """First name (in the given order) yielding a valid precinct number."""
    for name in names:
        number = extract_precinct_num(name)
        if number is not None and number in VALID_PRECINCT_NUMS:
            return number
    return None
