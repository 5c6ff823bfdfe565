"""Text to typed value transforms for scraped result rows.

Every parser here is total: malformed or empty input yields the field's documented
default instead of raising, so callers never need a try block around them.
"""

import re

from ..models import NONSTOP, SeatAvailability, StopDescriptor

_FLIGHT_TOKEN_SPLIT = re.compile(r"[\s/,#|&]+")
_FLIGHT_TOKEN = re.compile(r"[A-Z0-9]{0,3}\d{1,4}[A-Z]?")
_STOPS = re.compile(r"(\d+)\s*stops?\b", re.IGNORECASE)
_SEATS = re.compile(r"(\d+)\s*(?:seats?\s*)?left", re.IGNORECASE)
_SOLD_OUT = re.compile(r"sold\s*out|no\s+seats", re.IGNORECASE)
_NO_PLANE_CHANGE = re.compile(r"no\s+plane\s+change|no\s+change\s+of\s+planes?|same\s+plane", re.IGNORECASE)
_PLANE_CHANGE = re.compile(r"change\s+planes?|plane\s+change", re.IGNORECASE)


def _clean(text: str | None) -> str:
    return " ".join(text.split()) if text else ""


def parse_flight_numbers(text: str | None) -> list[str]:
    """'AA123 AA456' -> ['AA123', 'AA456'], '# 1234 / 5678' -> ['1234', '5678']."""
    tokens = _FLIGHT_TOKEN_SPLIT.split(_clean(text).upper())
    return [token for token in tokens if token and _FLIGHT_TOKEN.fullmatch(token)]


def parse_num_stops(text: str | None) -> StopDescriptor:
    m = _STOPS.search(_clean(text))
    if not m:
        return NONSTOP
    stops = int(m.group(1))
    return stops if stops > 0 else NONSTOP


def parse_seats_left(text: str | None) -> SeatAvailability | None:
    cleaned = _clean(text)
    if m := _SEATS.search(cleaned):
        return int(m.group(1))
    if _SOLD_OUT.search(cleaned):
        return 0
    return None


def parse_plane_change(text: str | None) -> bool | None:
    cleaned = _clean(text)
    if not cleaned:
        return None
    if _NO_PLANE_CHANGE.search(cleaned):
        return False
    if _PLANE_CHANGE.search(cleaned):
        return True
    return None


def join_time(clock: str | None, meridiem: str | None) -> str:
    """'6:05' + 'PM' -> '6:05 PM'; missing parts are dropped."""
    return " ".join(part for part in (_clean(clock), _clean(meridiem)) if part)
