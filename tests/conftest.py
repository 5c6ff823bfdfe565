"""
Shared fixtures for scraper tests.

Results pages are built as static HTML mirroring the live booking page structure, and
queried through HtmlPageQuery so no browser is needed.
"""

from unittest.mock import MagicMock

import pytest

from farescrape.scraping.page_query import HtmlPageQuery


def _tier_html(price: str | None, seats: str | None) -> str:
    price_html = f"<span><span>$</span><span>{price}</span></span>" if price is not None else ""
    seats_html = f"<div><span>{seats}</span></div>" if seats is not None else ""
    return (
        "<div><button><span><span><span>"
        f"<span><span>Fare</span>{price_html}</span>{seats_html}"
        "</span></span></span></button></div>"
    )


def _time_html(clock: str | None, meridiem: str | None) -> str:
    if clock is None and meridiem is None:
        return "<div></div>"
    meridiem_html = f"<span>{meridiem}</span>" if meridiem is not None else ""
    return f"<div><span>{clock or ''}<span>Time</span>{meridiem_html}</span></div>"


def _row_html(row: dict) -> str:
    flight = row.get("flight")
    stops = row.get("stops")
    plane = row.get("plane_change")
    duration = row.get("duration")
    flight_html = (
        f"<div><div><div><button><span>{flight}</span><span>Opens flight details</span></button></div></div></div>"
        if flight is not None else "<div></div>"
    )
    stops_html = f"<div><button><span><div>{stops}</div></span></button></div>" if stops is not None else "<div></div>"
    plane_html = f"<div>{plane}</div>" if plane is not None else ""
    return (
        '<li class="air-booking-select-detail">'
        + flight_html
        + _time_html(row.get("departure"), row.get("departure_meridiem"))
        + _time_html(row.get("arrival"), row.get("arrival_meridiem"))
        + f"<div>{stops_html}{plane_html}</div>"
        + (f"<div>{duration}</div>" if duration is not None else "<div></div>")
        + "</li>"
    )


def build_results_page(rows: list[dict]) -> str:
    """HTML results page; each row dict may omit any field to simulate a selector miss.

    row["tiers"] is a list of (price, seats) pairs, None entries meaning the element is absent.
    """
    items = "".join(_row_html(row) for row in rows)
    fares = "".join(
        f'<div id="air-booking-fares-0-{i}">'
        + "".join(_tier_html(price, seats) for price, seats in row.get("tiers", []))
        + "</div>"
        for i, row in enumerate(rows, start=1)
    )
    return (
        "<html><body>"
        '<div id="air-booking-product-0">'
        "<div></div><div></div><div></div><div></div><div></div>"
        f"<div><span><span><ul>{items}</ul></span></span></div>"
        "</div>"
        f"{fares}"
        "</body></html>"
    )


FULL_ROW = {
    "flight": "# 1234 / 5678",
    "departure": "6:05",
    "departure_meridiem": "AM",
    "arrival": "9:40",
    "arrival_meridiem": "AM",
    "stops": "1 stop",
    "plane_change": "Change planes MDW",
    "duration": "3h 35m",
    "tiers": [("129", "3 left"), ("159", None), ("289", "1 seat left")],
}

BARE_ROW = {
    "flight": "WN 910",
    "departure": "1:15",
    "departure_meridiem": "PM",
    "arrival": "2:20",
    "arrival_meridiem": "PM",
    "duration": "1h 5m",
}


@pytest.fixture
def two_row_html():
    return build_results_page([FULL_ROW, BARE_ROW])


@pytest.fixture
def two_row_query(two_row_html):
    return HtmlPageQuery(two_row_html)


@pytest.fixture
def empty_html():
    return build_results_page([])


class FakeSession:
    """Stands in for BrowserSession; counts how often it is closed."""

    def __init__(self, page):
        self.page = page
        self.closes = 0
        self.snapshots: list[str] = []

    def save_snapshot(self, directory, label):
        self.snapshots.append(label)
        return directory / f"{label}.html"

    def close(self):
        self.closes += 1


def make_page(url: str) -> MagicMock:
    page = MagicMock()
    page.url = url
    page.viewport_size = {"width": 1280, "height": 800}
    return page


def make_client(*responses) -> MagicMock:
    """Supabase client mock; each response is either a data payload or an exception to raise."""
    client = MagicMock()
    effects = [r if isinstance(r, Exception) else MagicMock(data=r) for r in responses]
    client.table.return_value.insert.return_value.execute.side_effect = effects
    return client
