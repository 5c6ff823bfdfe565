"""Row enumeration and per-row field extraction for a results page.

A locator that matches nothing is not an error: each field falls back to its default
so partial page data still yields a well-formed record. Anything else that goes wrong
while reading a row is isolated to that row.
"""

import logging
from typing import Callable, TypeVar

from ..models import FARE_TIERS, NONSTOP, PRICE_UNAVAILABLE, FareMetadata, FlightRecord, RowOutcome
from ..processing.normalize import (
    join_time,
    parse_flight_numbers,
    parse_num_stops,
    parse_plane_change,
    parse_seats_left,
)
from .layouts import ResultsLayout
from .page_query import PageQuery

T = TypeVar("T")


def count_rows(query: PageQuery, layout: ResultsLayout) -> int:
    return query.count(layout.row_containers)


class FieldExtractor:
    def __init__(self, query: PageQuery, layout: ResultsLayout, departure_port: str, arrival_port: str,
                 date_str: str):
        self.query = query
        self.layout = layout
        self.departure_port = departure_port
        self.arrival_port = arrival_port
        self.date_str = date_str

    def _text(self, xpath: str) -> str | None:
        texts = self.query.texts(xpath)
        return texts[0] if texts else None

    def _field(self, xpath: str, transform: Callable[[str], T], default: T) -> T:
        text = self._text(xpath)
        return transform(text) if text is not None else default

    @staticmethod
    def _plain(text: str) -> str:
        return " ".join(text.split())

    def _time(self, locators: tuple[str, str]) -> str:
        clock, meridiem = locators
        # text() steps also return the whitespace nodes around nested spans
        clock_text = next((text for text in self.query.texts(clock) if text.strip()), None)
        return join_time(clock_text, self._text(meridiem))

    def extract_row(self, index: int) -> FlightRecord:
        layout = self.layout
        prices: list[str] = []
        seats_left: list[int | None] = []
        for tier in range(1, FARE_TIERS + 1):
            prices.append(self._field(layout.price(index, tier), self._plain, PRICE_UNAVAILABLE))
            seats_left.append(self._field(layout.seats_left(index, tier), parse_seats_left, None))

        metadata = FareMetadata(
            flight_numbers=self._field(layout.flight_numbers(index), parse_flight_numbers, []),
            num_stops=self._field(layout.num_stops(index), parse_num_stops, NONSTOP),
            plane_change=self._field(layout.plane_change(index), parse_plane_change, None),
            departure_time=self._time(layout.departure_time(index)),
            arrival_time=self._time(layout.arrival_time(index)),
            duration=self._field(layout.duration(index), self._plain, ""),
            prices=prices,
            seats_left=seats_left,
        )
        return FlightRecord(self.departure_port, self.arrival_port, self.date_str, metadata)

    def extract_rows(self, count: int) -> list[RowOutcome]:
        """Extract rows 1..count in order; a failing row is logged and skipped, never fatal."""
        outcomes: list[RowOutcome] = []
        for index in range(1, count + 1):
            try:
                outcomes.append(RowOutcome(index, record=self.extract_row(index)))
            except Exception as exc:  # noqa: BLE001
                logging.warning("Error processing flight %s: %s", index, exc)
                outcomes.append(RowOutcome(index, error=f"{type(exc).__name__}: {exc}"))
        return outcomes
