"""
Tests for farescrape.processing.normalize — pure text transforms, no page needed.
"""

import pytest

from farescrape.models import NONSTOP
from farescrape.processing.normalize import (
    join_time,
    parse_flight_numbers,
    parse_num_stops,
    parse_plane_change,
    parse_seats_left,
)


class TestFlightNumbers:
    def test_space_separated_codes(self):
        assert parse_flight_numbers("AA123 AA456") == ["AA123", "AA456"]

    def test_empty_text(self):
        assert parse_flight_numbers("") == []
        assert parse_flight_numbers(None) == []

    def test_hash_and_slash_separators(self):
        assert parse_flight_numbers("# 1234 / 5678") == ["1234", "5678"]

    def test_labels_are_dropped(self):
        assert parse_flight_numbers("Flight # 910 Opens flight details") == ["910"]

    def test_lowercase_input_is_uppercased(self):
        assert parse_flight_numbers("wn1502") == ["WN1502"]

    def test_no_numbers(self):
        assert parse_flight_numbers("Nonstop") == []


class TestNumStops:
    @pytest.mark.parametrize("text, expected", [
        ("1 stop", 1),
        ("2 stops", 2),
        ("1 stop, Change planes DAL", 1),
        ("1stop", 1),
    ])
    def test_counts(self, text, expected):
        assert parse_num_stops(text) == expected

    @pytest.mark.parametrize("text", ["Nonstop", "", None, "0 stops", "Direct"])
    def test_defaults_to_nonstop(self, text):
        assert parse_num_stops(text) == NONSTOP


class TestSeatsLeft:
    @pytest.mark.parametrize("text, expected", [
        ("3 left", 3),
        ("Only 1 seat left", 1),
        ("4 seats left", 4),
        ("  2\n left ", 2),
    ])
    def test_counts(self, text, expected):
        assert parse_seats_left(text) == expected

    def test_sold_out(self):
        assert parse_seats_left("Sold out") == 0

    @pytest.mark.parametrize("text", ["", None, "Wanna Get Away", "Limited"])
    def test_no_signal(self, text):
        assert parse_seats_left(text) is None


class TestPlaneChange:
    def test_change_planes(self):
        assert parse_plane_change("Change planes DAL") is True

    def test_plane_change_phrase(self):
        assert parse_plane_change("Plane change in HOU") is True

    def test_no_plane_change(self):
        assert parse_plane_change("No plane change") is False

    @pytest.mark.parametrize("text", ["", None, "   ", "Stops in MDW"])
    def test_indeterminate(self, text):
        assert parse_plane_change(text) is None


class TestJoinTime:
    def test_clock_and_meridiem(self):
        assert join_time(" 6:05", "PM ") == "6:05 PM"

    def test_missing_parts(self):
        assert join_time("6:05", None) == "6:05"
        assert join_time(None, None) == ""
