from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

import dacite

NONSTOP = "Nonstop"
PRICE_UNAVAILABLE = "Unavailable"
FARE_TIERS = 3

StopDescriptor: TypeAlias = int | Literal["Nonstop"]
SeatAvailability: TypeAlias = int
ScrapeStatus = Literal["ok", "empty", "error"]


@dataclass(frozen=True, slots=True)
class FareMetadata:
    """Schedule and fare data scraped from one result row.

    prices / seats_left hold exactly one slot per fare tier, whether or not the page
    rendered that tier. Missing tiers carry PRICE_UNAVAILABLE / None.
    """
    flight_numbers: list[str]
    num_stops: StopDescriptor
    plane_change: bool | None
    departure_time: str
    arrival_time: str
    duration: str
    prices: list[str]
    seats_left: list[SeatAvailability | None]

    def __post_init__(self) -> None:
        if len(self.prices) != FARE_TIERS or len(self.seats_left) != FARE_TIERS:
            raise ValueError(
                f"Expected {FARE_TIERS} fare tiers, got {len(self.prices)} prices and {len(self.seats_left)} seats"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "flightNumbers": list(self.flight_numbers),
            "numStops": self.num_stops,
            "planeChange": self.plane_change,
            "departureTime": self.departure_time,
            "arrivalTime": self.arrival_time,
            "duration": self.duration,
            "prices": list(self.prices),
            "seatsLeft": list(self.seats_left),
        }


@dataclass(frozen=True, slots=True)
class FlightRecord:
    """One scraped result row for an origin / destination / date query.

    Ports are IATA codes, date is the ISO date string used in the search URL.
    """
    departure_port: str
    arrival_port: str
    date: str
    metadata: FareMetadata

    def to_dict(self) -> dict[str, Any]:
        """Wire shape sent to the datastore and written to JSON exports."""
        return {
            "departurePort": self.departure_port,
            "arrivalPort": self.arrival_port,
            "date": self.date,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlightRecord":
        meta = data["metadata"]
        data_to_parse = dict(
            departure_port=data["departurePort"],
            arrival_port=data["arrivalPort"],
            date=data["date"],
            metadata=dict(
                flight_numbers=meta.get("flightNumbers") or [],
                num_stops=meta.get("numStops", NONSTOP),
                plane_change=meta.get("planeChange"),
                departure_time=meta.get("departureTime", ""),
                arrival_time=meta.get("arrivalTime", ""),
                duration=meta.get("duration", ""),
                prices=meta["prices"],
                seats_left=meta["seatsLeft"],
            ),
        )
        return dacite.from_dict(data_class=cls, data=data_to_parse)


@dataclass(slots=True)
class RowOutcome:
    """Result of extracting a single row: either a record or the error that skipped it."""
    index: int
    record: FlightRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass(slots=True)
class StoreResult:
    record: FlightRecord
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ScrapeResult:
    """Outcome of one scrape invocation.

    status is "empty" when the page rendered no result rows and "error" when the
    invocation aborted (navigation failure or any other unhandled error).
    """
    status: ScrapeStatus
    records: list[FlightRecord] = field(default_factory=list)
    rows_found: int = 0
    failed_rows: list[RowOutcome] = field(default_factory=list)
    stored: int = 0
    failed_stores: list[StoreResult] = field(default_factory=list)
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == "ok"
