"""Supabase persistence for scraped flight records.

Persistence is a best-effort sweep: each record is inserted on its own and a failed
insert is logged without stopping the records after it.
"""

import logging
from typing import Iterable

from supabase import Client, create_client

from ..config import Settings
from ..models import FlightRecord, StoreResult


def create_datastore_client(settings: Settings) -> Client:
    settings.require_datastore()
    return create_client(settings.supabase_url, settings.supabase_key)


class Persister:
    def __init__(self, client: Client, table: str = "Flights"):
        self.client = client
        self.table = table

    def store(self, record: FlightRecord) -> StoreResult:
        try:
            response = self.client.table(self.table).insert([record.to_dict()]).execute()
        except Exception as exc:  # noqa: BLE001
            logging.error("Supabase insert error for %s %s->%s %s: %s", record.date, record.departure_port,
                          record.arrival_port, record.metadata.flight_numbers, exc)
            return StoreResult(record, error=f"{type(exc).__name__}: {exc}")
        logging.info("Inserted flight data: %s", response.data)
        return StoreResult(record, data=response.data)

    def store_all(self, records: Iterable[FlightRecord]) -> list[StoreResult]:
        return [self.store(record) for record in records]
