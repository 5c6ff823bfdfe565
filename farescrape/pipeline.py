"""High-level orchestration for scraping fare results and storing them.

Usage patterns:

1. Scrape a date range and store every record in Supabase:
   run_pipeline("DAL", "HOU", search_dates(days=7, span=3))

2. Re-send a previous JSON export without opening a browser:
   run_pipeline("DAL", "HOU", [], scrape=False)

3. Replay extraction on a saved results page snapshot:
   run_pipeline("DAL", "HOU", ["2025-03-01"], from_html=Path("snapshots/page.html"))
"""
import argparse
import calendar
import json
import logging
import time
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Sequence
from urllib.parse import urlencode

import schedule
from tqdm import tqdm

from farescrape.config import settings
from farescrape.logging_config import setup_logging
from farescrape.models import FlightRecord, ScrapeResult
from farescrape.scraping.base_driver import BasePlaywrightDriver
from farescrape.scraping.extractor import FieldExtractor, count_rows
from farescrape.scraping.layouts import SouthwestLayout
from farescrape.scraping.orchestrator import ScrapeOrchestrator
from farescrape.scraping.page_query import HtmlPageQuery
from farescrape.storage.persister import Persister, create_datastore_client

SEARCH_URL = "https://www.southwest.com/air/booking/select-depart.html"


def build_search_url(origin: str, destination: str, date_str: str) -> str:
    params = dict(
        adultPassengersCount=1,
        adultsCount=1,
        departureDate=date_str,
        departureTimeOfDay="ALL_DAY",
        destinationAirportCode=destination.upper(),
        fareType="USD",
        originationAirportCode=origin.upper(),
        passengerType="ADULT",
        returnDate="",
        returnTimeOfDay="ALL_DAY",
        tripType="oneway",
    )
    return f"{SEARCH_URL}?{urlencode(params)}"


def _add_months(d: date, months: int) -> date:
    month_index = d.month - 1 + months
    year, month = d.year + month_index // 12, month_index % 12 + 1
    return date(year, month, min(d.day, calendar.monthrange(year, month)[1]))


def search_dates(start: date | None = None, months: int = 0, days: int = 0, span: int = 1) -> list[str]:
    """ISO dates for `span` consecutive days starting `months` + `days` after `start` (today by default)."""
    first = _add_months(start or date.today(), months) + timedelta(days=days)
    return [(first + timedelta(days=offset)).isoformat() for offset in range(max(span, 1))]


def export_records(records: Sequence[FlightRecord], path: Path) -> None:
    path.write_text(json.dumps([r.to_dict() for r in records], indent=2), encoding="utf-8")
    logging.info(f"Exported {len(records)} flights to {path}")


def load_records(path: Path) -> list[FlightRecord]:
    if not path.exists():
        raise FileNotFoundError(f"Export file {path} not found. Run with scraping enabled first.")
    with open(path, "rt", encoding="utf-8") as f:
        logging.info(f"Loading existing flights export {path}")
        return [FlightRecord.from_dict(item) for item in json.load(f)]


def extract_from_html(path: Path, origin: str, destination: str, date_str: str) -> ScrapeResult:
    layout = SouthwestLayout()
    query = HtmlPageQuery.from_file(path)
    count = count_rows(query, layout)
    if count == 0:
        logging.warning("No flight rows in %s", path)
        return ScrapeResult("empty")
    outcomes = FieldExtractor(query, layout, origin, destination, date_str).extract_rows(count)
    return ScrapeResult(
        "ok",
        records=[o.record for o in outcomes if o.ok],
        rows_found=count,
        failed_rows=[o for o in outcomes if not o.ok],
    )


def _store(persister: Persister, result: ScrapeResult) -> None:
    store_results = persister.store_all(result.records)
    result.stored = sum(1 for r in store_results if r.ok)
    result.failed_stores = [r for r in store_results if not r.ok]
    logging.info(f"Stored {result.stored} of {len(result.records)} flights")


def run_pipeline(
        origin: str,
        destination: str,
        dates: Sequence[str],
        scrape: bool = True,
        persist: bool = True,
        headless: bool | None = None,
        from_html: Path | None = None,
) -> list[ScrapeResult]:
    persister = None
    if persist:
        persister = Persister(create_datastore_client(settings), table=settings.flights_table)

    if not scrape:
        records = load_records(settings.output_json)
        result = ScrapeResult("ok" if records else "empty", records=records, rows_found=len(records))
        if persister is not None:
            _store(persister, result)
        return [result]

    if from_html is not None:
        result = extract_from_html(from_html, origin, destination, dates[0])
        if persister is not None:
            _store(persister, result)
        export_records(result.records, settings.output_json)
        return [result]

    driver = BasePlaywrightDriver(
        headless=settings.headless if headless is None else headless,
        executable_path=settings.chrome_path,
    )
    results: list[ScrapeResult] = []
    for date_str in tqdm(dates, desc=f"{origin}->{destination}"):
        orchestrator = ScrapeOrchestrator(driver.open_session, persister, snapshot_dir=settings.snapshot_dir)
        result = orchestrator.scrape(origin, destination, date_str, build_search_url(origin, destination, date_str))
        logging.info(f"{date_str}: {result.status}, {len(result.records)} flights, {result.stored} stored")
        results.append(result)

    export_records([r for result in results for r in result.records], settings.output_json)
    return results


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Fare results scraper")
    p.add_argument("--origin", required=True, help="Departure airport IATA code")
    p.add_argument("--destination", required=True, help="Arrival airport IATA code")
    p.add_argument("--date", help="YYYY-MM-DD; defaults to today shifted by --months/--days")
    p.add_argument("--months", type=int, default=0, help="Months ahead of the start date (may be negative)")
    p.add_argument("--days", type=int, default=0, help="Days ahead of the start date (may be negative)")
    p.add_argument("--span", type=int, default=1, help="Number of consecutive days to scrape")
    p.add_argument("--no-scrape", action="store_true", help=f"Persist the existing export ({settings.output_json})")
    p.add_argument("--no-persist", action="store_true", help="Do not write records to Supabase")
    p.add_argument("--from-html", type=Path, help="Extract from a saved results page instead of a live browser")
    p.add_argument("--headless", action="store_true", default=None)
    p.add_argument("--log-level", default="INFO")
    p.add_argument(
        "--schedule-at",
        metavar="HH:MM",
        default=None,
        help="Run the pipeline every day at the given time (e.g. 06:30). "
             "Without this flag the pipeline runs once and exits.",
    )
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    def _dates() -> list[str]:
        start = datetime.strptime(args.date, "%Y-%m-%d").date() if args.date else None
        return search_dates(start, months=args.months, days=args.days, span=args.span)

    def _run() -> list[ScrapeResult]:
        return run_pipeline(
            origin=args.origin,
            destination=args.destination,
            dates=_dates(),
            scrape=not args.no_scrape,
            persist=not args.no_persist,
            headless=args.headless,
            from_html=args.from_html,
        )

    if args.schedule_at:
        def _scheduled() -> None:
            try:
                _run()
            except Exception:  # noqa: BLE001
                logging.exception("Pipeline failed")

        logging.info(f"Scheduler started – pipeline will run every day at {args.schedule_at}")
        _scheduled()
        schedule.every().day.at(args.schedule_at).do(_scheduled)
        while True:
            try:
                schedule.run_pending()
            except Exception:  # noqa: BLE001
                logging.exception("Scheduler error:")
                time.sleep(60 * 60)
            time.sleep(1)

    try:
        results = _run()
    except Exception:  # noqa: BLE001
        logging.exception("Pipeline failed")
        return 1
    return 1 if any(r.status == "error" for r in results) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
