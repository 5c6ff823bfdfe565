"""Single scrape invocation: navigate, enumerate rows, extract, persist, release the browser.

Each call to ScrapeOrchestrator.scrape opens its own browser session and closes it exactly
once on every exit path.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from playwright.sync_api import Page

from ..models import ScrapeResult
from ..storage.persister import Persister
from .base_driver import BrowserSession
from .extractor import FieldExtractor, count_rows
from .layouts import ResultsLayout, SouthwestLayout
from .navigator import Navigator
from .page_query import PageQuery, PlaywrightPageQuery


class ScrapeState(Enum):
    INIT = "init"
    NAVIGATING = "navigating"
    REDIRECT_CHECK = "redirect_check"
    SEARCH_CLICK = "search_click"
    SETTLING = "settling"
    ENUMERATING = "enumerating"
    EMPTY = "empty"
    EXTRACTING = "extracting"
    PERSISTING = "persisting"
    DONE = "done"
    DONE_ERROR = "done_error"


class ScrapeOrchestrator:
    def __init__(
            self,
            session_factory: Callable[[], BrowserSession],
            persister: Persister | None = None,
            layout: ResultsLayout | None = None,
            query_factory: Callable[[Page], PageQuery] = PlaywrightPageQuery,
            navigator_options: dict[str, Any] | None = None,
            snapshot_dir: Path | None = None,
    ):
        self.session_factory = session_factory
        self.persister = persister
        self.layout = layout or SouthwestLayout()
        self.query_factory = query_factory
        self.navigator_options = navigator_options or {}
        self.snapshot_dir = snapshot_dir
        self.state = ScrapeState.INIT
        self.history: list[ScrapeState] = []

    def _transition(self, state: ScrapeState) -> None:
        logging.debug("Scrape state %s -> %s", self.state.name, state.name)
        self.state = state
        self.history.append(state)

    def _snapshot(self, session: BrowserSession, label: str) -> None:
        if self.snapshot_dir is None:
            return
        try:
            session.save_snapshot(self.snapshot_dir, label)
        except Exception as exc:  # noqa: BLE001
            logging.warning("Could not save page snapshot: %s", exc)

    def scrape(self, departure_port: str, arrival_port: str, date_str: str, url: str) -> ScrapeResult:
        self.state = ScrapeState.INIT
        self.history = [ScrapeState.INIT]
        logging.info(f"Starting scraper for {departure_port} -> {arrival_port} on {date_str}")
        try:
            session = self.session_factory()
        except Exception as exc:  # noqa: BLE001
            self._transition(ScrapeState.DONE_ERROR)
            logging.error("Browser failed to start: %s", exc)
            return ScrapeResult("error", error=f"{type(exc).__name__}: {exc}")

        try:
            return self._run(session, departure_port, arrival_port, date_str, url)
        except Exception as exc:  # noqa: BLE001
            self._transition(ScrapeState.DONE_ERROR)
            logging.exception("Fatal scraper error")
            self._snapshot(session, f"{departure_port}_{arrival_port}_{date_str}_error")
            return ScrapeResult("error", error=f"{type(exc).__name__}: {exc}")
        finally:
            session.close()

    def _run(self, session: BrowserSession, departure_port: str, arrival_port: str, date_str: str,
             url: str) -> ScrapeResult:
        navigator = Navigator(session.page, self.layout, **self.navigator_options)

        navigator.open(url, on_step=lambda step: self._transition(ScrapeState(step)))

        self._transition(ScrapeState.ENUMERATING)
        query = self.query_factory(session.page)
        count = count_rows(query, self.layout)
        if count == 0:
            self._transition(ScrapeState.EMPTY)
            logging.warning("No flight data found for %s -> %s on %s.", departure_port, arrival_port, date_str)
            self._snapshot(session, f"{departure_port}_{arrival_port}_{date_str}_empty")
            self._transition(ScrapeState.DONE)
            return ScrapeResult("empty")

        self._transition(ScrapeState.EXTRACTING)
        logging.info("Found %s flights, extracting...", count)
        extractor = FieldExtractor(query, self.layout, departure_port, arrival_port, date_str)
        outcomes = extractor.extract_rows(count)
        records = [outcome.record for outcome in outcomes if outcome.ok]
        result = ScrapeResult(
            "ok",
            records=records,
            rows_found=count,
            failed_rows=[outcome for outcome in outcomes if not outcome.ok],
        )
        logging.info("Extracted %s of %s flights.", len(records), count)

        self._transition(ScrapeState.PERSISTING)
        if self.persister is not None:
            store_results = self.persister.store_all(records)
            result.stored = sum(1 for r in store_results if r.ok)
            result.failed_stores = [r for r in store_results if not r.ok]
            logging.info("Stored %s of %s flights.", result.stored, len(records))

        self._transition(ScrapeState.DONE)
        return result
