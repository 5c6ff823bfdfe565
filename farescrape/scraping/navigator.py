import logging
from typing import Callable

from playwright.sync_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from ..exceptions import NavigationError
from .cursor import HumanCursor
from .layouts import ResultsLayout


class Navigator:
    """Brings a results page into a stable, scrollable state.

    The booking site sometimes drops the session on a search form instead of the results;
    in that case the search button is clicked if it shows up, otherwise the page is used as is.
    """

    def __init__(
            self,
            page: Page,
            layout: ResultsLayout,
            cursor: HumanCursor | None = None,
            load_timeout: int = 90_000,
            search_timeout: int = 5_000,
            search_settle: int = 5_000,
            click_wait: int = 2_500,
            scroll_offset: int = 450,
            scroll_settle: int = 3_000,
    ):
        self.page = page
        self.layout = layout
        self.cursor = cursor or HumanCursor(page)
        self.load_timeout = load_timeout
        self.search_timeout = search_timeout
        self.search_settle = search_settle
        self.click_wait = click_wait
        self.scroll_offset = scroll_offset
        self.scroll_settle = scroll_settle

    def load(self, url: str) -> None:
        try:
            self.page.goto(url, wait_until="networkidle", timeout=self.load_timeout)
        except (PlaywrightTimeoutError, PlaywrightError) as exc:
            raise NavigationError(f"Page did not finish loading: {url}") from exc

    def redirected(self, url: str) -> bool:
        return self.page.url != url

    def click_search(self) -> bool:
        """Click the search button if it appears; any failure here leaves the page as is."""
        try:
            button = self.page.wait_for_selector(f"xpath={self.layout.search_button}", timeout=self.search_timeout)
            if button is None:
                logging.warning("No search button found, continuing with the current page.")
                return False
            self.cursor.click(button, wait_for_click=self.click_wait, padding_percentage=25)
            self.page.wait_for_timeout(self.search_settle)
        except PlaywrightTimeoutError:
            logging.warning("No search button found, continuing with the current page.")
            return False
        except Exception as exc:  # noqa: BLE001
            logging.warning("Search button click failed (%s), continuing with the current page.", exc)
            return False
        return True

    def settle(self) -> None:
        self.page.evaluate(f"() => window.scrollBy(0, {self.scroll_offset})")
        self.page.wait_for_timeout(self.scroll_settle)

    def open(self, url: str, on_step: Callable[[str], None] | None = None) -> bool:
        """Load, handle the redirect-to-search case and settle; returns whether search was clicked.

        on_step receives "navigating", "redirect_check", "search_click" and "settling" as they start.
        """
        step = on_step or (lambda name: None)
        step("navigating")
        self.load(url)
        step("redirect_check")
        clicked = False
        if self.redirected(url):
            logging.info("Redirect detected (%s), clicking search button...", self.page.url)
            step("search_click")
            clicked = self.click_search()
        step("settling")
        self.settle()
        return clicked
