import logging
import random
from datetime import datetime
from pathlib import Path

from bs4 import BeautifulSoup
from playwright.sync_api import Browser, Page, Playwright, sync_playwright
from playwright_stealth import Stealth

_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:132.0) Gecko/20100101 Firefox/132.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_6) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.6 Safari/605.1.15",
]


def pretty_format_html(html: str) -> str:
    """Return a pretty-formatted HTML string using BeautifulSoup with the 'lxml' parser."""
    if not html:
        return html
    soup = BeautifulSoup(html, "lxml")
    return soup.prettify()


class BrowserSession:
    """One browser + page pair owned by a single scrape invocation."""

    def __init__(self, playwright: Playwright, browser: Browser, page: Page):
        self.playwright = playwright
        self.browser = browser
        self.page = page
        self.closed = False

    def save_snapshot(self, directory: Path, label: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{label}_{datetime.now():%Y%m%d_%H%M%S}.html"
        path.write_text(pretty_format_html(self.page.content()), encoding="utf-8")
        logging.info("Saved page snapshot to %s", path)
        return path

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self.browser.close()
        finally:
            self.playwright.stop()
        logging.debug("Browser session closed.")

    def __enter__(self) -> "BrowserSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class BasePlaywrightDriver:
    """Chromium driver with anti-bot stealth applied."""

    timeout: int = 90 * 1000

    def __init__(self, headless: bool = False, executable_path: str | None = None):
        self.headless = headless
        self.executable_path = executable_path

    def _get_browser_args(self, user_agent: str) -> list[str]:
        return [
            "--start-maximized",
            f"--user-agent={user_agent}",
            "--disable-blink-features=AutomationControlled",
            "--disable-extensions",
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
        ]

    def get_page(self, playwright: Playwright) -> tuple[Browser, Page]:
        """Create and return a (browser, page) tuple with stealth applied."""
        user_agent = random.choice(_USER_AGENTS)
        browser = playwright.chromium.launch(
            headless=self.headless,
            executable_path=self.executable_path,
            args=self._get_browser_args(user_agent),
            timeout=self.timeout,
        )
        context = browser.new_context(
            user_agent=user_agent,
            locale="en-US",
            timezone_id="America/Chicago",
            viewport={"width": 1366, "height": 900},
            color_scheme="light",
            extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
        )

        # Skip loading images to speed up scraping
        context.route("**/*.{png,jpg,jpeg,webp,svg,gif}", lambda route: route.abort())

        page = context.new_page()
        Stealth().apply_stealth_sync(page)
        page.set_default_timeout(self.timeout)
        logging.debug("Browser page created with stealth applied.")
        return browser, page

    def open_session(self) -> BrowserSession:
        playwright = sync_playwright().start()
        try:
            browser, page = self.get_page(playwright)
        except Exception:
            playwright.stop()
            raise
        return BrowserSession(playwright, browser, page)
