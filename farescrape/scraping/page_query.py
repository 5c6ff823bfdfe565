"""Structural XPath queries against a results page.

PlaywrightPageQuery runs against a live browser page; HtmlPageQuery evaluates the same
XPaths over saved HTML with lxml, so extraction can be replayed offline.
"""

from pathlib import Path
from typing import Protocol

import lxml.html
from playwright.sync_api import Page

_XPATH_TEXTS_JS = """(xpath) => {
    const snapshot = document.evaluate(xpath, document, null, XPathResult.ORDERED_NODE_SNAPSHOT_TYPE, null);
    const texts = [];
    for (let i = 0; i < snapshot.snapshotLength; i++) {
        texts.push(snapshot.snapshotItem(i).textContent || '');
    }
    return texts;
}"""


class PageQuery(Protocol):
    def count(self, xpath: str) -> int: ...

    def texts(self, xpath: str) -> list[str]: ...


class PlaywrightPageQuery:
    def __init__(self, page: Page):
        self.page = page

    def count(self, xpath: str) -> int:
        return self.page.locator(f"xpath={xpath}").count()

    def texts(self, xpath: str) -> list[str]:
        # document.evaluate also resolves text() node steps, which Playwright's xpath engine skips
        return self.page.evaluate(_XPATH_TEXTS_JS, xpath)


class HtmlPageQuery:
    def __init__(self, html: str):
        self.tree = lxml.html.fromstring(html)

    @classmethod
    def from_file(cls, path: Path) -> "HtmlPageQuery":
        return cls(Path(path).read_text(encoding="utf-8"))

    def count(self, xpath: str) -> int:
        return len(self.tree.xpath(xpath))

    def texts(self, xpath: str) -> list[str]:
        result = self.tree.xpath(xpath)
        if isinstance(result, (str, bytes)):
            return [str(result)]
        return [node.text_content() if hasattr(node, "text_content") else str(node) for node in result]
