"""
Tests for the XPath query backends.
"""

from unittest.mock import MagicMock

from farescrape.scraping.page_query import HtmlPageQuery, PlaywrightPageQuery


class TestHtmlPageQuery:
    def test_text_nodes_and_elements(self):
        query = HtmlPageQuery("<html><body><div id='t'><span>6:05<span>x</span><span>PM</span></span></div></body></html>")
        assert query.texts('//*[@id="t"]/span/text()') == ["6:05"]
        assert query.texts('//*[@id="t"]/span/span[2]') == ["PM"]
        assert query.texts('//*[@id="missing"]') == []
        assert query.count("//span") == 3

    def test_from_file(self, tmp_path, two_row_html):
        path = tmp_path / "page.html"
        path.write_text(two_row_html, encoding="utf-8")
        assert HtmlPageQuery.from_file(path).count("//li") == 2


class TestPlaywrightPageQuery:
    def test_count_uses_xpath_locator(self):
        page = MagicMock()
        page.locator.return_value.count.return_value = 4
        assert PlaywrightPageQuery(page).count("//li") == 4
        page.locator.assert_called_once_with("xpath=//li")

    def test_texts_evaluates_in_page(self):
        page = MagicMock()
        page.evaluate.return_value = ["AA123 AA456"]
        assert PlaywrightPageQuery(page).texts("//button/span[1]") == ["AA123 AA456"]
        script, xpath = page.evaluate.call_args.args
        assert "document.evaluate" in script
        assert xpath == "//button/span[1]"
