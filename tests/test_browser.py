"""Tests for the run deadline and the CDP browser session (playwright mocked)."""

from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

import commitwalk.browser as browser_mod
from commitwalk.browser import BrowserSession, Deadline
from commitwalk.errors import FetchError


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestDeadline:
    def test_remaining_counts_down(self):
        clock = FakeClock()
        deadline = Deadline(5, clock=clock)
        clock.now += 2
        assert deadline.remaining() == pytest.approx(3)
        assert deadline.remaining_ms() == pytest.approx(3000)

    def test_spent_budget_raises_fetch_error(self):
        clock = FakeClock()
        deadline = Deadline(5, clock=clock)
        clock.now += 5
        with pytest.raises(FetchError, match="timeout"):
            deadline.remaining_ms()


@pytest.fixture
def playwright(monkeypatch):
    """Patch sync_playwright and return the started playwright mock."""
    pw = MagicMock(name="playwright")
    page = MagicMock(name="page")
    page.goto.return_value = MagicMock(ok=True, status=200)
    page.content.return_value = "<html><body>ok</body></html>"
    context = MagicMock(name="context")
    context.pages = [page]
    pw.chromium.connect_over_cdp.return_value.contexts = [context]

    starter = MagicMock()
    starter.start.return_value = pw
    monkeypatch.setattr(browser_mod, "sync_playwright", lambda: starter)
    pw.page = page
    pw.context = context
    return pw


class TestBrowserSession:
    def test_fetch_returns_page_content(self, playwright):
        with BrowserSession("http://127.0.0.1:9222", timeout=5) as session:
            markup = session.fetch("https://example.com/repo")

        assert markup == "<html><body>ok</body></html>"
        playwright.chromium.connect_over_cdp.assert_called_once()
        assert playwright.chromium.connect_over_cdp.call_args.args == ("http://127.0.0.1:9222",)
        url = playwright.page.goto.call_args.args[0]
        kwargs = playwright.page.goto.call_args.kwargs
        assert url == "https://example.com/repo"
        assert kwargs["wait_until"] == "domcontentloaded"
        assert 0 < kwargs["timeout"] <= 5000

    def test_reuses_existing_tab_and_leaves_it_open(self, playwright):
        with BrowserSession(timeout=5):
            pass
        playwright.page.close.assert_not_called()
        playwright.chromium.connect_over_cdp.return_value.close.assert_called_once()
        playwright.stop.assert_called_once()

    def test_opens_and_closes_own_tab(self, playwright):
        new_page = playwright.context.new_page.return_value
        playwright.context.pages = []
        with BrowserSession(timeout=5) as session:
            session.fetch("https://example.com/")
        new_page.goto.assert_called_once()
        new_page.close.assert_called_once()

    def test_connection_failure(self, playwright):
        playwright.chromium.connect_over_cdp.side_effect = PlaywrightError("connection refused")
        with pytest.raises(FetchError, match="can't attach"):
            with BrowserSession(timeout=5):
                pass
        playwright.stop.assert_called_once()

    def test_navigation_timeout(self, playwright):
        playwright.page.goto.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded")
        with BrowserSession(timeout=5) as session:
            with pytest.raises(FetchError, match="timed out"):
                session.fetch("https://example.com/slow")

    def test_http_error_status(self, playwright):
        playwright.page.goto.return_value = MagicMock(ok=False, status=404)
        with BrowserSession(timeout=5) as session:
            with pytest.raises(FetchError, match="404"):
                session.fetch("https://example.com/missing")

    def test_spent_deadline_skips_navigation(self, playwright):
        with BrowserSession(timeout=5) as session:
            session.deadline = Deadline(0, clock=FakeClock())
            with pytest.raises(FetchError):
                session.fetch("https://example.com/")
        playwright.page.goto.assert_not_called()

    def test_fetch_outside_context_fails(self):
        with pytest.raises(FetchError):
            BrowserSession().fetch("https://example.com/")
