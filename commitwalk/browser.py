"""Fetch rendered pages from a Chrome instance over the DevTools protocol."""

from __future__ import annotations

import logging
import sys
import time
from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from commitwalk.config import DEFAULT_DEVTOOLS_URL
from commitwalk.errors import FetchError

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    def fetch(self, url: str) -> str:
        """Return the full markup of *url* once its DOM content is loaded."""
        ...


class Deadline:
    """A single time budget shared by every fetch of a run."""

    def __init__(self, seconds: float, clock=time.monotonic) -> None:
        self._clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return self._expires_at - self._clock()

    def remaining_ms(self) -> float:
        """Milliseconds left; raises :class:`FetchError` once the budget is spent."""
        left = self.remaining()
        if left <= 0:
            raise FetchError("timeout exceeded")
        return left * 1000


class BrowserSession:
    """Attach to a running browser and navigate one tab from page to page.

    Reuses the first open tab if there is one, otherwise opens a new tab
    and closes it again on exit. Use as a context manager::

        with BrowserSession("http://127.0.0.1:9222", timeout=5) as browser:
            html = browser.fetch("https://chromium.googlesource.com/...")
    """

    def __init__(self, devtools_url: str = DEFAULT_DEVTOOLS_URL, timeout: float = 5.0) -> None:
        self.devtools_url = devtools_url
        self.timeout = timeout
        self.deadline: Deadline | None = None
        self._playwright = None
        self._browser = None
        self._page = None
        self._owns_page = False

    def __enter__(self) -> BrowserSession:
        self.deadline = Deadline(self.timeout)
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.connect_over_cdp(
                self.devtools_url, timeout=self.deadline.remaining_ms()
            )
            contexts = self._browser.contexts
            context = contexts[0] if contexts else self._browser.new_context()
            if context.pages:
                self._page = context.pages[0]
            else:
                self._page = context.new_page()
                self._owns_page = True
        except PlaywrightError as exc:
            self._playwright.stop()
            raise FetchError(f"can't attach to browser at {self.devtools_url}: {exc}") from exc
        except FetchError:
            self._playwright.stop()
            raise
        logger.info("Attached to browser at %s", self.devtools_url)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owns_page and self._page is not None:
                self._page.close()
            if self._browser is not None:
                self._browser.close()
        except PlaywrightError as close_exc:
            logger.warning("Error while detaching from browser: %s", close_exc)
        finally:
            self._playwright.stop()

    def fetch(self, url: str) -> str:
        if self._page is None:
            raise FetchError("browser session is not open")
        timeout_ms = self.deadline.remaining_ms()
        logger.debug("Navigating to %s (%.0f ms left)", url, timeout_ms)
        try:
            response = self._page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            if response is not None and not response.ok:
                raise FetchError(f"{url} answered HTTP {response.status}")
            return self._page.content()
        except PlaywrightTimeoutError as exc:
            raise FetchError(f"timed out loading {url}") from exc
        except PlaywrightError as exc:
            raise FetchError(f"can't load {url}: {exc}") from exc


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "https://chromium.googlesource.com/chromiumos/platform/tast-tests/"
    with BrowserSession(timeout=10) as b:
        markup = b.fetch(target)
    print(f"Fetched {len(markup)} characters from {target}")
