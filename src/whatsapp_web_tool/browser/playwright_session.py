"""Playwright-powered browser session implementation."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from playwright.sync_api import Error, Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright_stealth import stealth_sync

from ..config import BrowserConfig
from .base import BrowserActionError, BrowserSession, BrowserTimeoutError, ChatPage

LOGGER = logging.getLogger(__name__)


class PlaywrightChatPage(ChatPage):
    """:class:`ChatPage` backed by a Playwright sync ``Page``."""

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    def navigate(self, url: str, *, timeout_ms: Optional[int] = None) -> None:
        with _translate_errors():
            self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        with _translate_errors():
            self._page.wait_for_selector(selector, timeout=timeout_ms)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        with _translate_errors():
            return self._page.evaluate(script, arg)

    def click(self, selector: str) -> None:
        with _translate_errors():
            self._page.locator(selector).first.click()

    def element_texts(self, selector: str) -> list[str]:
        with _translate_errors():
            return self._page.locator(selector).evaluate_all(
                "(els) => els.map((e) => e.getAttribute('title') || e.textContent || '')"
            )

    def click_nth(self, selector: str, index: int) -> None:
        with _translate_errors():
            self._page.locator(selector).nth(index).click()

    def type(self, selector: str, text: str, *, delay_ms: int = 0) -> None:
        with _translate_errors():
            self._page.locator(selector).first.press_sequentially(text, delay=delay_ms)

    def press(self, key: str) -> None:
        with _translate_errors():
            self._page.keyboard.press(key)


class PlaywrightBrowserSession(BrowserSession):
    """Browser session backed by a persistent Playwright Chromium profile."""

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        self._config = config or BrowserConfig()
        self._playwright = None
        self._context = None
        self._page: Optional[PlaywrightChatPage] = None

    @property
    def page(self) -> Optional[ChatPage]:
        return self._page

    def start(self) -> None:
        LOGGER.debug("Starting Playwright browser session")
        user_data_dir = self._config.profile_path
        user_data_dir.mkdir(parents=True, exist_ok=True)
        self._playwright = sync_playwright().start()
        try:
            self._context = self._playwright.chromium.launch_persistent_context(
                str(user_data_dir),
                headless=self._config.headless,
                args=list(self._config.launch_args),
                user_agent=self._config.user_agent,
                viewport={
                    "width": self._config.viewport_width,
                    "height": self._config.viewport_height,
                },
            )
        except Error:
            self._playwright.stop()
            self._playwright = None
            raise
        pages = self._context.pages
        page = pages[0] if pages else self._context.new_page()
        if self._config.stealth:
            stealth_sync(page)
        self._page = PlaywrightChatPage(page)

    def stop(self) -> None:
        LOGGER.debug("Stopping Playwright browser session")
        try:
            if self._context:
                self._context.close()
        finally:
            if self._playwright:
                self._playwright.stop()
        self._context = None
        self._playwright = None
        self._page = None


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except PlaywrightTimeoutError as exc:
        raise BrowserTimeoutError(str(exc)) from exc
    except Error as exc:
        raise BrowserActionError(str(exc)) from exc
