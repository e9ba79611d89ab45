"""Open a chat by name through the WhatsApp Web search box."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from ..browser.base import BrowserActionError, ChatPage
from ..config import DelayRange, ResolverConfig, TimeoutConfig, TimingConfig
from ..errors import ChatOpenError, SearchInputNotFoundError, TargetNotFoundError
from ..models import InteractionOutcome
from ..pacing import Pacer
from .locator import ElementLocator
from .selectors import SelectorTable

LOGGER = logging.getLogger(__name__)


class ResolverState(str, enum.Enum):
    """Steps of the chat-opening sequence."""

    IDLE = "idle"
    CHECKING_CURRENT = "checking_current"
    SEARCHING = "searching"
    TYPING = "typing"
    AWAITING_RESULTS = "awaiting_results"
    SELECTING = "selecting"
    OPENED = "opened"
    FAILED = "failed"


def type_with_jitter(
    page: ChatPage,
    selector: str,
    text: str,
    pacer: Pacer,
    keystroke: DelayRange,
) -> None:
    """Type ``text`` one character at a time with a fresh delay per key."""

    for char in text:
        page.type(selector, char, delay_ms=0)
        pacer.pause(keystroke)


def read_header_title(
    page: ChatPage,
    locator: ElementLocator,
    selectors: SelectorTable,
    timeout_ms: int,
) -> Optional[str]:
    """Return the title of the conversation currently open, if any."""

    try:
        selector = locator.locate(
            page, selectors.header_title, timeout_ms=timeout_ms, target="conversation header"
        )
    except TargetNotFoundError:
        return None
    for text in page.element_texts(selector):
        if text.strip():
            return text.strip()
    return None


class ChatResolver:
    """Make sure the requested chat is the one open in the main pane."""

    def __init__(
        self,
        locator: ElementLocator,
        *,
        selectors: Optional[SelectorTable] = None,
        timing: Optional[TimingConfig] = None,
        timeouts: Optional[TimeoutConfig] = None,
        config: Optional[ResolverConfig] = None,
        pacer: Optional[Pacer] = None,
    ) -> None:
        self._locator = locator
        self._selectors = selectors or SelectorTable()
        self._timing = timing or TimingConfig()
        self._timeouts = timeouts or TimeoutConfig()
        self._config = config or ResolverConfig()
        self._pacer = pacer or Pacer()
        self.state = ResolverState.IDLE

    def open_chat(self, page: ChatPage, chat_name: str) -> InteractionOutcome:
        """Open ``chat_name`` and report how it went.

        Raises :class:`ChatOpenError` for a blank name and
        :class:`SearchInputNotFoundError` when the search box is
        missing; every other path ends in an outcome.
        """

        if not chat_name.strip():
            raise ChatOpenError("Chat name must not be empty.")
        self.state = ResolverState.IDLE
        self._transition(ResolverState.CHECKING_CURRENT)
        current = read_header_title(page, self._locator, self._selectors, self._timeouts.header_ms)
        if current and chat_name.lower() in current.lower():
            LOGGER.info("Chat %r is already open", chat_name)
            self._transition(ResolverState.OPENED)
            return InteractionOutcome.success(already_open=True)

        self._transition(ResolverState.SEARCHING)
        try:
            search_input = self._locator.locate(
                page,
                self._selectors.search_input,
                timeout_ms=self._timeouts.locator_ms,
                target="search input",
            )
        except TargetNotFoundError as exc:
            self._transition(ResolverState.FAILED)
            raise SearchInputNotFoundError() from exc

        self._transition(ResolverState.TYPING)
        self._pacer.pause(self._timing.before_search_click)
        page.click(search_input)
        self._pacer.pause(self._timing.after_search_click)
        page.press("Control+A")
        self._pacer.pause(self._timing.after_select_all)
        page.press("Backspace")
        self._pacer.pause(self._timing.after_clear)
        type_with_jitter(page, search_input, chat_name, self._pacer, self._timing.search_keystroke)

        self._transition(ResolverState.AWAITING_RESULTS)
        self._pacer.pause(self._timing.awaiting_results)

        self._transition(ResolverState.SELECTING)
        if self._click_exact_match(page, chat_name):
            self._transition(ResolverState.OPENED)
            return InteractionOutcome.success()

        LOGGER.info("No exact search result for %r; pressing Enter", chat_name)
        page.press("Enter")
        if self._config.verify_fallback:
            self._pacer.pause(self._timing.after_open)
            opened = read_header_title(
                page, self._locator, self._selectors, self._timeouts.header_ms
            )
            if not opened or chat_name.lower() not in opened.lower():
                self._transition(ResolverState.FAILED)
                return InteractionOutcome.failure(
                    f'Chat "{chat_name}" not found (open chat: {opened or "none"}).'
                )
        self._transition(ResolverState.OPENED)
        return InteractionOutcome.success(used_fallback=True)

    def _click_exact_match(self, page: ChatPage, chat_name: str) -> bool:
        wanted = chat_name.strip().lower()
        for selector in self._selectors.search_result_candidates(chat_name):
            try:
                texts = page.element_texts(selector)
            except BrowserActionError as exc:
                LOGGER.debug("Result selector %r failed: %s", selector, exc)
                continue
            for index, text in enumerate(texts):
                if text.strip().lower() != wanted:
                    continue
                try:
                    page.click_nth(selector, index)
                except BrowserActionError as exc:
                    LOGGER.debug("Click on %r[%d] failed: %s", selector, index, exc)
                    break
                LOGGER.info("Opened chat %r via %r", chat_name, selector)
                return True
        return False

    def _transition(self, state: ResolverState) -> None:
        LOGGER.debug("Chat resolver: %s -> %s", self.state.value, state.value)
        self.state = state
