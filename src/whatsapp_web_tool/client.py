"""High-level WhatsApp Web operations built from the automation components."""

from __future__ import annotations

import logging
from typing import Optional

from .browser.base import BrowserActionError
from .config import WhatsappToolConfig
from .errors import ChatOpenError, MessageInputNotFoundError, TargetNotFoundError
from .models import ChatSummary, ChatTranscript, SessionDescriptor
from .pacing import Pacer
from .whatsapp.extractors import ChatListExtractor, MessageExtractor, wait_for_sidebar
from .whatsapp.locator import ElementLocator
from .whatsapp.resolver import ChatResolver, type_with_jitter
from .whatsapp.session import SessionFactory, SessionManager

LOGGER = logging.getLogger(__name__)


class WhatsappClient:
    """Connect to WhatsApp Web, list chats, read and send messages.

    The client owns the only :class:`SessionManager`; create one client per
    process and pass it to whatever exposes the operations.
    """

    def __init__(
        self,
        config: WhatsappToolConfig,
        session_factory: SessionFactory,
        *,
        pacer: Optional[Pacer] = None,
    ) -> None:
        self._config = config
        self._pacer = pacer or Pacer()
        self._selectors = config.selectors
        self._timing = config.timing
        self._timeouts = config.timeouts
        self.sessions = SessionManager(
            config.browser,
            session_factory,
            selectors=self._selectors,
            timing=self._timing,
            pacer=self._pacer,
        )
        self._locator = ElementLocator(default_timeout_ms=self._timeouts.locator_ms)
        self._resolver = ChatResolver(
            self._locator,
            selectors=self._selectors,
            timing=self._timing,
            timeouts=self._timeouts,
            config=config.resolver,
            pacer=self._pacer,
        )
        self._chat_list = ChatListExtractor(
            self._locator,
            selectors=self._selectors,
            timing=self._timing,
            timeouts=self._timeouts,
            pacer=self._pacer,
        )
        self._messages = MessageExtractor(self._selectors)

    def connect(self, headless: Optional[bool] = None) -> SessionDescriptor:
        return self.sessions.connect(headless)

    def close(self) -> None:
        self.sessions.close()

    def list_chats(self, limit: int = 10) -> list[ChatSummary]:
        page = self.sessions.get_page()
        return self._chat_list.extract(page, limit)

    def read_messages(self, chat_name: str, limit: int = 10) -> ChatTranscript:
        page = self.sessions.get_page()
        self._open_chat(chat_name)
        try:
            page.wait_for_selector(self._selectors.main_pane, self._timeouts.main_pane_ms)
        except BrowserActionError:
            LOGGER.debug("Conversation pane did not appear for %r", chat_name)
        self._pacer.pause(self._timing.after_open_read)
        return ChatTranscript(chat=chat_name, messages=self._messages.extract(page, limit))

    def send_message(self, chat_name: str, message: str) -> None:
        page = self.sessions.get_page()
        self._open_chat(chat_name)
        self._pacer.pause(self._timing.after_open)
        try:
            compose = self._locator.locate(
                page,
                self._selectors.compose_box,
                timeout_ms=self._timeouts.locator_ms,
                target="message input",
            )
        except TargetNotFoundError as exc:
            raise MessageInputNotFoundError() from exc

        page.click(compose)
        self._pacer.pause(self._timing.after_compose_click)
        type_with_jitter(page, compose, message, self._pacer, self._timing.compose_keystroke)
        self._pacer.pause(self._timing.before_send)
        page.press("Enter")
        LOGGER.info("Sent message to %r (%d characters)", chat_name, len(message))

    def _open_chat(self, chat_name: str) -> None:
        page = self.sessions.get_page()
        wait_for_sidebar(page, self._locator, self._selectors, self._timeouts.sidebar_ms)
        self._pacer.pause(self._timing.after_sidebar)
        outcome = self._resolver.open_chat(page, chat_name)
        if not outcome.opened:
            raise ChatOpenError(outcome.reason or f'Could not open chat "{chat_name}".')
