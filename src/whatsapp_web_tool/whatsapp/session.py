"""Ownership of the single WhatsApp Web browser session."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..browser.base import BrowserActionError, BrowserSession, ChatPage
from ..config import BrowserConfig, TimingConfig
from ..errors import BrowserLaunchError, NotConnectedError, PageUnavailableError
from ..models import SessionDescriptor
from ..pacing import Pacer
from .scripts import DISMISS_DIALOG
from .selectors import SelectorTable

LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[[BrowserConfig], BrowserSession]


class SessionManager:
    """Keep at most one live browser session and hand out its page.

    Launching a second session while the first is still open makes WhatsApp
    Web show its "open in another window" screen, so :meth:`connect` always
    replaces the existing session instead of adding one.
    """

    def __init__(
        self,
        config: BrowserConfig,
        session_factory: SessionFactory,
        *,
        selectors: Optional[SelectorTable] = None,
        timing: Optional[TimingConfig] = None,
        pacer: Optional[Pacer] = None,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._selectors = selectors or SelectorTable()
        self._timing = timing or TimingConfig()
        self._pacer = pacer or Pacer()
        self._session: Optional[BrowserSession] = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    def connect(self, headless: Optional[bool] = None) -> SessionDescriptor:
        """Launch a fresh session, open WhatsApp Web and return its details."""

        self.close()
        config = self._config
        if headless is not None:
            config = config.model_copy(update={"headless": headless})

        session = self._session_factory(config)
        LOGGER.info("Launching browser (headless=%s, profile=%s)", config.headless, config.profile_path)
        try:
            session.start()
        except Exception as exc:
            raise BrowserLaunchError(f"Could not launch browser: {exc}") from exc
        self._session = session

        page = self.get_page()
        page.navigate(config.app_url, timeout_ms=config.navigation_timeout_ms)
        self._pacer.pause(self._timing.after_navigation)

        dismissed = self._dismiss_use_here(page)
        return SessionDescriptor(
            url=page.url,
            profile_path=config.profile_path,
            headless=config.headless,
            dismissed_dialog=dismissed,
        )

    def get_page(self) -> ChatPage:
        if self._session is None:
            raise NotConnectedError()
        page = self._session.page
        if page is None:
            raise PageUnavailableError()
        return page

    def close(self) -> None:
        """Tear down the current session; errors while closing are ignored."""

        session, self._session = self._session, None
        if session is None:
            return
        LOGGER.info("Closing existing browser session")
        try:
            session.stop()
        except Exception:
            LOGGER.warning("Ignoring error while closing browser session", exc_info=True)

    def _dismiss_use_here(self, page: ChatPage) -> Optional[str]:
        label = None
        try:
            label = page.evaluate(
                DISMISS_DIALOG,
                {
                    "buttons": self._selectors.dialog_buttons,
                    "labels": list(self._selectors.use_here_labels),
                },
            )
        except BrowserActionError as exc:
            LOGGER.debug("Session dialog check failed: %s", exc)
        if label:
            LOGGER.info("Dismissed 'use here' dialog via %r", label)
        self._pacer.pause(self._timing.after_dialog)
        return label
