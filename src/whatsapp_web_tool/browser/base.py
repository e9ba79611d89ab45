"""Browser session abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class BrowserActionError(RuntimeError):
    """Raised when executing a browser action fails."""


class BrowserTimeoutError(BrowserActionError):
    """Raised when a browser wait does not complete within its timeout."""


class ChatPage(ABC):
    """Capabilities the automation layer consumes from a live page."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Return the current page URL."""

    @abstractmethod
    def navigate(self, url: str, *, timeout_ms: Optional[int] = None) -> None:
        """Open ``url`` and wait until network activity settles."""

    @abstractmethod
    def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        """Block until ``selector`` matches at least one element."""

    @abstractmethod
    def evaluate(self, script: str, arg: Any = None) -> Any:
        """Evaluate a JavaScript function in the page and return its result."""

    @abstractmethod
    def click(self, selector: str) -> None:
        """Click the first element matching ``selector``."""

    @abstractmethod
    def element_texts(self, selector: str) -> list[str]:
        """Return the ``title`` attribute, or text, of every match."""

    @abstractmethod
    def click_nth(self, selector: str, index: int) -> None:
        """Click the ``index``-th element matching ``selector``."""

    @abstractmethod
    def type(self, selector: str, text: str, *, delay_ms: int = 0) -> None:
        """Type ``text`` into the element matching ``selector``."""

    @abstractmethod
    def press(self, key: str) -> None:
        """Press a key or chord such as ``Enter`` or ``Control+A``."""


class BrowserSession(ABC):
    """Interface for an automation-capable browser session."""

    @abstractmethod
    def start(self) -> None:
        """Launch the browser session."""

    @abstractmethod
    def stop(self) -> None:
        """Terminate the browser session."""

    @property
    @abstractmethod
    def page(self) -> Optional[ChatPage]:
        """Return the active page, if any."""
