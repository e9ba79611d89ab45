"""Errors raised by the WhatsApp Web automation layer."""

from __future__ import annotations

from typing import Iterable


class WhatsappToolError(RuntimeError):
    """Base class for failures the tool reports back to its caller."""


class NotConnectedError(WhatsappToolError):
    """Raised when an operation runs before ``connect``."""

    def __init__(self) -> None:
        super().__init__("Browser not initialized. Call connect_whatsapp first.")


class PageUnavailableError(WhatsappToolError):
    """Raised when the session exists but has no usable page."""

    def __init__(self) -> None:
        super().__init__("Page not initialized.")


class BrowserLaunchError(WhatsappToolError):
    """Raised when the browser process cannot be started."""


class TargetNotFoundError(WhatsappToolError):
    """Raised when none of a target's selector candidates matched in time."""

    def __init__(self, target: str, selectors: Iterable[str]) -> None:
        self.target = target
        self.selectors = tuple(selectors)
        attempted = ", ".join(self.selectors) or "<none>"
        super().__init__(f"Could not locate {target}; tried: {attempted}")


class SearchInputNotFoundError(WhatsappToolError):
    """Raised when the chat search box cannot be located."""

    def __init__(self) -> None:
        super().__init__("Search input not found. Make sure WhatsApp Web is loaded.")


class SidebarNotReadyError(WhatsappToolError):
    """Raised when the chat sidebar does not render within its timeout."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"WhatsApp Web sidebar did not load within {timeout_ms} ms.")


class MessageInputNotFoundError(WhatsappToolError):
    """Raised when the compose box is missing after opening a chat."""

    def __init__(self) -> None:
        super().__init__("Message input not found after opening chat.")


class ChatOpenError(WhatsappToolError):
    """Raised when the requested chat could not be opened."""
