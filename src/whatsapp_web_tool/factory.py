"""Factories for constructing components from configuration."""

from __future__ import annotations

from .browser.playwright_session import PlaywrightBrowserSession
from .client import WhatsappClient
from .config import BrowserConfig, WhatsappToolConfig


def build_browser(config: BrowserConfig) -> PlaywrightBrowserSession:
    return PlaywrightBrowserSession(config)


def build_client(config: WhatsappToolConfig) -> WhatsappClient:
    return WhatsappClient(config, build_browser)
