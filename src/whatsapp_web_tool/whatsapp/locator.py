"""Resolve a logical UI target to the first selector that currently works."""

from __future__ import annotations

import logging
from typing import Iterable

from ..browser.base import BrowserActionError, ChatPage
from ..errors import TargetNotFoundError

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 3000


class ElementLocator:
    """Try ordered selector candidates and return the first that matches."""

    def __init__(self, default_timeout_ms: int = DEFAULT_TIMEOUT_MS) -> None:
        self._default_timeout_ms = default_timeout_ms

    def locate(
        self,
        page: ChatPage,
        candidates: Iterable[str],
        *,
        timeout_ms: int | None = None,
        target: str = "element",
    ) -> str:
        """Return the first of ``candidates`` that appears within ``timeout_ms``.

        Each candidate gets its own bounded wait, so the worst case is the sum
        of all waits. Later candidates are never evaluated once one matches.
        Raises :class:`TargetNotFoundError` listing every attempted selector.
        """

        timeout = self._default_timeout_ms if timeout_ms is None else timeout_ms
        attempted: list[str] = []
        for selector in candidates:
            attempted.append(selector)
            try:
                page.wait_for_selector(selector, timeout)
            except BrowserActionError as exc:
                LOGGER.debug("Selector %r for %s did not match: %s", selector, target, exc)
                continue
            LOGGER.debug("Resolved %s via %r", target, selector)
            return selector
        raise TargetNotFoundError(target, attempted)
