"""Turn WhatsApp Web DOM snapshots into chat and message records."""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from ..browser.base import ChatPage
from ..config import TimeoutConfig, TimingConfig
from ..errors import SidebarNotReadyError, TargetNotFoundError
from ..models import ChatSummary, MessageRecord
from ..pacing import Pacer
from .locator import ElementLocator
from .scripts import CHAT_LIST_SNAPSHOT, MESSAGE_SNAPSHOT
from .selectors import SelectorTable

LOGGER = logging.getLogger(__name__)

PREVIEW_MAX_LENGTH = 200
PRE_PLAIN_TEXT = re.compile(r"\[(.*?)\]\s*(.*?):")


class ChatRowSnapshot(BaseModel):
    has_title: bool = False
    title_attr: Optional[str] = None
    title_text: Optional[str] = None
    texts: list[str] = Field(default_factory=list)


class ChatListSnapshot(BaseModel):
    """Rows matched by one chat-list layout candidate."""

    selector: str
    count: int = 0
    rows: list[ChatRowSnapshot] = Field(default_factory=list)


class MessageRowSnapshot(BaseModel):
    text: str = ""
    class_name: str = ""
    has_text_node: bool = False
    text_node: Optional[str] = None
    fallback_text: Optional[str] = None
    pre_plain_text: Optional[str] = None
    has_incoming: bool = False
    has_outgoing: bool = False


class MessageListSnapshot(BaseModel):
    """Rows matched by one message-row candidate inside the main pane."""

    selector: str
    rows: list[MessageRowSnapshot] = Field(default_factory=list)


def chat_title(row: ChatRowSnapshot) -> str:
    if not row.has_title:
        return "Unknown"
    return row.title_attr or row.title_text or "Unknown"


def last_message_preview(texts: Sequence[str], title: str) -> str:
    """Pick the last text that looks like a message preview.

    Timestamps, unread badges and the preview are all plain text nodes, so
    the last non-empty, non-title, reasonably short one wins.
    """

    preview = ""
    for text in texts:
        text = text.strip()
        if text and text != title and len(text) < PREVIEW_MAX_LENGTH:
            preview = text
    return preview


def extract_chat_summaries(
    snapshots: Sequence[ChatListSnapshot],
    limit: int,
) -> list[ChatSummary]:
    """Project the first matching chat-list layout into summaries.

    Returns the "no chats found" sentinel only when no layout matched.
    """

    matched = next((snapshot for snapshot in snapshots if snapshot.count > 0), None)
    if matched is None:
        return [ChatSummary.no_chats_found()]
    summaries = []
    for row in matched.rows[: max(limit, 0)]:
        title = chat_title(row)
        summaries.append(
            ChatSummary(title=title, last_message_preview=last_message_preview(row.texts, title))
        )
    return summaries


def parse_pre_plain_text(meta: Optional[str]) -> tuple[str, str]:
    """Split ``"[10:42, 1/2/2024] Alice: "`` into ``("10:42, 1/2/2024", "Alice")``."""

    if not meta:
        return "", ""
    match = PRE_PLAIN_TEXT.search(meta)
    if not match:
        return "", ""
    return match.group(1), match.group(2)


def message_sender(
    row: MessageRowSnapshot,
    incoming: str = "message-in",
    outgoing: str = "message-out",
) -> str:
    if outgoing in row.class_name or row.has_outgoing:
        return "Me"
    if incoming in row.class_name or row.has_incoming:
        return "Contact"
    return "Unknown"


def message_record(
    row: MessageRowSnapshot,
    incoming: str = "message-in",
    outgoing: str = "message-out",
) -> MessageRecord:
    # An empty dedicated text node (voice notes, media) falls through to the row text.
    if row.text_node is not None:
        content = row.text_node or row.text
    else:
        content = row.fallback_text or row.text
    timestamp, sender = parse_pre_plain_text(row.pre_plain_text)
    if not sender:
        sender = message_sender(row, incoming, outgoing)
    return MessageRecord(sender=sender, content=content, timestamp=timestamp)


def extract_message_records(
    snapshots: Optional[Sequence[MessageListSnapshot]],
    limit: int,
    *,
    incoming: str = "message-in",
    outgoing: str = "message-out",
) -> list[MessageRecord]:
    """Return the most recent ``limit`` messages in chronological order.

    The row candidate with the most matches is used, since message markup
    varies between releases and a narrower selector would silently drop
    history. ``None`` means the main pane is absent.
    """

    if not snapshots or limit <= 0:
        return []
    best = snapshots[0]
    for snapshot in snapshots[1:]:
        if len(snapshot.rows) > len(best.rows):
            best = snapshot
    rows = [row for row in best.rows if row.has_text_node and row.text]
    return [message_record(row, incoming, outgoing) for row in rows[-limit:]]


def wait_for_sidebar(
    page: ChatPage,
    locator: ElementLocator,
    selectors: SelectorTable,
    timeout_ms: int,
) -> str:
    try:
        return locator.locate(page, selectors.sidebar, timeout_ms=timeout_ms, target="sidebar")
    except TargetNotFoundError as exc:
        raise SidebarNotReadyError(timeout_ms) from exc


class ChatListExtractor:
    """Read the chat list currently rendered in the sidebar."""

    def __init__(
        self,
        locator: ElementLocator,
        *,
        selectors: Optional[SelectorTable] = None,
        timing: Optional[TimingConfig] = None,
        timeouts: Optional[TimeoutConfig] = None,
        pacer: Optional[Pacer] = None,
    ) -> None:
        self._locator = locator
        self._selectors = selectors or SelectorTable()
        self._timing = timing or TimingConfig()
        self._timeouts = timeouts or TimeoutConfig()
        self._pacer = pacer or Pacer()

    def extract(self, page: ChatPage, limit: int) -> list[ChatSummary]:
        wait_for_sidebar(page, self._locator, self._selectors, self._timeouts.sidebar_ms)
        self._pacer.pause(self._timing.after_sidebar_list)
        raw = page.evaluate(
            CHAT_LIST_SNAPSHOT,
            {
                "containers": list(self._selectors.chat_list),
                "title": self._selectors.chat_title,
                "preview": self._selectors.chat_preview,
                "limit": max(limit, 0),
            },
        )
        snapshots = [ChatListSnapshot.model_validate(item) for item in raw or []]
        chats = extract_chat_summaries(snapshots, limit)
        LOGGER.info("Read %d chat(s) from the sidebar", len(chats))
        return chats


class MessageExtractor:
    """Read recent messages from the conversation open in the main pane."""

    def __init__(self, selectors: Optional[SelectorTable] = None) -> None:
        self._selectors = selectors or SelectorTable()

    def extract(self, page: ChatPage, limit: int) -> list[MessageRecord]:
        raw = page.evaluate(
            MESSAGE_SNAPSHOT,
            {
                "main": self._selectors.main_pane,
                "rows": list(self._selectors.message_rows),
                "text": self._selectors.message_text,
                "marker": self._selectors.message_text_marker,
                "fallback": self._selectors.message_fallback_text,
                "metaAttribute": self._selectors.message_meta_attribute,
                "incoming": self._selectors.incoming_marker,
                "outgoing": self._selectors.outgoing_marker,
            },
        )
        if raw is None:
            LOGGER.info("No conversation pane rendered")
            return []
        snapshots = [MessageListSnapshot.model_validate(item) for item in raw]
        messages = extract_message_records(
            snapshots,
            limit,
            incoming=self._selectors.incoming_marker,
            outgoing=self._selectors.outgoing_marker,
        )
        LOGGER.info("Read %d message(s) from the open chat", len(messages))
        return messages
