"""Shared models used across the WhatsApp Web tool."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

NO_CHATS_TITLE = "No chats found"
NO_CHATS_HINT = "Check that chats are loaded in WhatsApp Web"


class ChatSummary(BaseModel):
    """One row of the chat list."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = "Unknown"
    last_message_preview: str = Field(default="", alias="lastMessagePreview")

    @classmethod
    def no_chats_found(cls) -> "ChatSummary":
        """Sentinel returned when no chat-list layout matched at all."""

        return cls(title=NO_CHATS_TITLE, last_message_preview=NO_CHATS_HINT)


class MessageRecord(BaseModel):
    """A single message bubble read from the open conversation."""

    sender: str = "Unknown"
    content: str = ""
    timestamp: str = ""


class ChatTranscript(BaseModel):
    """Recent messages of one chat."""

    chat: str
    messages: list[MessageRecord] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.messages


class InteractionOutcome(BaseModel):
    """Result of trying to open a chat."""

    opened: bool
    already_open: bool = False
    used_fallback: bool = False
    reason: Optional[str] = None

    @classmethod
    def success(cls, already_open: bool = False, *, used_fallback: bool = False) -> "InteractionOutcome":
        return cls(opened=True, already_open=already_open, used_fallback=used_fallback)

    @classmethod
    def failure(cls, reason: str) -> "InteractionOutcome":
        return cls(opened=False, reason=reason)


class SessionDescriptor(BaseModel):
    """Information about a freshly connected browser session."""

    url: str
    profile_path: Path
    headless: bool
    dismissed_dialog: Optional[str] = None

    @property
    def status(self) -> str:
        return f"Browser launched. Session restored from {self.profile_path.as_posix()}/. URL: {self.url}"
