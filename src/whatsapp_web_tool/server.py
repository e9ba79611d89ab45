"""Tool server exposing the WhatsApp Web operations over MCP."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Annotated, Any, Callable, TypeVar

from fastmcp import FastMCP
from pydantic import Field

from .client import WhatsappClient

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LIMIT = 10


class BrowserWorker:
    """Run every browser call on one dedicated thread.

    The Playwright sync API must be driven from the thread that started it,
    and one thread also keeps tool invocations from overlapping on the page.
    """

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="whatsapp-browser")

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    def call(self, func: Callable[..., T], *args: Any) -> T:
        return self._executor.submit(func, *args).result()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


class WhatsappTools:
    """Tool bodies: run an operation and turn any failure into a message."""

    def __init__(self, client: WhatsappClient) -> None:
        self._client = client

    def connect(self, headless: bool = False) -> str:
        try:
            return self._client.connect(headless).status
        except Exception as exc:
            LOGGER.exception("connect_whatsapp failed")
            return f"Error connecting: {exc}"

    def list_chats(self, limit: int = DEFAULT_LIMIT) -> str:
        try:
            chats = self._client.list_chats(limit)
        except Exception as exc:
            LOGGER.exception("list_chats failed")
            return (
                f"Error listing chats: {str(exc).rstrip('.')}. "
                "Ensure you are logged in and 'connect_whatsapp' has been called."
            )
        return json.dumps([chat.model_dump(by_alias=True) for chat in chats], indent=2, ensure_ascii=False)

    def read_messages(self, chat_name: str, limit: int = DEFAULT_LIMIT) -> str:
        try:
            transcript = self._client.read_messages(chat_name, limit)
        except Exception as exc:
            LOGGER.exception("read_messages failed")
            return f"Error reading messages: {exc}"
        if transcript.is_empty:
            return (
                f'No messages found in chat "{chat_name}". '
                "If the chat is empty or just opened, try waiting a few seconds."
            )
        return json.dumps(transcript.model_dump(), indent=2, ensure_ascii=False)

    def send_message(self, chat_name: str, message: str) -> str:
        try:
            self._client.send_message(chat_name, message)
        except Exception as exc:
            LOGGER.exception("send_message failed")
            return f"Error sending message: {exc}"
        return f'Message sent to "{chat_name}" successfully.'


def build_server(
    tools: WhatsappTools,
    worker: BrowserWorker,
    *,
    name: str = "whatsapp-mcp-server",
) -> FastMCP:
    """Register the four WhatsApp tools on a new FastMCP server."""

    server = FastMCP(name=name)

    @server.tool(
        name="connect_whatsapp",
        description=(
            "Launch browser and connect to WhatsApp Web. "
            "Use this to login or verify if you are already logged in."
        ),
    )
    async def connect_whatsapp(
        headless: Annotated[
            bool,
            Field(description="Run browser in headless mode. Set to false to scan QR code initially."),
        ] = False,
    ) -> str:
        return await worker.run(tools.connect, headless)

    @server.tool(name="list_chats", description="List recent chats from WhatsApp Web.")
    async def list_chats(
        limit: Annotated[int, Field(ge=0, description="Maximum number of chats to return.")] = DEFAULT_LIMIT,
    ) -> str:
        return await worker.run(tools.list_chats, limit)

    @server.tool(
        name="read_messages",
        description="Read recent messages from a specific chat by its name.",
    )
    async def read_messages(
        chatName: Annotated[  # noqa: N803
            str,
            Field(min_length=1, description="Exact name of the chat or contact."),
        ],
        limit: Annotated[
            int,
            Field(ge=0, description="Number of recent messages to retrieve (max visible)."),
        ] = DEFAULT_LIMIT,
    ) -> str:
        return await worker.run(tools.read_messages, chatName, limit)

    @server.tool(
        name="send_message",
        description="Select a chat by its exact name and send a message.",
    )
    async def send_message(
        chatName: Annotated[  # noqa: N803
            str,
            Field(min_length=1, description="Exact name of the chat or contact."),
        ],
        message: Annotated[str, Field(description="Message content to send.")],
    ) -> str:
        return await worker.run(tools.send_message, chatName, message)

    return server


def serve(client: WhatsappClient, *, name: str, transport: str = "stdio") -> None:
    """Run the tool server until the transport closes, then close the browser."""

    worker = BrowserWorker()
    server = build_server(WhatsappTools(client), worker, name=name)
    LOGGER.info("Starting %s (%s transport)", name, transport)
    try:
        server.run(transport=transport)
    finally:
        LOGGER.info("Cleaning up %s", name)
        try:
            worker.call(client.close)
        finally:
            worker.shutdown()

