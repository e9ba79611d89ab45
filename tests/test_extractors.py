import pytest

from page_stubs import FakeChatPage, chat_list_script, chat_row, message_row, message_script
from whatsapp_web_tool.errors import SidebarNotReadyError
from whatsapp_web_tool.models import NO_CHATS_TITLE
from whatsapp_web_tool.pacing import NoDelayPacer
from whatsapp_web_tool.whatsapp.extractors import (
    ChatListExtractor,
    ChatListSnapshot,
    MessageExtractor,
    MessageListSnapshot,
    MessageRowSnapshot,
    extract_chat_summaries,
    extract_message_records,
    last_message_preview,
    message_record,
    parse_pre_plain_text,
)
from whatsapp_web_tool.whatsapp.locator import ElementLocator
from whatsapp_web_tool.whatsapp.scripts import CHAT_LIST_SNAPSHOT, MESSAGE_SNAPSHOT
from whatsapp_web_tool.whatsapp.selectors import SelectorTable

SELECTORS = SelectorTable()
ARIA_LIST, FRENCH_LIST, PANE_LIST, CELL_FRAMES = SELECTORS.chat_list
ROWS, INCOMING, OUTGOING, CONTAINERS = SELECTORS.message_rows


def chat_snapshots(matches):
    raw = chat_list_script(matches)({"containers": list(SELECTORS.chat_list), "limit": 50})
    return [ChatListSnapshot.model_validate(item) for item in raw]


def message_snapshots(matches):
    raw = message_script(matches)({"rows": list(SELECTORS.message_rows)})
    return [MessageListSnapshot.model_validate(item) for item in raw]


# Chat list ------------------------------------------------------------------


def test_extract_chat_summaries_respects_limit_and_document_order():
    rows = [chat_row(f"Chat {idx}", f"message {idx}") for idx in range(5)]

    chats = extract_chat_summaries(chat_snapshots({ARIA_LIST: rows}), limit=3)

    assert [chat.title for chat in chats] == ["Chat 0", "Chat 1", "Chat 2"]
    assert chats[0].last_message_preview == "message 0"


def test_first_matching_layout_wins_over_later_ones():
    snapshots = chat_snapshots(
        {
            PANE_LIST: [chat_row("From pane")],
            CELL_FRAMES: [chat_row("From cells"), chat_row("Other")],
        }
    )

    chats = extract_chat_summaries(snapshots, limit=10)

    assert [chat.title for chat in chats] == ["From pane"]


def test_sentinel_only_when_no_layout_matches():
    chats = extract_chat_summaries(chat_snapshots({}), limit=10)

    assert len(chats) == 1
    assert chats[0].title == NO_CHATS_TITLE


def test_zero_limit_on_matching_layout_is_empty_not_sentinel():
    snapshots = [ChatListSnapshot(selector=ARIA_LIST, count=4, rows=[])]

    assert extract_chat_summaries(snapshots, limit=0) == []


def test_chat_title_prefers_attribute_and_defaults_to_unknown():
    snapshots = chat_snapshots(
        {
            ARIA_LIST: [
                {"has_title": True, "title_attr": "Family", "title_text": "Family 👪", "texts": []},
                chat_row("Text only", title_attr=False),
                chat_row(None, "hello"),
            ]
        }
    )

    chats = extract_chat_summaries(snapshots, limit=10)

    assert [chat.title for chat in chats] == ["Family", "Text only", "Unknown"]
    assert chats[2].last_message_preview == "hello"


def test_preview_keeps_last_short_text_that_is_not_the_title():
    texts = ["Alice", "See you tomorrow", "x" * 200, "", "Alice"]

    assert last_message_preview(texts, "Alice") == "See you tomorrow"
    assert last_message_preview(["Bob", "yesterday", "ok"], "Bob") == "ok"
    assert last_message_preview([], "Bob") == ""


def test_chat_summary_serialises_with_camel_case_preview():
    chats = extract_chat_summaries(chat_snapshots({ARIA_LIST: [chat_row("Alice", "Hi")]}), limit=1)

    assert chats[0].model_dump(by_alias=True) == {"title": "Alice", "lastMessagePreview": "Hi"}


def test_chat_list_extractor_waits_for_sidebar():
    page = FakeChatPage(present=set())
    extractor = ChatListExtractor(ElementLocator(), pacer=NoDelayPacer())

    with pytest.raises(SidebarNotReadyError, match="15000"):
        extractor.extract(page, 10)
    assert page.waited() == ["#side"]


def test_chat_list_extractor_reads_live_page():
    rows = [chat_row(f"Chat {idx}", "10:00", f"last {idx}") for idx in range(5)]
    page = FakeChatPage(
        present={"#side"},
        evaluations={CHAT_LIST_SNAPSHOT: chat_list_script({CELL_FRAMES: rows})},
    )

    chats = ChatListExtractor(ElementLocator(), pacer=NoDelayPacer()).extract(page, 3)

    assert [(chat.title, chat.last_message_preview) for chat in chats] == [
        ("Chat 0", "last 0"),
        ("Chat 1", "last 1"),
        ("Chat 2", "last 2"),
    ]


# Messages -------------------------------------------------------------------


def test_parse_pre_plain_text():
    assert parse_pre_plain_text("[10:42, 1/2/2024] Alice Smith: ") == ("10:42, 1/2/2024", "Alice Smith")
    assert parse_pre_plain_text("no brackets here") == ("", "")
    assert parse_pre_plain_text(None) == ("", "")


def test_message_candidate_with_most_rows_is_used():
    snapshots = message_snapshots(
        {
            ROWS: [message_row("one", text_node="one")],
            INCOMING: [message_row("a", text_node="a"), message_row("b", text_node="b")],
            CONTAINERS: [message_row("x", text_node="x"), message_row("y", text_node="y")],
        }
    )

    records = extract_message_records(snapshots, limit=10)

    assert [record.content for record in records] == ["a", "b"]


def test_last_limit_rows_are_returned_in_chronological_order():
    rows = [message_row(f"m{idx}", text_node=f"m{idx}") for idx in range(8)]

    records = extract_message_records(message_snapshots({ROWS: rows}), limit=3)

    assert [record.content for record in records] == ["m5", "m6", "m7"]


def test_limit_larger_than_available_returns_everything():
    rows = [message_row("hi", text_node="hi"), message_row("bye", text_node="bye")]

    records = extract_message_records(message_snapshots({ROWS: rows}), limit=5)

    assert len(records) == 2


def test_rows_without_text_are_dropped_before_limiting():
    rows = [
        message_row("first", text_node="first"),
        message_row("", has_text_node=True),
        message_row("TODAY", has_text_node=False),
        message_row("second", text_node="second"),
    ]

    records = extract_message_records(message_snapshots({ROWS: rows}), limit=2)

    assert [record.content for record in records] == ["first", "second"]


def test_no_main_pane_or_zero_limit_yields_nothing():
    assert extract_message_records(None, limit=10) == []
    assert extract_message_records(message_snapshots({ROWS: [message_row("a")]}), limit=0) == []


def test_sender_and_timestamp_from_metadata():
    row = MessageRowSnapshot.model_validate(
        message_row(
            "Lunch?10:42",
            class_name="message-in focusable",
            text_node="Lunch?",
            pre_plain_text="[10:42, 1/2/2024] Alice: ",
        )
    )

    record = message_record(row)

    assert (record.sender, record.content, record.timestamp) == ("Alice", "Lunch?", "10:42, 1/2/2024")


def test_sender_inferred_from_direction_markers():
    outgoing = MessageRowSnapshot(text="sent", class_name="message-out", has_text_node=True)
    incoming = MessageRowSnapshot(text="got", has_incoming=True, has_text_node=True)
    unknown = MessageRowSnapshot(text="???", has_text_node=True)

    assert message_record(outgoing).sender == "Me"
    assert message_record(incoming).sender == "Contact"
    assert message_record(unknown).sender == "Unknown"
    assert message_record(unknown).timestamp == ""


def test_content_falls_back_to_span_then_row_text():
    with_span = MessageRowSnapshot(text="photo 10:01", fallback_text="photo", has_text_node=True)
    bare = MessageRowSnapshot(text="sticker 10:02", has_text_node=True)

    assert message_record(with_span).content == "photo"
    assert message_record(bare).content == "sticker 10:02"


def test_empty_text_node_falls_back_to_row_text():
    voice = MessageRowSnapshot(
        text="voice message 0:12 10:01",
        has_text_node=True,
        text_node="",
        fallback_text="10:01",
    )

    assert message_record(voice).content == "voice message 0:12 10:01"


def test_message_extractor_returns_empty_without_main_pane():
    page = FakeChatPage(evaluations={MESSAGE_SNAPSHOT: message_script(None)})

    assert MessageExtractor().extract(page, 10) == []


def test_message_extractor_reads_live_page():
    rows = [
        message_row("Hello", class_name="message-in", text_node="Hello"),
        message_row("Hi!", class_name="message-out", text_node="Hi!"),
    ]
    page = FakeChatPage(evaluations={MESSAGE_SNAPSHOT: message_script({ROWS: rows})})

    records = MessageExtractor().extract(page, 5)

    assert [(record.sender, record.content) for record in records] == [("Contact", "Hello"), ("Me", "Hi!")]
