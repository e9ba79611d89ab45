import pytest

from page_stubs import FakeChatPage
from whatsapp_web_tool.errors import TargetNotFoundError
from whatsapp_web_tool.whatsapp.locator import ElementLocator

CANDIDATES = ("#specific", "#generic", "#fallback")


def test_locate_returns_first_matching_candidate_without_trying_later_ones():
    page = FakeChatPage(present={"#specific", "#generic", "#fallback"})

    selector = ElementLocator().locate(page, CANDIDATES)

    assert selector == "#specific"
    assert page.waited() == ["#specific"]


def test_locate_skips_candidates_that_time_out():
    page = FakeChatPage(present={"#generic", "#fallback"})

    selector = ElementLocator().locate(page, CANDIDATES)

    assert selector == "#generic"
    assert page.waited() == ["#specific", "#generic"]


def test_locate_reports_every_attempted_selector_when_nothing_matches():
    page = FakeChatPage()

    with pytest.raises(TargetNotFoundError) as excinfo:
        ElementLocator().locate(page, CANDIDATES, target="search input")

    assert excinfo.value.target == "search input"
    assert excinfo.value.selectors == CANDIDATES
    assert "#fallback" in str(excinfo.value)


def test_locate_uses_default_timeout_unless_overridden():
    page = FakeChatPage(present={"#side"})
    locator = ElementLocator(default_timeout_ms=3000)

    locator.locate(page, ["#missing", "#side"])
    locator.locate(page, ["#side"], timeout_ms=15000)

    timeouts = [call[2] for call in page.calls if call[0] == "wait"]
    assert timeouts == [3000, 3000, 15000]


def test_locate_with_no_candidates_fails():
    with pytest.raises(TargetNotFoundError):
        ElementLocator().locate(FakeChatPage(), [])
