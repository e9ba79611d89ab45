from pathlib import Path

import pytest
from pydantic import ValidationError

from whatsapp_web_tool.config import DelayRange, load_config


def test_defaults_match_whatsapp_web():
    config = load_config()

    assert config.browser.app_url == "https://web.whatsapp.com/"
    assert config.browser.profile_path == Path("whatsapp_session")
    assert config.timeouts.locator_ms == 3000
    assert config.timeouts.sidebar_ms == 15000
    assert config.timing.after_navigation == DelayRange(min_ms=2000, max_ms=4000)
    assert config.selectors.sidebar == ("#side",)


def test_load_config_reads_env_file(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "WHATSAPP_WEB_TOOL_BROWSER__HEADLESS=true",
                "WHATSAPP_WEB_TOOL_BROWSER__PROFILE_PATH=/tmp/wa-profile",
                "WHATSAPP_WEB_TOOL_TIMEOUTS__SIDEBAR_MS=30000",
                "WHATSAPP_WEB_TOOL_RESOLVER__VERIFY_FALLBACK=true",
            ]
        )
    )

    config = load_config(env_file=env_path)

    assert config.browser.headless is True
    assert config.browser.profile_path == Path("/tmp/wa-profile")
    assert config.timeouts.sidebar_ms == 30000
    assert config.resolver.verify_fallback is True


def test_load_config_prioritises_overrides(tmp_path: Path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("WHATSAPP_WEB_TOOL_SERVER__NAME=from-env\n")

    config_path = tmp_path / "whatsapp.yaml"
    config_path.write_text(
        "\n".join(
            [
                "browser:",
                "  headless: true",
                "timing:",
                "  awaiting_results: {min_ms: 10, max_ms: 20}",
                "selectors:",
                "  compose_box:",
                "    - \"div[data-tab='99']\"",
            ]
        )
    )

    config = load_config(config_path, env_file=env_path, browser={"headless": False})

    assert config.browser.headless is False
    assert config.timing.awaiting_results.max_ms == 20
    assert config.timing.after_navigation.min_ms == 2000
    assert config.selectors.compose_box == ("div[data-tab='99']",)
    assert config.selectors.search_input[0] == "div[contenteditable='true'][data-tab='3']"
    assert config.server.name == "from-env"


def test_delay_range_rejects_inverted_bounds():
    with pytest.raises(ValidationError):
        DelayRange(min_ms=500, max_ms=100)


def test_stealth_is_on_by_default_and_env_overridable(monkeypatch: pytest.MonkeyPatch) -> None:
    assert load_config().browser.stealth is True

    monkeypatch.setenv("WHATSAPP_WEB_TOOL_BROWSER__STEALTH", "false")

    assert load_config().browser.stealth is False
