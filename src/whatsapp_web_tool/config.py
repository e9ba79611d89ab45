"""Configuration models for the WhatsApp Web tool."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .whatsapp.selectors import SelectorTable

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class DelayRange(BaseModel):
    """Inclusive bounds, in milliseconds, for a randomized pause."""

    min_ms: int = Field(ge=0)
    max_ms: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "DelayRange":
        if self.min_ms > self.max_ms:
            raise ValueError(f"min_ms ({self.min_ms}) must not exceed max_ms ({self.max_ms})")
        return self


def _delay(min_ms: int, max_ms: int) -> Any:
    return Field(default_factory=lambda: DelayRange(min_ms=min_ms, max_ms=max_ms))


class BrowserConfig(BaseModel):
    """Settings for the browser backend."""

    profile_path: Path = Path("whatsapp_session")
    headless: bool = False
    app_url: str = "https://web.whatsapp.com/"
    user_agent: Optional[str] = DEFAULT_USER_AGENT
    viewport_width: int = 1280
    viewport_height: int = 720
    navigation_timeout_ms: int = 60000
    stealth: bool = Field(
        default=True,
        description="Patch the page with playwright-stealth to hide automation markers.",
    )
    launch_args: list[str] = Field(
        default_factory=lambda: [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-blink-features=AutomationControlled",
        ]
    )


class TimeoutConfig(BaseModel):
    """Per-wait timeouts in milliseconds."""

    locator_ms: int = 3000
    sidebar_ms: int = 15000
    header_ms: int = 1000
    main_pane_ms: int = 5000


class TimingConfig(BaseModel):
    """Randomized pauses that model human pacing between UI steps."""

    after_navigation: DelayRange = _delay(2000, 4000)
    after_dialog: DelayRange = _delay(1500, 2500)
    after_sidebar: DelayRange = _delay(500, 1200)
    after_sidebar_list: DelayRange = _delay(1000, 3000)
    before_search_click: DelayRange = _delay(400, 900)
    after_search_click: DelayRange = _delay(300, 700)
    after_select_all: DelayRange = _delay(200, 400)
    after_clear: DelayRange = _delay(300, 800)
    search_keystroke: DelayRange = _delay(50, 150)
    awaiting_results: DelayRange = _delay(1500, 3500)
    after_open: DelayRange = _delay(1000, 2500)
    after_open_read: DelayRange = _delay(500, 1500)
    after_compose_click: DelayRange = _delay(600, 1500)
    compose_keystroke: DelayRange = _delay(50, 200)
    before_send: DelayRange = _delay(400, 1000)


class ResolverConfig(BaseModel):
    """Behaviour of the chat-opening sequence."""

    verify_fallback: bool = Field(
        default=False,
        description="Re-check the header title after the Enter fallback and fail on mismatch.",
    )


class ServerConfig(BaseModel):
    """Settings for the tool server."""

    name: str = "whatsapp-mcp-server"
    transport: str = "stdio"


class WhatsappToolConfig(BaseSettings):
    """Top-level configuration for the WhatsApp Web tool."""

    model_config = SettingsConfigDict(
        env_prefix="WHATSAPP_WEB_TOOL_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    selectors: SelectorTable = Field(default_factory=SelectorTable)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def load_config(
    path: Path | None = None,
    *,
    env_file: Path | None = None,
    **overrides: object,
) -> WhatsappToolConfig:
    """Build the tool configuration.

    Precedence, lowest first: defaults, ``WHATSAPP_WEB_TOOL_*`` variables
    (and ``env_file``), the YAML file at ``path``, then keyword ``overrides``
    such as ``browser={"headless": True}``.
    """

    file_values: dict[str, Any] = {}
    if path:
        import yaml

        file_values = yaml.safe_load(path.read_text()) or {}
    if overrides:
        _merge_sections(file_values, overrides)

    settings_kwargs: dict[str, object] = {}
    if env_file is not None:
        settings_kwargs["_env_file"] = env_file
    config = WhatsappToolConfig(**file_values, **settings_kwargs)
    if not file_values:
        return config

    # Init kwargs replace whole sections; re-merge them over the env-aware dump.
    combined = config.model_dump(mode="python")
    _merge_sections(combined, file_values)
    return WhatsappToolConfig.model_validate(combined)


def _merge_sections(target: dict[str, Any], updates: Mapping[str, Any]) -> None:
    """Merge nested config sections from ``updates`` into ``target``."""

    for key, value in updates.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            section = current if isinstance(current, dict) else dict(current)
            _merge_sections(section, value)
            target[key] = section
        else:
            target[key] = value
