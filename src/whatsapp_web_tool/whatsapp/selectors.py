"""Declarative table of WhatsApp Web UI targets.

Each logical target maps to an ordered tuple of CSS selectors, most stable
first. The host markup changes between releases and locales, so adjusting a
selector should only ever touch this table (or the ``selectors`` section of
the configuration file), never the interaction code.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

NAME_PLACEHOLDER = "{name}"

SelectorCandidates = tuple[str, ...]


def css_string(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted CSS attribute value."""

    return value.replace("\\", "\\\\").replace('"', '\\"')


class SelectorTable(BaseModel):
    """Ordered selector candidates for every UI target the tool touches."""

    sidebar: SelectorCandidates = ("#side",)
    search_input: SelectorCandidates = (
        "div[contenteditable='true'][data-tab='3']",
        "div[role='textbox'][title='Search input textbox']",
        "div[role='textbox'][aria-label='Search input textbox']",
        "div[role='textbox'][title='Champ de recherche']",
        "div[role='textbox'][aria-label='Champ de recherche']",
        "#side div[contenteditable='true']",
    )
    search_results: SelectorCandidates = (
        'span[title="{name}"]',
        '[aria-label="{name}"]',
        'div[role="listitem"] span[title]',
        '#search-results div[role="listitem"]',
    )
    header_title: SelectorCandidates = (
        "header span[title]",
        'header [data-testid="conversation-info-header"] span',
    )
    chat_list: SelectorCandidates = (
        'div[aria-label="Chat list"] > div[role="listitem"]',
        'div[aria-label="Liste de discussions"] > div[role="listitem"]',
        '#pane-side div[role="listitem"]',
        '#pane-side [data-testid="cell-frame-container"]',
    )
    chat_title: str = 'span[title], [data-testid="cell-frame-title"] span'
    chat_preview: str = (
        'div[dir="auto"], span[dir="ltr"], [data-testid="last-msg-status"] + span'
    )
    main_pane: str = "#main"
    message_rows: SelectorCandidates = (
        'div[role="row"]',
        "div.message-in",
        "div.message-out",
        '[data-testid="msg-container"]',
    )
    message_text: str = '.selectable-text, [data-testid="selectable-text"]'
    message_text_marker: str = '.selectable-text, [data-testid="selectable-text"], span'
    message_fallback_text: str = "span"
    message_meta_attribute: str = "data-pre-plain-text"
    incoming_marker: str = "message-in"
    outgoing_marker: str = "message-out"
    compose_box: SelectorCandidates = (
        "div[contenteditable='true'][data-tab='10']",
        "div[contenteditable='true'][data-tab='11']",
        "div[contenteditable='true'][data-tab='6']",
        "footer div[contenteditable='true']",
        "div[role='textbox'][aria-label*='message']",
        "div[role='textbox'][title='Entrez du texte']",
        "div[role='textbox']",
    )
    dialog_buttons: str = 'button, div[role="button"], span[role="button"]'
    use_here_labels: tuple[str, ...] = Field(
        default=(
            "Use Here",
            "Use here",
            "Utiliser ici",
            "Usar aquí",
            "Usar aqui",
            "Hier verwenden",
            "Usa qui",
        )
    )

    def search_result_candidates(self, name: str) -> SelectorCandidates:
        """Return the result selectors with ``{name}`` filled in for ``name``."""

        escaped = css_string(name)
        return tuple(selector.replace(NAME_PLACEHOLDER, escaped) for selector in self.search_results)
