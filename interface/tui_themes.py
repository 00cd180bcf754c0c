"""TUI themes and styling."""

from typing import Dict

from prompt_toolkit.styles import Style


THEMES: Dict[str, Dict[str, str]] = {
    "dark-olive": {
        "": "#d7dfe6",
        "header": "#ffb347 bold",
        "border": "#4b525a",
        "text": "#d7dfe6",
        "text.dim": "#97a0a9",
        "text.dimmer": "#6d717a",
        "status.pending": "#7a7f85",
        "status.working": "#e5c07b bold",
        "status.done": "#9ad974 bold",
        "selected": "bg:#3b3b3b #d7dfe6 bold",
        "selected.pending": "bg:#3b3b3b #e8eaec bold",
        "selected.working": "bg:#3b3b3b #f0c674 bold",
        "selected.done": "bg:#3b3b3b #9ad974 bold",
        "prompt": "#61afef bold",
        "input": "#e8eaec underline",
        "dirty": "#e5c07b bold",
        "clean": "#6d717a",
        "spinner": "#61afef bold",
        "notice.info": "#9ad974",
        "notice.warning": "#e5c07b bold",
        "notice.error": "bg:#5c1f24 #ffdede bold",
    },
    "dark-contrast": {
        "": "#e8eaec",
        "header": "#ffb347 bold",
        "border": "#5a6169",
        "text": "#e8eaec",
        "text.dim": "#a7b0ba",
        "text.dimmer": "#6f757d",
        "status.pending": "#8a9097",
        "status.working": "#f0c674 bold",
        "status.done": "#b8f171 bold",
        "selected": "bg:#3d4047 #e8eaec bold",
        "selected.pending": "bg:#3d4047 #e8eaec bold",
        "selected.working": "bg:#3d4047 #f0c674 bold",
        "selected.done": "bg:#3d4047 #b8f171 bold",
        "prompt": "#7cc4ff bold",
        "input": "#ffffff underline",
        "dirty": "#f0c674 bold",
        "clean": "#6f757d",
        "spinner": "#7cc4ff bold",
        "notice.info": "#b8f171",
        "notice.warning": "#f0c674 bold",
        "notice.error": "bg:#6b1d22 #ffffff bold",
    },
}

DEFAULT_THEME = "dark-olive"


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme) or THEMES[DEFAULT_THEME]
    return dict(base)


def build_style(theme: str) -> Style:
    return Style.from_dict(get_theme_palette(theme))


__all__ = ["THEMES", "DEFAULT_THEME", "get_theme_palette", "build_style"]
