# mdviewer/renderer/styler.py
"""Markdown to ANSI-styled text using rich.

Usage:
    from mdviewer.renderer.styler import MarkdownStyler

    styler = MarkdownStyler(style="clean", width=100)
    print(styler.render("# Title\\n\\nSome *text*."), end="")

Styles:
    clean / notty  Compact palette with coloured headings (default)
    dark           rich defaults, monokai code blocks
    light          Darker text colours for light backgrounds
    auto           light or dark, from the COLORFGBG hint
    <path>         A rich theme file (INI format, see rich.theme.Theme.read)
"""

import configparser
import logging
import os
from typing import Mapping, Optional

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.markdown import Markdown
from rich.theme import Theme

logger = logging.getLogger(__name__)

STYLE_KEYWORDS = ("auto", "dark", "light", "clean", "notty")

CLEAN_THEME = Theme({
    "markdown.h1": "bold color(228) on color(63)",
    "markdown.h1.border": "color(63)",
    "markdown.h2": "bold color(39)",
    "markdown.h3": "bold color(41)",
    "markdown.h4": "bold color(42)",
    "markdown.h5": "color(43)",
    "markdown.h6": "color(44)",
    "markdown.block_quote": "color(245)",
    "markdown.code": "color(203) on color(236)",
    "markdown.link": "color(30) underline",
    "markdown.link_url": "color(30) underline",
    "markdown.hr": "color(240)",
})

LIGHT_THEME = Theme({
    "markdown.h1": "bold color(234) on color(254)",
    "markdown.h1.border": "color(244)",
    "markdown.h2": "bold color(26)",
    "markdown.h3": "bold color(28)",
    "markdown.h4": "bold color(29)",
    "markdown.block_quote": "color(240)",
    "markdown.code": "color(161) on color(255)",
    "markdown.link": "color(25) underline",
    "markdown.link_url": "color(25) underline",
    "markdown.hr": "color(250)",
})

# style -> (theme, pygments code theme)
_BUILTIN_STYLES = {
    "clean": (CLEAN_THEME, "monokai"),
    "notty": (CLEAN_THEME, "monokai"),
    "dark": (None, "monokai"),
    "light": (LIGHT_THEME, "friendly"),
}


class StylerError(Exception):
    """Raised when Markdown cannot be styled."""


def resolve_auto_style(environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick "light" or "dark" from the COLORFGBG terminal hint.

    COLORFGBG is "fg;bg" (sometimes "fg;default;bg"); background colours 7
    and 15 are light. Without a hint, dark is assumed.
    """
    env = os.environ if environ is None else environ
    hint = env.get("COLORFGBG", "")
    background = hint.rsplit(";", 1)[-1].strip()
    if background in ("7", "15"):
        return "light"
    return "dark"


class MarkdownStyler:
    """Renders Markdown to ANSI-styled text at a fixed wrap width."""

    def __init__(self, style: str = "clean", width: int = 80):
        """Create a styler.

        Args:
            style: A style keyword or a path to a rich theme file.
            width: Wrap width in terminal columns.

        Raises:
            StylerError: If a custom theme file cannot be loaded.
        """
        self._style = style or "clean"
        self._width = max(20, width)
        self._theme, self._code_theme = self._load_style(self._style)

    @property
    def style(self) -> str:
        return self._style

    @property
    def width(self) -> int:
        return self._width

    @staticmethod
    def _load_style(style: str):
        if style == "auto":
            style = resolve_auto_style()
            logger.debug("auto style resolved to %s", style)

        if style in _BUILTIN_STYLES:
            return _BUILTIN_STYLES[style]

        try:
            return Theme.read(style), "monokai"
        except (OSError, configparser.Error, StyleSyntaxError) as e:
            raise StylerError(f"failed to load style {style!r}: {e}") from e

    def render(self, text: str) -> str:
        """Style Markdown text.

        Returns:
            ANSI-escaped text ending with a newline.

        Raises:
            StylerError: If rendering fails.
        """
        console = Console(
            width=self._width,
            force_terminal=True,
            theme=self._theme,
            highlight=False,
        )
        try:
            with console.capture() as capture:
                console.print(Markdown(text, code_theme=self._code_theme, hyperlinks=False))
        except Exception as e:
            raise StylerError(f"failed to render markdown: {e}") from e
        return capture.get()

    def render_bytes(self, data: bytes) -> str:
        return self.render(data.decode("utf-8", errors="replace"))
