# mdviewer/renderer/html.py
"""Markdown to standalone HTML, used as the input for PDF export.

Mermaid fences are compiled to inline SVG first; a fence that does not
compile stays a code block so its source remains readable in the PDF.
"""

import logging
from typing import Callable, Optional

from markdown_it import MarkdownIt

from ..mermaid import CompilerUnavailableError, DiagramCompiler
from .detect import detect_diagram_blocks

logger = logging.getLogger(__name__)

DOCUMENT_TITLE = "Markdown Document"

_STYLESHEET = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
            line-height: 1.6;
            color: #333;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
        }
        h1, h2, h3, h4, h5, h6 {
            margin-top: 24px;
            margin-bottom: 16px;
            font-weight: 600;
            line-height: 1.25;
        }
        h1 { font-size: 2em; border-bottom: 1px solid #eaecef; padding-bottom: 0.3em; }
        h2 { font-size: 1.5em; border-bottom: 1px solid #eaecef; padding-bottom: 0.3em; }
        h3 { font-size: 1.25em; }
        code {
            background-color: #f6f8fa;
            padding: 0.2em 0.4em;
            font-size: 85%;
            border-radius: 3px;
            font-family: 'SF Mono', Monaco, Consolas, monospace;
        }
        pre { background-color: #f6f8fa; padding: 16px; overflow: auto; border-radius: 6px; }
        pre code { background-color: transparent; padding: 0; }
        blockquote { padding: 0 1em; color: #6a737d; border-left: 0.25em solid #dfe2e5; margin: 0; }
        table { border-collapse: collapse; width: 100%; }
        table th, table td { padding: 6px 13px; border: 1px solid #dfe2e5; }
        table tr:nth-child(2n) { background-color: #f6f8fa; }
        img { max-width: 100%; }
        hr { border: 0; border-top: 1px solid #eaecef; margin: 24px 0; }
        a { color: #0366d6; text-decoration: none; }
        .mermaid-diagram { margin: 20px 0; text-align: center; }
"""

_DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>{stylesheet}    </style>
</head>
<body>
{body}
</body>
</html>
"""


def _build_parser() -> MarkdownIt:
    # Raw HTML stays enabled so the inlined diagram SVG passes through
    return MarkdownIt(
        "commonmark",
        {"html": True, "breaks": True, "typographer": True},
    ).enable("table").enable("strikethrough").enable(["replacements", "smartquotes"])


class HTMLRenderer:
    """Converts Markdown to a complete HTML document with embedded CSS."""

    def __init__(self, compiler_factory: Optional[Callable[[], DiagramCompiler]] = None):
        self._compiler_factory = compiler_factory or DiagramCompiler
        self._md = _build_parser()

    def render_to_html(self, markdown: str) -> str:
        """Render Markdown to a standalone HTML document.

        Args:
            markdown: Document text.

        Returns:
            The HTML document.
        """
        body = self._md.render(self._inline_diagrams(markdown))
        return _DOCUMENT_TEMPLATE.format(
            title=DOCUMENT_TITLE,
            stylesheet=_STYLESHEET,
            body=body,
        )

    def _inline_diagrams(self, markdown: str) -> str:
        """Replace each compilable mermaid fence with its SVG."""
        blocks = detect_diagram_blocks(markdown)
        if not blocks:
            return markdown

        try:
            compiler = self._compiler_factory()
        except CompilerUnavailableError as e:
            logger.warning("failed to create mermaid compiler, keeping diagram source: %s", e)
            return markdown

        # Back to front, so earlier offsets stay valid
        result = markdown
        for block in reversed(blocks):
            compiled = compiler.render(block.source)
            if not compiled.ok:
                logger.warning("diagram at line %d kept as code: %s",
                               block.start_line, compiled.error)
                continue
            replacement = f'\n<div class="mermaid-diagram">{compiled.svg}</div>\n'
            result = result[:block.start_offset] + replacement + result[block.end_offset:]

        return result
