# mdviewer/renderer/mermaid.py
"""External viewing URLs for Mermaid diagrams and url-mode callouts."""

import base64
from typing import Iterable, List

from .blocks import DiagramBlock

LIVE_URL_TEMPLATE = "https://mermaid.live/edit#pako:{}"
IMAGE_URL_TEMPLATE = "https://mermaid.ink/img/{}"

CALLOUT_TEMPLATE = (
    "\n> 📊 **Mermaid Diagram** ({type})\n"
    "> \n"
    "> 🔗 View: <{live}>\n"
    "> 📷 Image: <{image}>\n"
)


def _encode_source(block: DiagramBlock) -> str:
    return base64.standard_b64encode(block.source.strip().encode("utf-8")).decode("ascii")


def live_url(block: DiagramBlock) -> str:
    """mermaid.live editor URL for the diagram."""
    return LIVE_URL_TEMPLATE.format(_encode_source(block))


def image_url(block: DiagramBlock) -> str:
    """mermaid.ink rendered image URL for the diagram."""
    return IMAGE_URL_TEMPLATE.format(_encode_source(block))


def callout(block: DiagramBlock) -> str:
    return CALLOUT_TEMPLATE.format(
        type=block.diagram_type,
        live=live_url(block),
        image=image_url(block),
    )


def annotate_with_urls(content: str, blocks: Iterable[DiagramBlock]) -> str:
    """Insert a link callout immediately before each diagram fence.

    Args:
        content: Document text the blocks were detected in.
        blocks: Diagram blocks in document order.

    Returns:
        The document with callouts spliced in. Fences are kept so the
        styler still shows the diagram source as code.
    """
    lines: List[str] = content.split("\n")
    inserted = 0

    for block in blocks:
        index = block.start_line - 1 + inserted
        if 0 <= index < len(lines):
            lines.insert(index, callout(block))
            inserted += 1

    return "\n".join(lines)
