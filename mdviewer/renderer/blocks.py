# mdviewer/renderer/blocks.py
"""Content block types and the block merger.

A content block is a positioned span of special syntax inside a document:
either a Mermaid diagram fence or an image reference. Line numbers are
1-indexed into the document split on "\\n"; offsets are character
offsets into the same text. Both are only valid for the exact text the
detectors ran over.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagramBlock:
    """A fenced Mermaid diagram."""
    diagram_type: str
    source: str
    start_line: int  # Line of the opening fence
    end_line: int    # Line of the closing fence
    start_offset: int = 0
    end_offset: int = 0


@dataclass(frozen=True)
class ImageBlock:
    """An inline image reference ``![alt](path)`` on a single line."""
    alt_text: str
    path: str
    width: int = 0  # Width hint in pixels, 0 = unset
    start_line: int = 0
    end_line: int = 0
    start_offset: int = 0
    end_offset: int = 0


ContentBlock = Union[DiagramBlock, ImageBlock]


def merge_blocks(
    diagram_blocks: Iterable[DiagramBlock],
    image_blocks: Iterable[ImageBlock],
) -> List[ContentBlock]:
    """Merge detector results into one sequence ordered by start line.

    The sort is stable and diagrams are concatenated first, so at equal
    start lines diagram blocks come before image blocks.

    Blocks never nest: a block that starts inside the span of an earlier
    diagram block (for example an image reference written inside a
    mermaid fence) is dropped. Several images on the same line are all
    kept.

    Returns:
        Ordered blocks. Empty when the document has no special content.
    """
    candidates: List[ContentBlock] = [*diagram_blocks, *image_blocks]
    candidates.sort(key=lambda b: b.start_line)

    merged: List[ContentBlock] = []
    diagram_end = 0
    for block in candidates:
        if block.start_line <= diagram_end:
            logger.warning(
                "Ignoring %s at line %d: inside diagram ending at line %d",
                type(block).__name__, block.start_line, diagram_end,
            )
            continue
        merged.append(block)
        if isinstance(block, DiagramBlock):
            diagram_end = block.end_line
    return merged
