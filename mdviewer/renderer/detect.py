# mdviewer/renderer/detect.py
"""Span detectors: find diagram fences and image references in Markdown.

Both detectors are single left-to-right scans over the document lines
that track the line number and character offset together, so every
block carries both spans without recounting newlines afterwards.
Detectors never fail; they return possibly-empty lists.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .blocks import ContentBlock, DiagramBlock, ImageBlock, merge_blocks

FENCE = "```"
DIAGRAM_LANGUAGE = "mermaid"
UNKNOWN_DIAGRAM = "Unknown"

# First-line keyword -> human readable diagram type (prefix match, in order)
DIAGRAM_TYPES = {
    "graph": "Flowchart",
    "flowchart": "Flowchart",
    "sequenceDiagram": "Sequence Diagram",
    "classDiagram": "Class Diagram",
    "stateDiagram": "State Diagram",
    "erDiagram": "ER Diagram",
    "gantt": "Gantt Chart",
    "pie": "Pie Chart",
    "gitgraph": "Git Graph",
    "gitGraph": "Git Graph",
    "journey": "User Journey",
    "mindmap": "Mind Map",
    "timeline": "Timeline",
}

SUPPORTED_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")

_URL_PREFIXES = ("http://", "https://")
_WIDTH_DELIMITER = "|width="

# ![alt text](path)
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")


def _iter_lines(text: str):
    """Yield (line_number, offset, line) with 1-indexed line numbers."""
    offset = 0
    for line_number, line in enumerate(text.split("\n"), start=1):
        yield line_number, offset, line
        offset += len(line) + 1


def detect_diagram_type(source: str) -> str:
    """Classify a diagram by the keyword on its first non-blank line."""
    for line in source.splitlines():
        first = line.strip()
        if not first:
            continue
        for keyword, type_name in DIAGRAM_TYPES.items():
            if first.startswith(keyword):
                return type_name
        return UNKNOWN_DIAGRAM
    return UNKNOWN_DIAGRAM


@dataclass
class _OpenFence:
    line: int
    offset: int
    is_diagram: bool
    body: List[str] = field(default_factory=list)


def detect_diagram_blocks(text: str) -> List[DiagramBlock]:
    """Find fenced ```mermaid blocks.

    A fence opens on a line whose stripped content starts with ``` and
    closes on the next such line. Only fences whose info string is exactly
    "mermaid" produce blocks; other fences are tracked so their contents
    are never mistaken for an opening diagram fence. An unclosed fence
    produces nothing.

    Returns:
        Diagram blocks in document order. The source text is the lines
        between the fences, verbatim.
    """
    blocks: List[DiagramBlock] = []
    fence: Optional[_OpenFence] = None

    for line_number, offset, line in _iter_lines(text):
        stripped = line.strip()

        if fence is None:
            if stripped.startswith(FENCE):
                info = stripped[len(FENCE):].strip()
                indent = len(line) - len(line.lstrip())
                fence = _OpenFence(line_number, offset + indent, info == DIAGRAM_LANGUAGE)
            continue

        if stripped.startswith(FENCE):
            if fence.is_diagram:
                source = "\n".join(fence.body)
                blocks.append(DiagramBlock(
                    diagram_type=detect_diagram_type(source),
                    source=source,
                    start_line=fence.line,
                    end_line=line_number,
                    start_offset=fence.offset,
                    end_offset=offset + len(line),
                ))
            fence = None
        elif fence.is_diagram:
            fence.body.append(line)

    return blocks


def is_supported_image(path: str) -> bool:
    """True if path has an image extension we can display inline."""
    return os.path.splitext(path)[1].lower() in SUPPORTED_IMAGE_EXTENSIONS


def parse_width_hint(alt_text: str) -> Tuple[str, int]:
    """Split a ``name|width=400`` annotation out of image alt text.

    Returns:
        (clean_alt, width). If there is no annotation, or the width is not
        an unsigned integer, the alt text is returned unchanged with width 0.
    """
    if _WIDTH_DELIMITER not in alt_text:
        return alt_text, 0

    name, _, raw_width = alt_text.partition(_WIDTH_DELIMITER)
    if not raw_width.isascii() or not raw_width.isdigit():
        return alt_text, 0
    return name, int(raw_width)


def detect_image_blocks(text: str) -> List[ImageBlock]:
    """Find local image references ``![alt](path)``.

    Network URLs, files without a supported image extension and references
    inside fenced code blocks are skipped.

    Returns:
        One single-line block per reference, in document order.
    """
    blocks: List[ImageBlock] = []
    in_fence = False

    for line_number, offset, line in _iter_lines(text):
        if line.strip().startswith(FENCE):
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        for match in _IMAGE_RE.finditer(line):
            path = match.group(2).strip()
            if path.startswith(_URL_PREFIXES):
                continue
            if not is_supported_image(path):
                continue

            alt_text, width = parse_width_hint(match.group(1))
            blocks.append(ImageBlock(
                alt_text=alt_text,
                path=path,
                width=width,
                start_line=line_number,
                end_line=line_number,
                start_offset=offset + match.start(),
                end_offset=offset + match.end(),
            ))

    return blocks


def detect_content_blocks(text: str, diagrams: bool = True) -> List[ContentBlock]:
    """Run all detectors and merge their results.

    Args:
        text: Document text, already passed through preprocess_links().
        diagrams: When False, diagram fences are left as ordinary code.

    Returns:
        Blocks ordered by start line.
    """
    diagram_blocks = detect_diagram_blocks(text) if diagrams else []
    return merge_blocks(diagram_blocks, detect_image_blocks(text))
