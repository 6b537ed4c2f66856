# mdviewer/renderer/__init__.py
"""Markdown preprocessing, special-content detection and styling."""

from .blocks import ContentBlock, DiagramBlock, ImageBlock, merge_blocks
from .detect import (
    detect_content_blocks,
    detect_diagram_blocks,
    detect_diagram_type,
    detect_image_blocks,
)
from .links import preprocess_links
from .styler import MarkdownStyler, StylerError

__all__ = [
    "ContentBlock",
    "DiagramBlock",
    "ImageBlock",
    "MarkdownStyler",
    "StylerError",
    "detect_content_blocks",
    "detect_diagram_blocks",
    "detect_diagram_type",
    "detect_image_blocks",
    "merge_blocks",
    "preprocess_links",
]
