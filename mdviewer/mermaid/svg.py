# mdviewer/mermaid/svg.py
"""Compiled diagram results, SVG helpers and export writers."""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from rich.cells import set_cell_size

from ..file_utils import write_file

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
PREVIEW_WIDTH = 50

_VIEWBOX_RE = re.compile(r'viewBox="[^"]*\s+([0-9.]+)\s+([0-9.]+)"')
_WIDTH_RE = re.compile(r'width="([0-9.]+)"')
_HEIGHT_RE = re.compile(r'height="([0-9.]+)"')


@dataclass(frozen=True)
class CompiledDiagram:
    """Result of one compile call.

    Exactly one of svg/error is meaningful: on failure svg is empty and
    error holds the reason.
    """
    svg: str = ""
    width: int = 0
    height: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _to_int(value: str) -> Optional[int]:
    try:
        return int(float(value))
    except ValueError:
        return None


def extract_svg_dimensions(svg: str) -> Tuple[int, int]:
    """Pixel size of an SVG document.

    Uses the last two numbers of the viewBox when present, otherwise the
    width/height attributes (each independently), otherwise 800x600.
    Fractional sizes are truncated.
    """
    width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT

    match = _VIEWBOX_RE.search(svg)
    if match:
        w, h = _to_int(match.group(1)), _to_int(match.group(2))
        if w is not None and h is not None:
            return w, h

    match = _WIDTH_RE.search(svg)
    if match and _to_int(match.group(1)) is not None:
        width = _to_int(match.group(1))
    match = _HEIGHT_RE.search(svg)
    if match and _to_int(match.group(1)) is not None:
        height = _to_int(match.group(1))

    return width, height


def clean_svg(svg: str) -> str:
    return svg.strip()


def save_svg(svg: str, output_path: str) -> None:
    """Write SVG text, creating the parent directory.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    write_file(output_path, svg)


def save_png(png_data: bytes, output_path: str) -> None:
    """Write PNG bytes, creating the parent directory.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    write_file(output_path, png_data)


def ascii_preview(diagram_type: str, width: int, height: int) -> str:
    """Fixed-width box summarizing a diagram for terminals without images."""
    rows = [
        f"📊 Mermaid Diagram: {diagram_type}",
        f"📐 Dimensions: {width}x{height} px",
        "✅ Rendered locally",
    ]
    # Padded by display cells; the emoji take two columns each
    lines = ["┌" + "─" * PREVIEW_WIDTH + "┐"]
    lines.extend(f"│ {set_cell_size(row, PREVIEW_WIDTH - 2)} │" for row in rows)
    lines.append("└" + "─" * PREVIEW_WIDTH + "┘")
    return "\n".join(lines) + "\n"
