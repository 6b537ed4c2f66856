# mdviewer/mermaid/__init__.py
"""Mermaid diagram compilation: source text -> SVG / PNG via headless Chromium."""

from .compiler import CompilerUnavailableError, DiagramCompiler, DiagramRenderError
from .svg import CompiledDiagram, ascii_preview, extract_svg_dimensions, save_png, save_svg

__all__ = [
    "CompiledDiagram",
    "CompilerUnavailableError",
    "DiagramCompiler",
    "DiagramRenderError",
    "ascii_preview",
    "extract_svg_dimensions",
    "save_png",
    "save_svg",
]
