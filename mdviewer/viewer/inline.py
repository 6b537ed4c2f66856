# mdviewer/viewer/inline.py
"""Inline rendering pipeline.

Splits a document at its special content blocks (Mermaid diagrams and
images) and writes, in document order, styled prose segments and the
output of each block's renderer. A failing block is logged as a warning
and skipped; the rest of the document still renders.
"""

import logging
import os
import sys
from typing import Callable, List, Optional, TextIO

from ..backends import display_inline_image
from ..config import RenderMode, RenderOptions
from ..file_utils import read_file
from ..mermaid import (
    CompilerUnavailableError,
    DiagramCompiler,
    DiagramRenderError,
    ascii_preview,
    save_png,
    save_svg,
)
from ..renderer.blocks import DiagramBlock, ImageBlock
from ..renderer.detect import detect_content_blocks, detect_diagram_blocks
from ..renderer.links import preprocess_links
from ..renderer.mermaid import annotate_with_urls
from ..renderer.styler import MarkdownStyler, StylerError
from ..resize import ImageResizeError, resize_image
from ..terminal_caps import ImageProtocol, detect_image_protocol

logger = logging.getLogger(__name__)

TERMINAL_RASTER_SIZE = (800, 600)
PNG_EXPORT_SIZE = (1200, 800)


class InlineViewer:
    """Renders a Markdown document to a text stream, one pass, top to bottom."""

    def __init__(self, options: RenderOptions,
                 styler: Optional[MarkdownStyler] = None,
                 compiler_factory: Optional[Callable[[], DiagramCompiler]] = None,
                 protocol_detector: Callable[[], ImageProtocol] = detect_image_protocol,
                 out: Optional[TextIO] = None):
        """Create a viewer.

        Args:
            options: Render options for this invocation.
            styler: Markdown styler; built from options when omitted.
            compiler_factory: Creates the diagram compiler, only called
                when the document contains diagrams.
            protocol_detector: Returns the terminal's inline image protocol.
                Queried for every block.
            out: Output stream (defaults to sys.stdout at write time).
        """
        self._options = options
        self._styler = styler or MarkdownStyler(options.style, options.width)
        self._compiler_factory = compiler_factory or DiagramCompiler
        self._detect_protocol = protocol_detector
        self._out = out
        self._base_path = "."

    @property
    def base_path(self) -> str:
        return self._base_path

    def set_base_path(self, path: str) -> None:
        """Directory that relative image paths are resolved against."""
        self._base_path = path

    def view(self, content: str) -> None:
        """Render and write a document.

        Styling failures are reported as a warning rather than raised.
        """
        try:
            self.render_with_inline_content(content)
        except StylerError as e:
            logger.warning("inline content rendering failed: %s", e)
        finally:
            self._stream().flush()

    def view_file(self, path: str) -> None:
        """Read and render a Markdown file.

        Raises:
            OSError: If the file cannot be read.
        """
        self._base_path = os.path.dirname(os.path.abspath(path))
        self.view(read_file(path))

    def render_with_inline_content(self, content: str) -> None:
        """Render prose segments and special blocks in document order.

        Raises:
            StylerError: If a prose segment cannot be styled.
        """
        opts = self._options
        text = preprocess_links(content)

        detect_diagrams = not opts.no_mermaid
        if detect_diagrams and opts.mermaid_mode is RenderMode.URL:
            # Callouts are spliced into the prose; fences stay as code
            text = annotate_with_urls(text, detect_diagram_blocks(text))
            detect_diagrams = False

        blocks = detect_content_blocks(text, diagrams=detect_diagrams)
        logger.debug("detected %d content blocks", len(blocks))
        if not blocks:
            self._write(self._styler.render(text))
            return

        compiler = None
        if any(isinstance(block, DiagramBlock) for block in blocks):
            try:
                compiler = self._compiler_factory()
            except CompilerUnavailableError as e:
                self._write(self._styler.render(text))
                logger.warning("failed to create mermaid compiler: %s", e)
                return

        lines = text.split("\n")
        curr_line = 0
        diagram_index = 0

        for i, block in enumerate(blocks):
            start = min(max(block.start_line - 1, curr_line), len(lines))
            end = max(min(block.end_line, len(lines)), start)

            if start > curr_line:
                self._render_segment(lines[curr_line:start])

            try:
                if isinstance(block, DiagramBlock):
                    self._render_diagram_block(compiler, block, diagram_index)
                else:
                    self._render_image_block(block)
            except Exception as e:
                logger.warning("failed to render content block %d: %s", i + 1, e)
            finally:
                if isinstance(block, DiagramBlock):
                    diagram_index += 1

            curr_line = end

        if curr_line < len(lines):
            self._render_segment(lines[curr_line:])

    def _render_segment(self, lines: List[str]) -> None:
        segment = "\n".join(lines)
        if not segment.strip():
            return
        self._write(self._styler.render(segment))

    # -- diagrams ---------------------------------------------------------

    def _render_diagram_block(self, compiler: DiagramCompiler,
                              block: DiagramBlock, index: int) -> None:
        """Render one diagram according to the mermaid mode.

        Args:
            compiler: Diagram compiler.
            block: The diagram.
            index: 0-based position among the document's diagrams; export
                files are named diagram-<index+1>.<ext>.

        Raises:
            DiagramRenderError: If the diagram does not compile. The
                original fence is written first so its source stays visible.
            OSError: If an svg/png mode export cannot be written.
        """
        result = compiler.render(block.source)
        if not result.ok:
            self._write_diagram_source(block)
            raise DiagramRenderError(result.error)

        mode = self._options.mermaid_mode

        if mode is RenderMode.TERMINAL:
            self._render_diagram_terminal(compiler, block, result, index)

        elif mode is RenderMode.SVG:
            output_path = self._export_path(index, "svg")
            save_svg(result.svg, output_path)
            self._write_diagram_source(block)
            self._write(f"📁 Mermaid diagram {index + 1} {output_path}\n")

        elif mode is RenderMode.PNG:
            width = result.width or PNG_EXPORT_SIZE[0]
            height = result.height or PNG_EXPORT_SIZE[1]
            png_data = compiler.render_to_png(block.source, width, height)
            output_path = self._export_path(index, "png")
            save_png(png_data, output_path)
            self._write_diagram_source(block)
            self._write(f"📁 Mermaid diagram {index + 1} {output_path}\n")

    def _render_diagram_terminal(self, compiler: DiagramCompiler, block: DiagramBlock,
                                 result, index: int) -> None:
        protocol = self._detect_protocol()
        preview = ascii_preview(block.diagram_type, result.width, result.height)

        if protocol is ImageProtocol.NONE:
            self._write(preview)
        else:
            width = result.width or TERMINAL_RASTER_SIZE[0]
            height = result.height or TERMINAL_RASTER_SIZE[1]
            try:
                png_data = compiler.render_to_png(block.source, width, height)
            except DiagramRenderError as e:
                logger.debug("raster render failed, showing preview: %s", e)
                self._write(preview)
            else:
                self._write(f"📊 Mermaid Diagram ({block.diagram_type}):\n")
                self._write(display_inline_image(png_data, protocol))
                self._write("\n")

        if self._options.keep_mermaid_files:
            output_path = self._export_path(index, "svg")
            try:
                save_svg(result.svg, output_path)
            except OSError as e:
                logger.warning("failed to save SVG: %s", e)
            else:
                self._write(f"  💾 Saved to: {output_path}\n")

    def _write_diagram_source(self, block: DiagramBlock) -> None:
        code = f"```mermaid\n{block.source.strip()}\n```\n"
        try:
            self._write(self._styler.render(code))
        except StylerError:
            self._write(code)

    def _export_path(self, index: int, extension: str) -> str:
        return os.path.join(self._options.mermaid_out_dir, f"diagram-{index + 1}.{extension}")

    # -- images -----------------------------------------------------------

    def _render_image_block(self, block: ImageBlock) -> None:
        protocol = self._detect_protocol()
        if protocol is ImageProtocol.NONE:
            self._write_image_fallback(block)
            return

        image_path = block.path
        if not os.path.isabs(image_path):
            image_path = os.path.join(self._base_path, image_path)

        try:
            with open(image_path, "rb") as f:
                image_data = f.read()
        except OSError as e:
            logger.debug("cannot read image %s: %s", image_path, e)
            self._write_image_fallback(block)
            return

        if block.width > 0:
            try:
                image_data = resize_image(image_data, block.width)
            except ImageResizeError as e:
                logger.warning("failed to resize image: %s", e)

        self._write(f"🖼️  {block.alt_text or 'Image'}:\n")
        self._write(display_inline_image(image_data, protocol))
        self._write("\n")

    def _write_image_fallback(self, block: ImageBlock) -> None:
        self._write(self._styler.render(f"![{block.alt_text}]({block.path})"))

    # -- output -----------------------------------------------------------

    def _stream(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def _write(self, text: str) -> None:
        self._stream().write(text)
