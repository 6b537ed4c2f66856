# mdviewer/pdf/exporter.py
"""Markdown to PDF through HTML and headless Chromium."""

import logging
from typing import Any, Callable, ContextManager, Optional

from ..file_utils import read_file, write_file
from ..mermaid.compiler import CALL_TIMEOUT, chromium_page
from ..renderer.html import HTMLRenderer

logger = logging.getLogger(__name__)

PAPER_FORMAT = "Letter"
PAGE_MARGIN = "0.4in"


class PDFExportError(Exception):
    """Raised when a document cannot be exported to PDF."""


class ChromiumPDFGenerator:
    """Prints an HTML document to PDF with headless Chromium."""

    def __init__(self, timeout: float = CALL_TIMEOUT,
                 session_factory: Optional[Callable[..., ContextManager[Any]]] = None):
        self._timeout = timeout
        self._session_factory = session_factory or chromium_page

    @property
    def timeout(self) -> float:
        return self._timeout

    def set_timeout(self, timeout: float) -> None:
        self._timeout = timeout

    def generate_pdf(self, html: str) -> bytes:
        """Render HTML and print it as US Letter with 0.4in margins.

        Raises:
            PDFExportError: If the browser fails or the budget runs out.
        """
        margin = {side: PAGE_MARGIN for side in ("top", "bottom", "left", "right")}
        try:
            with self._session_factory(None, self._timeout) as page:
                page.set_content(html, wait_until="load")
                return page.pdf(
                    format=PAPER_FORMAT,
                    margin=margin,
                    print_background=True,
                    prefer_css_page_size=False,
                )
        except Exception as e:
            raise PDFExportError(f"failed to generate PDF: {e}") from e


class PDFExporter:
    """Exports Markdown documents to PDF files."""

    def __init__(self, html_renderer: Optional[HTMLRenderer] = None,
                 generator: Optional[ChromiumPDFGenerator] = None):
        self._html_renderer = html_renderer or HTMLRenderer()
        self._generator = generator or ChromiumPDFGenerator()

    def export_to_pdf(self, markdown: str, output_path: str) -> None:
        """Convert Markdown text to PDF and write it to output_path.

        Raises:
            PDFExportError: If rendering, printing or writing fails.
        """
        html = self._html_renderer.render_to_html(markdown)
        pdf_data = self._generator.generate_pdf(html)
        try:
            write_file(output_path, pdf_data)
        except OSError as e:
            raise PDFExportError(f"failed to write PDF file: {e}") from e
        logger.debug("Wrote %d bytes of PDF to %s", len(pdf_data), output_path)

    def export_file_to_pdf(self, input_path: str, output_path: str) -> None:
        """Read a Markdown file and export it.

        Raises:
            PDFExportError: If the input cannot be read or the export fails.
        """
        try:
            markdown = read_file(input_path)
        except OSError as e:
            raise PDFExportError(f"failed to read input file: {e}") from e
        self.export_to_pdf(markdown, output_path)
