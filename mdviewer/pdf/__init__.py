# mdviewer/pdf/__init__.py
"""PDF export."""

from .exporter import ChromiumPDFGenerator, PDFExporter, PDFExportError

__all__ = ["ChromiumPDFGenerator", "PDFExporter", "PDFExportError"]
