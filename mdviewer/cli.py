# mdviewer/cli.py
"""Command line entry point.

Usage:
    mdviewer README.md                      # View a markdown file
    cat file.md | mdviewer                  # Read from stdin
    mdviewer file.md --style dark           # Use the dark style
    mdviewer file.md --export-pdf out.pdf   # Export to PDF
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__, terminal_caps
from .browser import open_url
from .config import ConfigError, RenderMode, resolve_options
from .file_utils import read_file, stdin_is_piped
from .pdf import PDFExporter, PDFExportError
from .renderer.detect import detect_diagram_blocks
from .renderer.mermaid import live_url
from .renderer.styler import StylerError
from .viewer import InlineViewer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdviewer",
        description="Terminal Markdown viewer with Mermaid diagram support and PDF export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # View a markdown file
  mdviewer README.md

  # Read from stdin
  cat file.md | mdviewer

  # Export every diagram as SVG next to the document
  mdviewer file.md --mermaid-mode svg --mermaid-output-dir ./diagrams

  # Export to PDF
  mdviewer file.md --export-pdf out.pdf
        """,
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Markdown file to view (reads stdin when omitted and piped)",
    )

    # Rendering
    parser.add_argument(
        "--style", "-s",
        help="Color style: clean (default), auto, dark, light, or path to a theme file",
    )
    parser.add_argument(
        "--width", "-w",
        type=int,
        default=0,
        help="Wrap width in columns (default: 0, auto-detect)",
    )

    # Diagrams
    parser.add_argument(
        "--no-mermaid",
        action="store_true",
        help="Disable mermaid diagram detection",
    )
    parser.add_argument(
        "--open-mermaid",
        action="store_true",
        help="Open mermaid diagrams in the browser",
    )
    parser.add_argument(
        "--mermaid-mode",
        choices=[mode.value for mode in RenderMode],
        help="Mermaid rendering mode (default: terminal)",
    )
    parser.add_argument(
        "--mermaid-output-dir",
        help="Directory for exported diagram files (default: system temp directory)",
    )
    parser.add_argument(
        "--keep-mermaid-files", "-k",
        action="store_true",
        help="Save mermaid diagram files to disk",
    )

    # Output
    parser.add_argument(
        "--export-pdf", "-p",
        metavar="FILE",
        help="Export the document to a PDF file and exit",
    )

    # Configuration
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def open_diagrams(content: str) -> None:
    """Open every diagram of the document in the mermaid.live editor."""
    blocks = detect_diagram_blocks(content)
    if not blocks:
        return

    print(f"Opening {len(blocks)} mermaid diagram(s) in browser...", file=sys.stderr)
    for i, block in enumerate(blocks, start=1):
        url = live_url(block)
        print(f"  {i}. {block.diagram_type}: {url}", file=sys.stderr)
        try:
            open_url(url)
        except OSError as e:
            logger.warning("failed to open URL: %s", e)
    print(file=sys.stderr)


def export_pdf(input_path: str, output_path: str) -> int:
    source = "stdin" if input_path == "-" else input_path
    print(f"Generating PDF from {source}...", file=sys.stderr)
    try:
        PDFExporter().export_file_to_pdf(input_path, output_path)
    except PDFExportError as e:
        return _fail(f"PDF export failed: {e}")
    print(f"PDF successfully exported to {output_path}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    load_dotenv(args.env_file)

    input_path = args.file
    if not input_path:
        if not stdin_is_piped():
            return _fail("no input file specified. Use 'mdviewer --help' for usage")
        input_path = "-"

    try:
        options = resolve_options(
            style=args.style,
            width=args.width,
            no_mermaid=args.no_mermaid,
            mermaid_mode=args.mermaid_mode,
            mermaid_out_dir=args.mermaid_output_dir,
            keep_mermaid_files=args.keep_mermaid_files,
        )
    except ConfigError as e:
        return _fail(str(e))
    logger.debug("Render options: %s", options)
    logger.debug("Terminal: %s", terminal_caps.detect())

    if args.export_pdf:
        return export_pdf(input_path, args.export_pdf)

    try:
        content = read_file(input_path)
    except OSError as e:
        return _fail(str(e))

    if args.open_mermaid and not options.no_mermaid:
        open_diagrams(content)

    try:
        viewer = InlineViewer(options)
    except StylerError as e:
        return _fail(f"failed to create renderer: {e}")

    if input_path != "-":
        viewer.set_base_path(os.path.dirname(os.path.abspath(input_path)))

    try:
        viewer.view(content)
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
