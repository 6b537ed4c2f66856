# mdviewer/file_utils.py
"""File and terminal helpers used by the CLI and the viewer."""

import os
import shutil
import sys
from typing import Union

MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd")


def read_file(path: str) -> str:
    """Read a Markdown document.

    Args:
        path: File path, or "" / "-" to read from stdin.

    Returns:
        The document text.

    Raises:
        OSError: If the file cannot be read.
    """
    if path in ("", "-"):
        return sys.stdin.read()

    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise OSError(f"failed to read file {path}: {e.strerror or e}") from e


def write_file(path: str, content: Union[str, bytes]) -> None:
    """Write content to path, creating parent directories as needed."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    mode = "wb" if isinstance(content, bytes) else "w"
    encoding = None if isinstance(content, bytes) else "utf-8"
    with open(path, mode, encoding=encoding) as f:
        f.write(content)


def file_exists(path: str) -> bool:
    return os.path.exists(path)


def is_markdown_file(path: str) -> bool:
    return os.path.splitext(path)[1] in MARKDOWN_EXTENSIONS


def terminal_width(default: int = 80) -> int:
    """Current terminal width in columns, or default if unknown."""
    columns = shutil.get_terminal_size((default, 24)).columns
    return columns if columns > 0 else default


def stdin_is_piped() -> bool:
    """True when stdin is a pipe or file rather than an interactive terminal."""
    return not sys.stdin.isatty()
