# mdviewer/config.py
"""Render configuration shared by the CLI, the viewer and the PDF exporter.

Values are resolved in three layers, highest priority first:

    1. Explicit CLI flags
    2. MDVIEWER_* environment variables (optionally loaded from a .env file)
    3. Built-in defaults

Environment variables:
    MDVIEWER_STYLE              Style keyword or path to a rich theme file
    MDVIEWER_MERMAID_MODE       terminal | svg | png | url
    MDVIEWER_MERMAID_OUTPUT_DIR Directory for exported diagram files
    MDVIEWER_MERMAID_JS         Local mermaid.min.js to inject (compiler)
    MDVIEWER_MERMAID_THEME      Mermaid theme name (compiler)
    MDVIEWER_IMAGE_PROTOCOL     Force an inline image protocol (terminal_caps)
"""

import os
import tempfile
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional

from .file_utils import terminal_width

DEFAULT_STYLE = "clean"
DEFAULT_WIDTH = 80


class ConfigError(Exception):
    """Raised when a configuration value cannot be used."""


class RenderMode(str, Enum):
    """How Mermaid diagrams are rendered."""
    TERMINAL = "terminal"  # Inline image or ASCII preview
    SVG = "svg"            # Export SVG files, show source
    PNG = "png"            # Export PNG files, show source
    URL = "url"            # Callouts with mermaid.live / mermaid.ink links

    @classmethod
    def parse(cls, value: str) -> "RenderMode":
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigError(
                f"unknown mermaid mode {value!r} (expected one of: {choices})"
            ) from None


@dataclass(frozen=True)
class RenderOptions:
    """Immutable configuration threaded through a single render pass."""
    style: str = DEFAULT_STYLE
    width: int = 0
    no_mermaid: bool = False
    mermaid_mode: RenderMode = RenderMode.TERMINAL
    mermaid_out_dir: str = ""
    keep_mermaid_files: bool = False

    def with_defaults(self) -> "RenderOptions":
        """Fill in values that depend on the runtime environment.

        Width 0 becomes the detected terminal width, an empty style becomes
        the default style and an empty output directory becomes the
        system temp directory.
        """
        return replace(
            self,
            style=self.style or DEFAULT_STYLE,
            width=self.width if self.width > 0 else terminal_width(DEFAULT_WIDTH),
            mermaid_out_dir=self.mermaid_out_dir or tempfile.gettempdir(),
        )


def resolve_options(
    style: Optional[str] = None,
    width: Optional[int] = None,
    no_mermaid: bool = False,
    mermaid_mode: Optional[str] = None,
    mermaid_out_dir: Optional[str] = None,
    keep_mermaid_files: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> RenderOptions:
    """Build RenderOptions from CLI values layered over the environment.

    Args:
        style: --style value, or None when not given.
        width: --width value, or None when not given.
        no_mermaid: --no-mermaid flag.
        mermaid_mode: --mermaid-mode value, or None when not given.
        mermaid_out_dir: --mermaid-output-dir value, or None when not given.
        keep_mermaid_files: --keep-mermaid-files flag.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Options with runtime defaults applied.

    Raises:
        ConfigError: If the mode or width is invalid.
    """
    env = os.environ if environ is None else environ

    style = style or env.get("MDVIEWER_STYLE") or DEFAULT_STYLE
    mode = RenderMode.parse(
        mermaid_mode or env.get("MDVIEWER_MERMAID_MODE") or RenderMode.TERMINAL.value
    )
    out_dir = mermaid_out_dir or env.get("MDVIEWER_MERMAID_OUTPUT_DIR") or ""

    width = width or 0
    if width < 0:
        raise ConfigError(f"width must be >= 0, got {width}")

    return RenderOptions(
        style=style,
        width=width,
        no_mermaid=no_mermaid,
        mermaid_mode=mode,
        mermaid_out_dir=out_dir,
        keep_mermaid_files=keep_mermaid_files,
    ).with_defaults()
