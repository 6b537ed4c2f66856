# mdviewer/terminal_caps.py
"""Terminal inline-image capability detection.

Classifies the active terminal by which inline image protocol it accepts.
Detection is a pure function of environment variables and is re-run on
every call; nothing is cached.

Usage:
    from mdviewer.terminal_caps import detect_image_protocol

    protocol = detect_image_protocol()
    protocol                 # ImageProtocol.ITERM2 | KITTY | SIXEL | NONE
    supports_inline_images() # protocol is not NONE
"""

import logging
import os
from enum import Enum
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class ImageProtocol(str, Enum):
    """Inline image protocol families."""
    ITERM2 = "iterm2"  # OSC 1337 + base64, BEL terminated
    KITTY = "kitty"    # APC _G control data + base64, ST terminated
    SIXEL = "sixel"    # Raster terminal graphics, sent as ITERM2
    NONE = "none"


# TERM_PROGRAM values that accept the iTerm2 protocol without being iTerm2
_ITERM2_COMPATIBLE = ("WarpTerminal", "vscode")


def detect_image_protocol(environ: Optional[Mapping[str, str]] = None) -> ImageProtocol:
    """Detect which inline image protocol the terminal supports.

    First match wins:
        1. MDVIEWER_IMAGE_PROTOCOL override (iterm2, kitty, sixel, none)
        2. TERM_PROGRAM=iTerm.app                    -> ITERM2
        3. TERM_PROGRAM=WarpTerminal or vscode       -> ITERM2
        4. TERM=xterm-kitty or TERM_PROGRAM=kitty    -> KITTY
        5. WT_SESSION set (Windows Terminal)         -> SIXEL
        6. Anything else                             -> NONE

    Args:
        environ: Environment mapping to inspect (defaults to os.environ,
            read at call time).

    Returns:
        The detected ImageProtocol.
    """
    env = os.environ if environ is None else environ

    override = env.get("MDVIEWER_IMAGE_PROTOCOL")
    if override:
        try:
            return ImageProtocol(override.strip().lower())
        except ValueError:
            logger.debug("Ignoring unknown MDVIEWER_IMAGE_PROTOCOL=%r", override)

    term = env.get("TERM", "")
    term_program = env.get("TERM_PROGRAM", "")

    if term_program == "iTerm.app":
        return ImageProtocol.ITERM2

    if term_program in _ITERM2_COMPATIBLE:
        return ImageProtocol.ITERM2

    if term == "xterm-kitty" or term_program == "kitty":
        return ImageProtocol.KITTY

    # Windows Terminal 1.22+ renders sixel; we have no sixel encoder, so
    # the backend layer sends these through the iTerm2 protocol instead.
    if env.get("WT_SESSION"):
        return ImageProtocol.SIXEL

    return ImageProtocol.NONE


def supports_inline_images(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True if the terminal accepts any inline image protocol."""
    return detect_image_protocol(environ) is not ImageProtocol.NONE


def detect(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Summarize terminal capabilities for debug logging.

    Returns:
        Dict with keys: term, term_program, multiplexer, graphics.
    """
    env = os.environ if environ is None else environ
    term = env.get("TERM")
    info: Dict[str, Any] = {
        "term": term,
        "term_program": env.get("TERM_PROGRAM"),
        "multiplexer": _detect_multiplexer(env, term),
        "graphics": detect_image_protocol(env).value,
    }
    return info


def _detect_multiplexer(env: Mapping[str, str], term: Optional[str]) -> Optional[str]:
    """Detect if running inside a terminal multiplexer.

    Multiplexers usually strip image escape sequences; this is reported
    for diagnostics only and does not change the detected protocol.
    """
    if env.get("TMUX"):
        return "tmux"
    if env.get("STY"):
        return "screen"
    if term and "screen" in term:
        return "screen"
    return None
