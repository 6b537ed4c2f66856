# mdviewer/backends/__init__.py
"""Terminal graphics backends for displaying raster images inline.

Backend per detected protocol:
    iterm2 -> ITermBackend (iTerm2, Warp, VS Code)
    kitty  -> KittyBackend (kitty)
    sixel  -> ITermBackend (Windows Terminal; no sixel encoder, so the
              iTerm2 protocol is sent, which it also understands)
    none   -> no backend
"""

from typing import Optional, Protocol

from ..terminal_caps import ImageProtocol


class UnsupportedProtocolError(Exception):
    """Raised when an image is displayed on a terminal without a protocol."""


class GraphicsBackend(Protocol):
    """Protocol for terminal graphics backends."""

    @property
    def name(self) -> str:
        """Backend identifier."""
        ...

    def render(self, image_data: bytes) -> str:
        """Render encoded image bytes (PNG, JPEG, GIF, WebP) as escape sequences."""
        ...


def select_backend(protocol: ImageProtocol) -> Optional[GraphicsBackend]:
    """Return the backend for protocol, or None when images are unsupported."""
    if protocol is ImageProtocol.KITTY:
        from .kitty import KittyBackend
        return KittyBackend()
    if protocol in (ImageProtocol.ITERM2, ImageProtocol.SIXEL):
        from .iterm import ITermBackend
        return ITermBackend()
    return None


def display_inline_image(image_data: bytes, protocol: ImageProtocol) -> str:
    """Encode image_data for inline display using protocol.

    Returns:
        Terminal escape sequences, ending with a newline.

    Raises:
        UnsupportedProtocolError: If protocol is ImageProtocol.NONE.
    """
    backend = select_backend(protocol)
    if backend is None:
        raise UnsupportedProtocolError("inline images not supported in this terminal")
    return backend.render(image_data)


__all__ = [
    "GraphicsBackend",
    "UnsupportedProtocolError",
    "display_inline_image",
    "select_backend",
]
