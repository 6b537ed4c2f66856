# mdviewer/backends/kitty.py
"""Kitty graphics protocol backend.

Renders images inline using Kitty's terminal graphics protocol. The
protocol's f=100 format only accepts PNG, so other formats are
re-encoded with Pillow first.

Protocol: https://sw.kovidgoyal.net/kitty/graphics-protocol/
"""

import base64
import logging
from io import BytesIO

from PIL import Image

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class KittyBackend:
    """Renders images via the Kitty graphics protocol."""

    CHUNK_SIZE = 4096  # Max base64 payload per escape sequence

    @property
    def name(self) -> str:
        return "kitty"

    def render(self, image_data: bytes) -> str:
        """Render image bytes using the Kitty graphics protocol.

        Sends the image in chunks via APC escape sequences:
            ESC _G <key=value,...> ; <base64 chunk> ESC \\
        The first chunk carries f=100 (PNG) and a=T (transmit and
        display); every chunk carries m=1 when more data follows and m=0
        on the last one.

        Args:
            image_data: Encoded image bytes.

        Returns:
            String with Kitty graphics protocol escape sequences.
        """
        try:
            image_data = self._ensure_png(image_data)
        except (OSError, ValueError) as e:
            logger.debug("Sending image as-is, PNG re-encode failed: %s", e)

        encoded = base64.standard_b64encode(image_data).decode("ascii")
        chunks = [encoded[i:i + self.CHUNK_SIZE]
                  for i in range(0, len(encoded), self.CHUNK_SIZE)] or [""]

        parts = []
        for i, chunk in enumerate(chunks):
            m = 0 if i == len(chunks) - 1 else 1
            if i == 0:
                parts.append(f"\x1b_Gf=100,a=T,m={m};{chunk}\x1b\\")
            else:
                parts.append(f"\x1b_Gm={m};{chunk}\x1b\\")

        return "".join(parts) + "\n"

    @staticmethod
    def _ensure_png(image_data: bytes) -> bytes:
        if image_data.startswith(PNG_SIGNATURE):
            return image_data
        img = Image.open(BytesIO(image_data))
        buf = BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
