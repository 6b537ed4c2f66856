# mdviewer/backends/iterm.py
"""iTerm2 inline image protocol backend.

Displays images inline using iTerm2's proprietary escape sequence.
Also accepted by Warp, the VS Code terminal and Windows Terminal.

Protocol: https://iterm2.com/documentation-images.html
"""

import base64


class ITermBackend:
    """Renders images via the iTerm2 inline image protocol."""

    @property
    def name(self) -> str:
        return "iterm2"

    def render(self, image_data: bytes) -> str:
        """Render image bytes using the iTerm2 inline image protocol.

        Format:
            OSC 1337 ; File=[args] : base64data BEL
        Where args include:
            inline=1     - display inline (vs download)
            size=N       - file size in bytes
            preserveAspectRatio=1

        Args:
            image_data: Encoded image bytes.

        Returns:
            String with the iTerm2 inline image escape sequence.
        """
        encoded = base64.standard_b64encode(image_data).decode("ascii")
        args = (
            f"inline=1"
            f";size={len(image_data)}"
            f";preserveAspectRatio=1"
        )
        return f"\x1b]1337;File={args}:{encoded}\x07\n"
