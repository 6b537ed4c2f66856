# mdviewer/browser.py
"""Open URLs in the user's default browser."""

import logging
import webbrowser

logger = logging.getLogger(__name__)


def open_url(url: str) -> None:
    """Open url in a new browser tab.

    Raises:
        OSError: If no browser could be launched.
    """
    try:
        opened = webbrowser.open_new_tab(url)
    except webbrowser.Error as e:
        raise OSError(f"failed to open browser: {e}") from e

    if not opened:
        raise OSError("no runnable browser found")
    logger.debug("Opened %s", url)
