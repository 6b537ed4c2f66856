# mdviewer/mermaid/compiler.py
"""Mermaid diagram compilation in headless Chromium via Playwright.

Every call opens its own browser session, so a malformed diagram cannot
leave state behind for the next one:

    open session -> about:blank -> load mermaid.js -> start render
                 -> wait for result (20s) -> Done | Errored | TimedOut

The whole call, browser launch included, is bounded by a 30s budget:
every browser step gets the time that is left as its own timeout, and
the call fails as timed out once nothing is left.

The page reports its result by calling a function exposed by Playwright
(a per-page message channel) rather than through a global variable; the
Python side polls its inbox until the message arrives or the budget
runs out.

render() never raises: failures come back as CompiledDiagram.error so the
caller can decide how to fall back. render_to_png() raises
DiagramRenderError, since there is no partial raster result.
"""

import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Callable, ContextManager, Dict, Iterator, List, Optional

from playwright.sync_api import sync_playwright

from .svg import CompiledDiagram, clean_svg, extract_svg_dimensions

logger = logging.getLogger(__name__)

MERMAID_CDN_URL = "https://cdn.jsdelivr.net/npm/mermaid@10.9.1/dist/mermaid.min.js"

CALL_TIMEOUT = 30.0  # seconds, whole call
POLL_TIMEOUT = 20.0  # seconds, waiting for the render result
POLL_INTERVAL_MS = 50

RESULT_CHANNEL = "__mdviewerDeliver"

DEFAULT_PNG_WIDTH = 800
DEFAULT_PNG_HEIGHT = 600

# Starts the render and returns immediately; the outcome is delivered
# through the exposed channel function.
# Loading the library through page content (rather than add_script_tag(url=),
# which has no timeout) lets the script fetch run under the call deadline.
_CDN_PAGE = (
    '<!DOCTYPE html><html><head><script src="{url}"></script></head>'
    "<body></body></html>"
)

_MERMAID_LOADED_JS = "() => typeof mermaid !== 'undefined'"

_START_RENDER_JS = """
({ source, theme, inject, channel }) => {
    const deliver = window[channel];
    Promise.resolve()
        .then(() => {
            mermaid.initialize({ startOnLoad: false, theme: theme, securityLevel: 'loose' });
            return mermaid.render('diagram-' + Date.now(), source);
        })
        .then(
            (result) => {
                if (inject) {
                    document.body.style.margin = '0';
                    document.body.innerHTML = result.svg;
                }
                deliver({ svg: result.svg, error: null });
            },
            (error) => deliver({ svg: null, error: (error && error.message) || String(error) }),
        );
}
"""

SessionFactory = Callable[[Optional[Dict[str, int]], float], ContextManager[Any]]


class DiagramRenderError(Exception):
    """Raised when a diagram cannot be rendered to a raster image."""


class CompilerUnavailableError(Exception):
    """Raised when the compiler cannot be set up at all."""


@contextmanager
def chromium_page(viewport: Optional[Dict[str, int]] = None,
                  timeout: float = CALL_TIMEOUT) -> Iterator[Any]:
    """Launch headless Chromium and yield a fresh page.

    Args:
        viewport: Optional {"width": px, "height": px}.
        timeout: Budget in seconds for launch and each page operation.
    """
    timeout_ms = timeout * 1000
    with sync_playwright() as pw:
        browser = pw.chromium.launch(
            headless=True,
            timeout=timeout_ms,
            args=[
                "--disable-dev-shm-usage",
                "--disable-gpu",
                "--no-sandbox",
            ],
        )
        try:
            page = browser.new_page(viewport=viewport)
            page.set_default_timeout(timeout_ms)
            yield page
        finally:
            browser.close()


class DiagramCompiler:
    """Renders Mermaid source to SVG text or PNG bytes."""

    def __init__(self, script_path: Optional[str] = None,
                 theme: Optional[str] = None,
                 timeout: float = CALL_TIMEOUT,
                 poll_timeout: float = POLL_TIMEOUT,
                 session_factory: Optional[SessionFactory] = None):
        """Create a compiler.

        Args:
            script_path: Local mermaid.min.js to inject. Defaults to
                MDVIEWER_MERMAID_JS, then to the pinned CDN build.
            theme: Mermaid theme. Defaults to MDVIEWER_MERMAID_THEME or
                "default".
            timeout: Overall per-call budget in seconds.
            poll_timeout: Budget in seconds for the render result to arrive.
            session_factory: Context manager factory yielding a page;
                defaults to chromium_page.

        Raises:
            CompilerUnavailableError: If a configured script path does
                not exist.
        """
        if script_path is None:
            script_path = os.environ.get("MDVIEWER_MERMAID_JS") or None
        if script_path and not os.path.isfile(script_path):
            raise CompilerUnavailableError(f"mermaid script not found: {script_path}")

        self._script_path = script_path
        self._theme = theme or os.environ.get("MDVIEWER_MERMAID_THEME") or "default"
        self._timeout = timeout
        self._poll_timeout = min(poll_timeout, timeout)
        self._session_factory = session_factory or chromium_page

    def render(self, source: str) -> CompiledDiagram:
        """Compile diagram source to SVG.

        Returns:
            CompiledDiagram with svg and pixel dimensions, or with only
            error set. Never raises.
        """
        started = time.monotonic()
        try:
            with self._session_factory(None, self._timeout) as page:
                payload = self._run(page, source, inject=False, started=started)
        except Exception as e:
            logger.debug("mermaid render failed: %s", e)
            return CompiledDiagram(error=f"diagram compilation failed: {e}")

        error = payload.get("error")
        if error:
            return CompiledDiagram(error=f"mermaid rendering error: {error}")

        svg = payload.get("svg")
        if not svg:
            return CompiledDiagram(error=f"no SVG returned from mermaid (result: {payload!r})")

        svg = clean_svg(svg)
        width, height = extract_svg_dimensions(svg)
        logger.debug("Compiled %s diagram %dx%d in %.2fs",
                     self._theme, width, height, time.monotonic() - started)
        return CompiledDiagram(svg=svg, width=width, height=height)

    def render_to_png(self, source: str, width: int = DEFAULT_PNG_WIDTH,
                      height: int = DEFAULT_PNG_HEIGHT) -> bytes:
        """Compile diagram source and screenshot it as PNG.

        The rendered SVG is injected into the page body at a viewport of
        width x height and the full page is captured.

        Raises:
            DiagramRenderError: On any transport, library or timeout failure.
        """
        viewport = {
            "width": width if width > 0 else DEFAULT_PNG_WIDTH,
            "height": height if height > 0 else DEFAULT_PNG_HEIGHT,
        }
        started = time.monotonic()
        try:
            with self._session_factory(viewport, self._timeout) as page:
                payload = self._run(page, source, inject=True, started=started)
                if payload.get("error"):
                    raise DiagramRenderError(f"mermaid rendering error: {payload['error']}")
                return page.screenshot(
                    full_page=True,
                    type="png",
                    timeout=self._remaining_ms(started),
                )
        except DiagramRenderError:
            raise
        except Exception as e:
            raise DiagramRenderError(f"failed to render PNG: {e}") from e

    def _run(self, page: Any, source: str, inject: bool, started: float) -> Dict[str, Any]:
        """Load mermaid into a blank page, start the render, await the result."""
        inbox: List[Dict[str, Any]] = []
        page.expose_function(RESULT_CHANNEL, inbox.append)
        page.goto("about:blank", timeout=self._remaining_ms(started))

        if self._script_path:
            # Local file, read and inlined by Playwright
            page.add_script_tag(path=self._script_path)
        else:
            page.set_content(
                _CDN_PAGE.format(url=MERMAID_CDN_URL),
                wait_until="load",
                timeout=self._remaining_ms(started),
            )

        self._remaining_ms(started)
        if not page.evaluate(_MERMAID_LOADED_JS):
            raise DiagramRenderError("mermaid library failed to load")

        # Source travels as a serialized argument, never spliced into script text
        page.evaluate(_START_RENDER_JS, {
            "source": source,
            "theme": self._theme,
            "inject": inject,
            "channel": RESULT_CHANNEL,
        })
        return self._await_result(page, inbox, started)

    def _remaining_ms(self, started: float) -> float:
        """Milliseconds left in the call budget.

        Raises:
            DiagramRenderError: If the budget is used up.
        """
        elapsed = time.monotonic() - started
        if elapsed >= self._timeout:
            raise DiagramRenderError(
                f"timed out after {elapsed:.1f}s (call budget {self._timeout:g}s)"
            )
        return (self._timeout - elapsed) * 1000

    def _await_result(self, page: Any, inbox: List[Dict[str, Any]],
                      started: float) -> Dict[str, Any]:
        poll_started = time.monotonic()
        while not inbox:
            now = time.monotonic()
            if now - poll_started >= self._poll_timeout or now - started >= self._timeout:
                raise DiagramRenderError(
                    f"timed out after {now - started:.1f}s waiting for mermaid result"
                )
            page.wait_for_timeout(POLL_INTERVAL_MS)
        return inbox[0]
