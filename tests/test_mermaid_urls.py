# tests/test_mermaid_urls.py
"""Tests for mermaid.live / mermaid.ink URLs and url-mode callouts."""

import base64

from mdviewer.renderer.blocks import DiagramBlock
from mdviewer.renderer.detect import detect_diagram_blocks
from mdviewer.renderer.mermaid import annotate_with_urls, callout, image_url, live_url


def _block(source="graph TD\n  A-->B\n", start=1, end=4):
    return DiagramBlock(diagram_type="Flowchart", source=source, start_line=start, end_line=end)


class TestUrls:
    """Tests for URL generation."""

    def test_live_url_encodes_stripped_source(self):
        expected = base64.standard_b64encode(b"graph TD\n  A-->B").decode()
        assert live_url(_block()) == "https://mermaid.live/edit#pako:" + expected

    def test_image_url(self):
        expected = base64.standard_b64encode(b"graph TD\n  A-->B").decode()
        assert image_url(_block()) == "https://mermaid.ink/img/" + expected

    def test_callout_mentions_type_and_urls(self):
        block = _block()
        text = callout(block)
        assert "📊 **Mermaid Diagram** (Flowchart)" in text
        assert f"🔗 View: <{live_url(block)}>" in text
        assert f"📷 Image: <{image_url(block)}>" in text


class TestAnnotateWithUrls:
    """Tests for callout splicing."""

    def test_callout_inserted_before_each_fence(self):
        text = "intro\n```mermaid\npie\n```\nmid\n```mermaid\ngantt\n```"
        blocks = detect_diagram_blocks(text)
        out = annotate_with_urls(text, blocks)
        lines = out.split("\n")
        fences = [i for i, line in enumerate(lines) if line == "```mermaid"]
        assert len(fences) == 2
        for index in fences:
            # Callout ends with a newline, so the line before the fence is empty
            # and the Image line sits just above that.
            assert lines[index - 2].startswith("> 📷 Image:")
        assert "(Pie Chart)" in out
        assert "(Gantt Chart)" in out

    def test_no_blocks(self):
        assert annotate_with_urls("text", []) == "text"
