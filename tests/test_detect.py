# tests/test_detect.py
"""Tests for the diagram and image span detectors."""

import pytest

from mdviewer.renderer.blocks import DiagramBlock, ImageBlock
from mdviewer.renderer.detect import (
    detect_content_blocks,
    detect_diagram_blocks,
    detect_diagram_type,
    detect_image_blocks,
    is_supported_image,
    parse_width_hint,
)


class TestDiagramType:
    """Tests for first-line diagram classification."""

    @pytest.mark.parametrize("source,expected", [
        ("sequenceDiagram\n  A->>B: hi", "Sequence Diagram"),
        ("graph TD\n  A-->B", "Flowchart"),
        ("flowchart LR\n  A-->B", "Flowchart"),
        ("classDiagram\n  A <|-- B", "Class Diagram"),
        ("stateDiagram-v2\n  [*] --> S", "State Diagram"),
        ("gitGraph\n  commit", "Git Graph"),
        ("pie title Pets", "Pie Chart"),
    ])
    def test_known_types(self, source, expected):
        assert detect_diagram_type(source) == expected

    def test_unknown_keyword(self):
        assert detect_diagram_type("quadrantChart\n  x-axis a") == "Unknown"

    def test_skips_leading_blank_lines(self):
        assert detect_diagram_type("\n\n   gantt\n  title x") == "Gantt Chart"

    def test_empty_source(self):
        assert detect_diagram_type("") == "Unknown"


class TestDetectDiagramBlocks:
    """Tests for mermaid fence detection."""

    def test_single_fence(self):
        text = "# Doc\n\n```mermaid\ngraph TD\n  A-->B\n```\nafter"
        blocks = detect_diagram_blocks(text)
        assert len(blocks) == 1
        block = blocks[0]
        assert block.start_line == 3
        assert block.end_line == 6
        assert block.source == "graph TD\n  A-->B"
        assert block.diagram_type == "Flowchart"

    def test_offsets_cover_fence(self):
        text = "intro\n```mermaid\npie\n```\nend"
        block = detect_diagram_blocks(text)[0]
        assert text[block.start_offset:block.end_offset] == "```mermaid\npie\n```"

    def test_other_languages_ignored(self):
        text = "```python\nprint(1)\n```\n```mermaid\npie\n```"
        blocks = detect_diagram_blocks(text)
        assert [b.start_line for b in blocks] == [4]

    def test_unclosed_fence_produces_nothing(self):
        assert detect_diagram_blocks("```mermaid\ngraph TD\n") == []

    def test_lines_within_document(self):
        text = "```mermaid\nA\n```\n\n```mermaid\nB\n```"
        line_count = len(text.split("\n"))
        for block in detect_diagram_blocks(text):
            assert 1 <= block.start_line <= block.end_line <= line_count


class TestWidthHint:
    """Tests for alt text width annotations."""

    def test_width_extracted(self):
        assert parse_width_hint("chart|width=400") == ("chart", 400)

    def test_non_numeric_width_left_unchanged(self):
        assert parse_width_hint("chart|width=abc") == ("chart|width=abc", 0)

    def test_no_annotation(self):
        assert parse_width_hint("chart") == ("chart", 0)


class TestDetectImageBlocks:
    """Tests for image reference detection."""

    def test_local_image(self):
        blocks = detect_image_blocks("text\n![logo|width=120](img/logo.png)\n")
        assert blocks == [ImageBlock(
            alt_text="logo", path="img/logo.png", width=120,
            start_line=2, end_line=2, start_offset=5, end_offset=36,
        )]

    def test_remote_images_skipped(self):
        text = "![a](http://x/a.png) ![b](https://x/b.png)"
        assert detect_image_blocks(text) == []

    def test_unsupported_extension_skipped(self):
        assert detect_image_blocks("![doc](file.pdf)") == []

    def test_images_inside_code_fences_skipped(self):
        text = "Intro\n\n```markdown\n![chart|width=400](chart.png)\n```\n\n![real](real.png)"
        blocks = detect_image_blocks(text)
        assert [(b.path, b.start_line) for b in blocks] == [("real.png", 7)]

    def test_image_inside_mermaid_fence_skipped(self):
        assert detect_image_blocks("```mermaid\n![a](a.png)\n```") == []

    def test_two_images_on_one_line(self):
        blocks = detect_image_blocks("![a](a.png) ![b](b.jpg)")
        assert [b.path for b in blocks] == ["a.png", "b.jpg"]

    @pytest.mark.parametrize("path,expected", [
        ("a.PNG", True), ("a.jpeg", True), ("a.webp", True), ("a.svg", False), ("a", False),
    ])
    def test_supported_extensions(self, path, expected):
        assert is_supported_image(path) is expected


class TestDetectContentBlocks:
    """Tests for the combined detector."""

    def test_no_special_content(self):
        assert detect_content_blocks("# Title\n\nJust prose.\n") == []

    def test_image_before_diagram(self):
        lines = ["# T", "", "![x](x.png)", "", "", "", "", "", "",
                 "```mermaid", "graph TD", "A-->B", "B-->C", "```"]
        blocks = detect_content_blocks("\n".join(lines))
        assert [type(b) for b in blocks] == [ImageBlock, DiagramBlock]
        assert (blocks[0].start_line, blocks[0].end_line) == (3, 3)
        assert (blocks[1].start_line, blocks[1].end_line) == (10, 14)

    def test_diagrams_disabled(self):
        text = "```mermaid\npie\n```\n![x](x.png)"
        blocks = detect_content_blocks(text, diagrams=False)
        assert [type(b) for b in blocks] == [ImageBlock]
