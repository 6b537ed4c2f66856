# tests/test_html.py
"""Tests for Markdown to HTML conversion."""

from mdviewer.mermaid import CompiledDiagram, CompilerUnavailableError
from mdviewer.renderer.html import HTMLRenderer

SVG = '<svg viewBox="0 0 10 10"><g/></svg>'


class StubCompiler:
    def __init__(self, failing=()):
        self.failing = failing
        self.rendered = []

    def render(self, source):
        self.rendered.append(source)
        if any(word in source for word in self.failing):
            return CompiledDiagram(error="bad diagram")
        return CompiledDiagram(svg=SVG, width=10, height=10)


def _renderer(compiler=None):
    compiler = compiler or StubCompiler()
    return HTMLRenderer(compiler_factory=lambda: compiler)


class TestRenderToHtml:
    """Tests for the document conversion."""

    def test_full_document(self):
        html = _renderer().render_to_html("# Title\n\nHello")
        assert html.startswith("<!DOCTYPE html>")
        assert "<h1>Title</h1>" in html
        assert "<p>Hello</p>" in html
        assert ".mermaid-diagram" in html

    def test_tables_and_strikethrough(self):
        text = "| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~"
        html = _renderer().render_to_html(text)
        assert "<table>" in html
        assert "<s>gone</s>" in html

    def test_hard_breaks(self):
        assert "<br" in _renderer().render_to_html("one\ntwo")

    def test_typographer(self):
        html = _renderer().render_to_html('"quoted" (c)')
        assert "“quoted”" in html
        assert "©" in html

    def test_raw_html_kept(self):
        assert '<span class="x">hi</span>' in _renderer().render_to_html('<span class="x">hi</span>')


class TestDiagrams:
    """Tests for diagram inlining."""

    def test_diagram_replaced_with_svg(self):
        text = "before\n\n```mermaid\ngraph TD\n  A-->B\n```\n\nafter"
        html = _renderer().render_to_html(text)
        assert f'<div class="mermaid-diagram">{SVG}</div>' in html
        assert "language-mermaid" not in html
        assert "<p>after</p>" in html

    def test_failed_diagram_kept_as_code(self):
        text = "```mermaid\ngraph bad\n```\n\n```mermaid\npie\n```"
        compiler = StubCompiler(failing=("bad",))
        html = _renderer(compiler).render_to_html(text)
        assert 'class="language-mermaid"' in html
        assert "graph bad" in html
        assert html.count('class="mermaid-diagram"') == 1
        assert sorted(compiler.rendered) == ["graph bad", "pie"]

    def test_compiler_unavailable_keeps_all_fences(self):
        def unavailable():
            raise CompilerUnavailableError("missing")

        html = HTMLRenderer(compiler_factory=unavailable).render_to_html("```mermaid\npie\n```")
        assert 'class="language-mermaid"' in html
        assert '<div class="mermaid-diagram">' not in html

    def test_no_diagrams_skips_compiler(self):
        calls = []
        HTMLRenderer(compiler_factory=lambda: calls.append(1)).render_to_html("plain")
        assert calls == []
