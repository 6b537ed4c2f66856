# tests/test_cli.py
"""Tests for the command line entry point."""

import os
from unittest.mock import MagicMock, patch

import pytest

from mdviewer import __version__
from mdviewer.cli import build_parser, main
from mdviewer.config import RenderMode
from mdviewer.pdf import PDFExportError


@pytest.fixture
def doc(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("# Doc\n\n```mermaid\ngraph TD\n  A-->B\n```\n")
    return path


@pytest.fixture
def viewer_cls():
    with patch("mdviewer.cli.InlineViewer") as cls:
        yield cls


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory so no stray .env file is picked up."""
    monkeypatch.chdir(tmp_path)
    with patch.dict(os.environ):
        yield


class TestParser:
    """Tests for flag parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.file is None
        assert args.width == 0
        assert args.env_file == ".env"
        assert not args.no_mermaid
        assert not args.keep_mermaid_files

    def test_short_flags(self):
        args = build_parser().parse_args(["-s", "dark", "-w", "100", "-k", "-p", "out.pdf", "-v", "x.md"])
        assert (args.style, args.width, args.export_pdf, args.file) == ("dark", 100, "out.pdf", "x.md")
        assert args.keep_mermaid_files and args.verbose

    def test_invalid_mode(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--mermaid-mode", "ascii"])
        assert exc.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Tests for the view flow."""

    def test_views_file(self, doc, viewer_cls):
        assert main([str(doc), "--width", "72"]) == 0
        options = viewer_cls.call_args.args[0]
        assert options.width == 72
        assert options.mermaid_mode is RenderMode.TERMINAL
        viewer = viewer_cls.return_value
        viewer.set_base_path.assert_called_once_with(str(doc.parent))
        viewer.view.assert_called_once_with(doc.read_text())

    def test_missing_file(self, tmp_path, viewer_cls, capsys):
        assert main([str(tmp_path / "missing.md")]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: failed to read file")
        viewer_cls.assert_not_called()

    def test_no_input(self, viewer_cls, capsys):
        with patch("mdviewer.cli.stdin_is_piped", return_value=False):
            assert main([]) == 1
        assert "no input file specified" in capsys.readouterr().err

    def test_stdin(self, viewer_cls):
        with patch("mdviewer.cli.stdin_is_piped", return_value=True), \
                patch("mdviewer.cli.read_file", return_value="# piped") as read:
            assert main([]) == 0
        read.assert_called_once_with("-")
        viewer_cls.return_value.view.assert_called_once_with("# piped")
        viewer_cls.return_value.set_base_path.assert_not_called()

    def test_bad_env_mode(self, doc, viewer_cls, capsys):
        os.environ["MDVIEWER_MERMAID_MODE"] = "bogus"
        assert main([str(doc)]) == 1
        assert "unknown mermaid mode" in capsys.readouterr().err

    def test_env_file(self, doc, tmp_path, viewer_cls):
        env_file = tmp_path / "custom.env"
        env_file.write_text("MDVIEWER_MERMAID_MODE=url\nMDVIEWER_STYLE=light\n")
        assert main([str(doc), "--env-file", str(env_file)]) == 0
        options = viewer_cls.call_args.args[0]
        assert options.mermaid_mode is RenderMode.URL
        assert options.style == "light"

    def test_cli_flag_beats_env_file(self, doc, tmp_path, viewer_cls):
        env_file = tmp_path / ".env"
        env_file.write_text("MDVIEWER_STYLE=light\n")
        assert main([str(doc), "--style", "dark"]) == 0
        assert viewer_cls.call_args.args[0].style == "dark"

    def test_bad_style(self, doc, tmp_path, capsys):
        assert main([str(doc), "--style", str(tmp_path / "missing.ini")]) == 1
        assert "failed to create renderer" in capsys.readouterr().err


class TestOpenMermaid:
    """Tests for --open-mermaid."""

    def test_opens_each_diagram(self, doc, viewer_cls, capsys):
        with patch("mdviewer.cli.open_url") as open_url:
            assert main([str(doc), "--open-mermaid"]) == 0
        open_url.assert_called_once()
        assert open_url.call_args.args[0].startswith("https://mermaid.live/edit#pako:")
        assert "Opening 1 mermaid diagram(s) in browser..." in capsys.readouterr().err
        viewer_cls.return_value.view.assert_called_once()

    def test_open_failure_is_warning(self, doc, viewer_cls, caplog):
        with patch("mdviewer.cli.open_url", side_effect=OSError("no browser")):
            assert main([str(doc), "--open-mermaid"]) == 0
        assert "failed to open URL" in caplog.text

    def test_skipped_with_no_mermaid(self, doc, viewer_cls):
        with patch("mdviewer.cli.open_url") as open_url:
            assert main([str(doc), "--open-mermaid", "--no-mermaid"]) == 0
        open_url.assert_not_called()


class TestExportPdf:
    """Tests for --export-pdf."""

    def test_success(self, doc, tmp_path, viewer_cls, capsys):
        with patch("mdviewer.cli.PDFExporter") as exporter_cls:
            assert main([str(doc), "--export-pdf", str(tmp_path / "out.pdf")]) == 0
        exporter_cls.return_value.export_file_to_pdf.assert_called_once_with(
            str(doc), str(tmp_path / "out.pdf"))
        assert "PDF successfully exported" in capsys.readouterr().err
        viewer_cls.assert_not_called()

    def test_failure(self, doc, tmp_path, capsys):
        exporter = MagicMock()
        exporter.export_file_to_pdf.side_effect = PDFExportError("failed to generate PDF: boom")
        with patch("mdviewer.cli.PDFExporter", return_value=exporter):
            assert main([str(doc), "-p", str(tmp_path / "out.pdf")]) == 1
        assert "Error: PDF export failed: failed to generate PDF: boom" in capsys.readouterr().err
