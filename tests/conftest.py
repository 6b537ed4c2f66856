# tests/conftest.py
"""Shared fixtures for the mdviewer test suite."""

import os
import sys
from io import BytesIO

import pytest

# Make the package importable without installing it
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from PIL import Image


@pytest.fixture
def png_bytes():
    """Factory for small solid-colour PNG images."""
    def make(width=40, height=20, color=(200, 30, 30)):
        buf = BytesIO()
        Image.new("RGB", (width, height), color).save(buf, format="PNG")
        return buf.getvalue()
    return make


@pytest.fixture(autouse=True)
def clean_mdviewer_env(monkeypatch):
    """Keep the developer's MDVIEWER_* and terminal variables out of tests."""
    for name in (
        "MDVIEWER_STYLE",
        "MDVIEWER_MERMAID_MODE",
        "MDVIEWER_MERMAID_OUTPUT_DIR",
        "MDVIEWER_MERMAID_JS",
        "MDVIEWER_MERMAID_THEME",
        "MDVIEWER_IMAGE_PROTOCOL",
        "COLORFGBG",
    ):
        monkeypatch.delenv(name, raising=False)
