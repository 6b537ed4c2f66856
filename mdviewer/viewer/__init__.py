# mdviewer/viewer/__init__.py
"""Terminal viewer: styled prose with diagrams and images rendered inline."""

from .inline import InlineViewer

__all__ = ["InlineViewer"]
