# mdviewer/__init__.py
"""Terminal Markdown viewer with inline Mermaid diagrams and images."""

__version__ = "0.3.0"
