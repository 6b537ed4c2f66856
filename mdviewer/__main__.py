# mdviewer/__main__.py
"""Allow ``python -m mdviewer``."""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
