# File: luxgen/__main__.py
"""
Lux Generator - module entry point.

    python -m luxgen --schema book.json --output .
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from luxgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
