# File: pothosgen/__main__.py
"""
pothosgen — Module entry point.

Allows running the generator directly via::

    python -m pothosgen --schema prisma/schema.prisma --output ./src/generated

This module simply delegates to the CLI entry point defined in ``pothosgen.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from pothosgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
