"""
CLI layer for framecheck.

Provides a Typer application that delegates to the library
(``framecheck.linter``). This package handles only terminal transport:
argument parsing, coloured output, and exit codes.

Entry point::

    framecheck --help
"""

from framecheck.cli.app import app

__all__ = ["app"]
