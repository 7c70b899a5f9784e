"""
CLI layer for portfolio-cms.

Provides a Typer application whose commands delegate to the content
pipeline (``portfolio_cms.content``). This package handles only terminal
transport: argument parsing, coloured output, and table formatting.

Entry point::

    portfolio-cms --help
"""

from portfolio_cms.cli.app import app

__all__ = ["app"]
