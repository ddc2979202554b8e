"""
Top-level package for changelogger.

This package exposes the main CLI entry point via the
``changelogger.cli`` module and the generation pipeline via
``changelogger.engine``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
