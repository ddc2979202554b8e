#!/usr/bin/env python
"""
Thin wrapper script to invoke the changelogger CLI.

Running ``python changelog.py update`` is equivalent to running
``changelogger update`` with the console script installed via
``pyproject.toml``.
"""

from changelogger.cli import main


if __name__ == "__main__":
    main(prog_name="changelogger")
