"""
Configuration loading for changelogger.

Provides a layered loader for the optional user and project
configuration files. See :mod:`changelogger.config.loader` for
implementation details.
"""

from .loader import ConfigError, load_config  # noqa: F401
