"""
Configuration loading for changelog_rc.

Provides the built-in release settings, a loader for the
``.versionrc.json`` file in the repository root and the changelog
template loader. See :mod:`changelog_rc.config.loader` for details.
"""

from .defaults import CONFIG_FILENAME, DEFAULT_SETTINGS  # noqa: F401
from .loader import ConfigError, build_type_table, load_config, validate_config  # noqa: F401
from .templates import load_template, load_writer_templates  # noqa: F401
