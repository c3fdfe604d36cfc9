"""
Changelog writer for changelog_rc.

Builds writer options from the release settings and renders changelog
sections from parsed commits. See :mod:`changelog_rc.writer.renderer`.
"""

from .options import WriterOptions, build_writer_options  # noqa: F401
from .renderer import (  # noqa: F401
    ChangelogRenderer,
    RenderError,
    format_release_commit_message,
    format_url,
)
