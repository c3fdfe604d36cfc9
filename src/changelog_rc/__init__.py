"""
Top-level package for changelog_rc.

Release configuration for Conventional Commit based changelogs: the
commit type table, the per-commit transform and the changelog writer.
The ``changelog-rc`` command is defined in :mod:`changelog_rc.cli`.
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
