"""
Commit classification for changelog rendering.

This package holds the commit type table, the commit record model and
the per-commit transform. See :mod:`changelog_rc.grouping.commit_types`
and :mod:`changelog_rc.grouping.commit_transformer` for details.
"""

from .commit_model import CommitRecord, Keep, Skip, TransformResult  # noqa: F401
from .commit_transformer import CommitTransformer, transform, transform_commit_dict  # noqa: F401
from .commit_types import (  # noqa: F401
    DEFAULT_COMMIT_TYPES,
    DEFAULT_TYPE_TABLE,
    CommitType,
    TypeTable,
    TypeTableError,
)
