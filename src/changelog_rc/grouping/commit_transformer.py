"""
Per-commit transform applied by the changelog writer.

Each parsed commit is either dropped (hidden types) or relabeled with its
Keep a Changelog section and tidied up for display: a short hash is
derived when missing and the subject gets a capital first letter.

The transform never raises. Missing or odd optional fields are left as
they are.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Union

from changelog_rc.grouping.commit_model import CommitRecord, Keep, Skip, TransformResult
from changelog_rc.grouping.commit_types import DEFAULT_TYPE_TABLE, TypeTable


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


SHORT_HASH_LENGTH = 7


def capitalize_subject(subject: str) -> str:
    """Upper-case the first character of ``subject``, leaving the rest alone.

    Unlike :meth:`str.capitalize` the remainder is not lower-cased.

    >>> capitalize_subject("add HTTP client")
    'Add HTTP client'
    """
    if not subject:
        return subject
    return subject[0].upper() + subject[1:]


class CommitTransformer:
    """Callable applying a :class:`TypeTable` to commit records.

    Parameters
    ----------
    type_table : TypeTable
        Section mapping and hidden types to apply. Defaults to the
        built-in Keep a Changelog table.
    """

    def __init__(self, type_table: Optional[TypeTable] = None) -> None:
        self.type_table = type_table if type_table is not None else DEFAULT_TYPE_TABLE

    def __call__(self, commit: Union[CommitRecord, Mapping[str, Any]], context: Any = None) -> TransformResult:
        """Classify and normalize ``commit``.

        ``context`` is the writer's rendering context. It is accepted to
        match the writer's call signature and is not inspected.
        """
        if not isinstance(commit, CommitRecord):
            commit = CommitRecord.from_dict(commit)

        if self.type_table.is_hidden(commit.type):
            logger.debug("Skipping hidden %s commit: %s", commit.type, commit.subject)
            return Skip(reason=f"hidden type '{commit.type}'")

        section = self.type_table.section_for(commit.type)
        changes: Dict[str, Any] = {"extra": copy.deepcopy(commit.extra), "notes": copy.deepcopy(commit.notes)}
        if section is not None:
            changes["type"] = section

        if isinstance(commit.hash, str) and not commit.short_hash:
            changes["short_hash"] = commit.hash[:SHORT_HASH_LENGTH]

        if isinstance(commit.subject, str) and commit.subject:
            changes["subject"] = capitalize_subject(commit.subject)

        return Keep(replace(commit, **changes))

    def transform_dict(self, commit: Mapping[str, Any], context: Any = None) -> Optional[Dict[str, Any]]:
        """Dictionary in, dictionary out; ``None`` means the commit is omitted."""
        result = self(commit, context)
        if isinstance(result, Skip):
            return None
        return result.record.to_dict()


transform = CommitTransformer()


def transform_commit_dict(commit: Mapping[str, Any], context: Any = None) -> Optional[Dict[str, Any]]:
    """Apply the default transform to a plain commit dictionary."""
    return transform.transform_dict(commit, context)
