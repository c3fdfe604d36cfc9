"""
Conventional Commit type table for changelog rendering.

A single table of ``{type, section, hidden}`` entries drives both the
declarative ``types`` list handed to release tooling and the lookups
used by :mod:`changelog_rc.grouping.commit_transformer`. Sections follow
`Keep a Changelog <https://keepachangelog.com/en/1.0.0/>`_.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class TypeTableError(ValueError):
    """Raised when a commit type table is malformed or inconsistent."""

    pass


@dataclass(frozen=True)
class CommitType:
    """One row of the commit type table.

    Attributes
    ----------
    type : str
        Conventional Commit type tag (``feat``, ``fix``, ...).
    section : str
        Changelog heading the commits are listed under.
    hidden : bool
        Whether commits of this type are left out of the changelog.
    """

    type: str
    section: str
    hidden: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "section": self.section, "hidden": self.hidden}


DEFAULT_COMMIT_TYPES = (
    CommitType("feat", "Added"),
    CommitType("fix", "Fixed"),
    CommitType("perf", "Changed"),
    CommitType("docs", "Documentation"),
    CommitType("revert", "Reverted"),
    CommitType("security", "Security"),
    CommitType("deprecate", "Deprecated"),
    CommitType("remove", "Removed"),
    CommitType("refactor", "Changed", hidden=True),
    CommitType("style", "Changed", hidden=True),
    CommitType("test", "Changed", hidden=True),
    CommitType("build", "Changed", hidden=True),
    CommitType("ci", "Changed", hidden=True),
    CommitType("chore", "Changed", hidden=True),
)


class TypeTable:
    """Read-only lookup views over a set of commit types.

    ``sections`` maps every known type tag to its section name and
    ``hidden`` holds the tags excluded from the changelog. Every hidden
    tag must also appear in ``sections``.
    """

    __slots__ = ("_entries", "_sections", "_hidden")

    def __init__(
        self,
        sections: Mapping[str, str],
        hidden: Iterable[str] = (),
        entries: Optional[Iterable[CommitType]] = None,
    ) -> None:
        hidden_set = frozenset(hidden)
        for tag, section in sections.items():
            if not isinstance(tag, str) or not tag:
                raise TypeTableError(f"Commit type must be a non-empty string, got {tag!r}")
            if not isinstance(section, str) or not section:
                raise TypeTableError(f"Section for '{tag}' must be a non-empty string")
        unmapped = sorted(str(tag) for tag in hidden_set if tag not in sections)
        if unmapped:
            logger.error("Hidden commit types without a section: %s", unmapped)
            raise TypeTableError(
                f"Hidden commit types missing from the section mapping: {', '.join(unmapped)}"
            )
        if entries is None:
            entries = [CommitType(tag, section, tag in hidden_set) for tag, section in sections.items()]
        self._entries = tuple(entries)
        self._sections: Mapping[str, str] = MappingProxyType(dict(sections))
        self._hidden: FrozenSet[str] = hidden_set

    @classmethod
    def from_entries(cls, entries: Iterable[CommitType]) -> "TypeTable":
        """Build a table from :class:`CommitType` rows, rejecting duplicates."""
        entries = tuple(entries)
        sections: Dict[str, str] = {}
        hidden: List[str] = []
        for entry in entries:
            if not isinstance(entry.type, str):
                raise TypeTableError(f"Commit type must be a non-empty string, got {entry.type!r}")
            if entry.type in sections:
                raise TypeTableError(f"Duplicate commit type '{entry.type}'")
            if not isinstance(entry.hidden, bool):
                raise TypeTableError(f"'hidden' for '{entry.type}' must be a boolean")
            sections[entry.type] = entry.section
            if entry.hidden:
                hidden.append(entry.type)
        return cls(sections, hidden, entries)

    @classmethod
    def from_dicts(cls, items: Iterable[Mapping[str, Any]]) -> "TypeTable":
        """Build a table from ``{"type", "section", "hidden"}`` dictionaries.

        ``hidden`` defaults to ``False`` when omitted.
        """
        entries = []
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                raise TypeTableError(f"types[{index}] must be an object")
            if "type" not in item or "section" not in item:
                raise TypeTableError(f"types[{index}] requires 'type' and 'section'")
            entries.append(CommitType(item["type"], item["section"], item.get("hidden", False)))
        return cls.from_entries(entries)

    @property
    def entries(self) -> tuple:
        return self._entries

    @property
    def sections(self) -> Mapping[str, str]:
        return self._sections

    @property
    def hidden(self) -> FrozenSet[str]:
        return self._hidden

    def section_for(self, commit_type: Optional[str]) -> Optional[str]:
        """Return the section for ``commit_type`` or ``None`` if it is unknown."""
        if not isinstance(commit_type, str):
            return None
        return self._sections.get(commit_type)

    def is_hidden(self, commit_type: Optional[str]) -> bool:
        return isinstance(commit_type, str) and commit_type in self._hidden

    def visible_sections(self) -> List[str]:
        """Section names that can appear in a changelog, in table order."""
        seen: List[str] = []
        for entry in self._entries:
            if entry.type not in self._hidden and entry.section not in seen:
                seen.append(entry.section)
        return seen

    def as_dicts(self) -> List[Dict[str, Any]]:
        """The declarative ``types`` list derived from this table."""
        return [entry.as_dict() for entry in self._entries]

    def __contains__(self, commit_type: object) -> bool:
        return isinstance(commit_type, str) and commit_type in self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return f"TypeTable({len(self._sections)} types, hidden={sorted(self._hidden)})"


DEFAULT_TYPE_TABLE = TypeTable.from_entries(DEFAULT_COMMIT_TYPES)
