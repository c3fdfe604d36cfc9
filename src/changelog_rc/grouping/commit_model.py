"""
Data models for parsed commits flowing through the changelog writer.

A :class:`CommitRecord` is built from the dictionary produced by an
external Conventional Commit parser. The transformer answers with either
:class:`Keep` (carrying the normalized record) or :class:`Skip`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union


# Keys mapped onto dedicated attributes; everything else lands in ``extra``.
_KNOWN_KEYS = ("type", "hash", "shortHash", "subject", "scope", "notes")


@dataclass(frozen=True)
class CommitRecord:
    """A parsed commit as seen by the changelog writer.

    Attributes
    ----------
    type : Optional[str]
        Conventional Commit type, or the section name once transformed.
    hash : Any
        Full commit identifier. Usually a string, but left as provided.
    short_hash : Optional[str]
        Abbreviated identifier (``shortHash`` in dictionary form).
    subject : Optional[str]
        First line of the commit message without the type prefix.
    scope : Optional[str]
        Conventional Commit scope.
    notes : Any
        Note blocks such as ``BREAKING CHANGE`` (``{"title", "text"}``),
        normally a list. Kept exactly as the parser supplied it.
    extra : Dict[str, Any]
        Any other fields supplied by the parser, passed through untouched.
    supplied_keys : FrozenSet[str]
        Dictionary keys of the known fields present in the parser's
        output, written back by :meth:`to_dict` even when ``None`` or empty.
    """

    type: Optional[str]
    hash: Any = None
    short_hash: Optional[str] = None
    subject: Optional[str] = None
    scope: Optional[str] = None
    notes: Any = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    supplied_keys: FrozenSet[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CommitRecord":
        extra = {key: value for key, value in data.items() if key not in _KNOWN_KEYS}
        notes = data.get("notes", [])
        return cls(
            type=data.get("type"),
            hash=data.get("hash"),
            short_hash=data.get("shortHash"),
            subject=data.get("subject"),
            scope=data.get("scope"),
            notes=list(notes) if isinstance(notes, list) else notes,
            extra=dict(extra),
            supplied_keys=frozenset(key for key in _KNOWN_KEYS if key in data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase dictionary shape used by templates.

        Known fields the parser supplied are written back as given, even
        when ``None`` or empty. Other unset fields are omitted.
        """
        data: Dict[str, Any] = dict(self.extra)
        data["type"] = self.type
        fields = (
            ("hash", self.hash),
            ("shortHash", self.short_hash),
            ("subject", self.subject),
            ("scope", self.scope),
        )
        for key, value in fields:
            if value is not None or key in self.supplied_keys:
                data[key] = value
        if self.notes or "notes" in self.supplied_keys:
            if isinstance(self.notes, list):
                data["notes"] = [dict(note) if isinstance(note, Mapping) else note for note in self.notes]
            else:
                data["notes"] = self.notes
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by its dictionary name (``shortHash``, ``scope``, ...)."""
        return self.to_dict().get(key, default)


@dataclass(frozen=True)
class Keep:
    """The commit stays in the changelog, in its normalized form."""

    record: CommitRecord


@dataclass(frozen=True)
class Skip:
    """The commit is omitted from every changelog section."""

    reason: str = ""


TransformResult = Union[Keep, Skip]
