"""
Render a changelog section from parsed commits.

The renderer runs every commit through the writer's transform, groups
the kept commits into sections, sorts them and feeds the result to the
mustache templates. Templates are rendered without HTML escaping since
the output is Markdown.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pystache

from changelog_rc.config.defaults import DEFAULT_SETTINGS
from changelog_rc.grouping.commit_model import CommitRecord, Skip
from changelog_rc.writer.options import WriterOptions


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_VERSION_TITLE = "Unreleased"
_REPO_KEYS = ("host", "owner", "repository")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class RenderError(Exception):
    """Raised when commits or writer options cannot be rendered."""

    pass


def _no_escape(text: str) -> str:
    return text


def format_url(fmt: str, values: Mapping[str, Any]) -> str:
    """Expand ``{{name}}`` placeholders in a URL or message format."""
    return pystache.Renderer(escape=_no_escape).render(fmt, dict(values))


def format_release_commit_message(config: Mapping[str, Any], current_tag: str) -> str:
    """Expand ``releaseCommitMessageFormat`` for ``current_tag``.

    >>> format_release_commit_message({"releaseCommitMessageFormat": "chore(release): {{currentTag}}"}, "v1.2.0")
    'chore(release): v1.2.0'
    """
    return format_url(config["releaseCommitMessageFormat"], {"currentTag": current_tag})


def _sort_value(value: Any) -> str:
    return "" if value is None else str(value)


class ChangelogRenderer:
    """Turn parsed commits into changelog text.

    Parameters
    ----------
    options : WriterOptions
        Templates, grouping and sorting settings and the transform.
    settings : Mapping, optional
        Release settings providing ``commitUrlFormat`` and
        ``compareUrlFormat``. Defaults to the built-in settings.
    """

    def __init__(self, options: WriterOptions, settings: Optional[Mapping[str, Any]] = None) -> None:
        self.options = options
        self.settings = settings if settings is not None else DEFAULT_SETTINGS
        if options.commit_groups_sort not in (None, "title"):
            raise RenderError(f"Unsupported commit group sort: {options.commit_groups_sort!r}")
        if options.note_groups_sort not in (None, "title"):
            raise RenderError(f"Unsupported note group sort: {options.note_groups_sort!r}")

    def transform_commits(
        self,
        commits: Iterable[Union[CommitRecord, Mapping[str, Any]]],
        context: Optional[Mapping[str, Any]] = None,
    ) -> List[CommitRecord]:
        """Apply the transform to each commit and return the kept records."""
        if isinstance(commits, (str, bytes, Mapping)):
            raise RenderError("Commits must be a list of commit objects")
        kept: List[CommitRecord] = []
        skipped = 0
        for index, commit in enumerate(commits):
            if not isinstance(commit, (CommitRecord, Mapping)):
                raise RenderError(f"Commit #{index} is not an object: {commit!r}")
            result = self.options.transform(commit, context)
            if isinstance(result, Skip):
                skipped += 1
                continue
            kept.append(result.record)
        logger.debug("Kept %d commit(s), skipped %d", len(kept), skipped)
        return kept

    def commit_url(self, record: CommitRecord, context: Mapping[str, Any]) -> Optional[str]:
        if not isinstance(record.hash, str) or not all(context.get(key) for key in _REPO_KEYS):
            return None
        values = {key: context[key] for key in _REPO_KEYS}
        values["hash"] = record.hash
        return format_url(self.settings["commitUrlFormat"], values)

    def compare_url(self, context: Mapping[str, Any]) -> Optional[str]:
        keys = _REPO_KEYS + ("previousTag", "currentTag")
        if not all(context.get(key) for key in keys):
            return None
        return format_url(self.settings["compareUrlFormat"], {key: context[key] for key in keys})

    def group_commits(self, records: List[CommitRecord], context: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Group records by ``group_by`` and sort groups and commits."""
        group_by = self.options.group_by
        groups: Dict[Any, List[Dict[str, Any]]] = {}
        for record in records:
            item = record.to_dict()
            url = self.commit_url(record, context)
            if url:
                item["commitUrl"] = url
            key = item.get(group_by)
            try:
                groups.setdefault(key, []).append(item)
            except TypeError as exc:
                raise RenderError(f"Cannot group commits by '{group_by}': {exc}") from exc

        sort_keys = self.options.commits_sort
        result = []
        for title, items in groups.items():
            if sort_keys:
                items = sorted(items, key=lambda c: tuple(_sort_value(c.get(k)) for k in sort_keys))
            result.append({"title": title, "commits": items})
        if self.options.commit_groups_sort == "title":
            result.sort(key=lambda group: _sort_value(group["title"]))
        return result

    def collect_note_groups(self, records: List[CommitRecord]) -> List[Dict[str, Any]]:
        """Gather commit notes (e.g. ``BREAKING CHANGE``) into titled groups."""
        groups: Dict[str, List[Dict[str, Any]]] = {}
        for record in records:
            notes = record.notes if isinstance(record.notes, (list, tuple)) else ()
            for note in notes:
                if not isinstance(note, Mapping) or not note.get("title"):
                    continue
                entry = dict(note)
                entry["commit"] = record.to_dict()
                groups.setdefault(str(note["title"]), []).append(entry)

        result = []
        for title, notes in groups.items():
            if self.options.note_sort:
                notes = sorted(notes, key=lambda n: _sort_value(n.get("text")))
            result.append({"title": title, "notes": notes})
        if self.options.note_groups_sort == "title":
            result.sort(key=lambda group: group["title"])
        return result

    def build_context(
        self,
        commits: Iterable[Union[CommitRecord, Mapping[str, Any]]],
        context: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Template context: the caller's context plus groups and URLs."""
        context = dict(context or {})
        records = self.transform_commits(commits, context)
        context.setdefault("version", DEFAULT_VERSION_TITLE)
        compare_url = self.compare_url(context)
        if compare_url:
            context["compareUrl"] = compare_url
        context["commitGroups"] = self.group_commits(records, context)
        context["noteGroups"] = self.collect_note_groups(records)
        return context

    def render(
        self,
        commits: Iterable[Union[CommitRecord, Mapping[str, Any]]],
        context: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Render the changelog section for ``commits``.

        ``context`` may carry ``version``, ``date``, ``host``, ``owner``,
        ``repository``, ``previousTag`` and ``currentTag``.
        """
        values = self.build_context(commits, context)
        renderer = pystache.Renderer(escape=_no_escape, partials=self.options.partials)
        text = renderer.render(self.options.main_template, values)
        return _EXTRA_BLANK_LINES.sub("\n\n", text).strip("\n") + "\n"
