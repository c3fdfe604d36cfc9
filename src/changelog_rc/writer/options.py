"""
Writer options handed to the changelog renderer.

Mirrors the ``writerOpts`` block of the release configuration: the
templates, how commits are grouped and sorted, and the per-commit
transform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional

from changelog_rc.config.loader import build_type_table
from changelog_rc.config.templates import load_writer_templates
from changelog_rc.grouping.commit_model import TransformResult
from changelog_rc.grouping.commit_transformer import CommitTransformer, transform

Transform = Callable[[Any, Any], TransformResult]


@dataclass
class WriterOptions:
    """Templates and grouping/sorting settings for one render pass.

    Attributes
    ----------
    main_template : str
        Top-level template. Refers to the partials as ``header``,
        ``commit`` and ``footer``.
    header_partial, commit_partial, footer_partial : str
        Partial templates.
    group_by : str
        Commit field used to group commits into sections.
    commit_groups_sort : Optional[str]
        ``"title"`` to order sections alphabetically, ``None`` to keep
        first-seen order.
    commits_sort : List[str]
        Commit fields used, in order, to sort commits inside a section.
    note_groups_sort : Optional[str]
        ``"title"`` or ``None``, as for ``commit_groups_sort``.
    note_sort : bool
        Sort notes inside a note group by text.
    transform : Callable
        Per-commit transform returning ``Keep`` or ``Skip``.
    """

    main_template: str
    header_partial: str = ""
    commit_partial: str = ""
    footer_partial: str = ""
    group_by: str = "type"
    commit_groups_sort: Optional[str] = "title"
    commits_sort: List[str] = field(default_factory=lambda: ["scope", "subject"])
    note_groups_sort: Optional[str] = "title"
    note_sort: bool = False
    transform: Transform = transform

    @property
    def partials(self) -> dict:
        return {
            "header": self.header_partial,
            "commit": self.commit_partial,
            "footer": self.footer_partial,
        }


def build_writer_options(
    config: Mapping[str, Any],
    transformer: Optional[Transform] = None,
    templates: Optional[Mapping[str, str]] = None,
) -> WriterOptions:
    """Build :class:`WriterOptions` from loaded release settings.

    Parameters
    ----------
    config : Mapping
        Settings as returned by :func:`changelog_rc.config.load_config`.
    transformer : Callable, optional
        Transform to install. Defaults to a :class:`CommitTransformer`
        over the configuration's ``types`` table.
    templates : Mapping, optional
        Pre-loaded template text keyed like :class:`WriterOptions`
        fields. Loaded from the configured template directory if omitted.
    """
    writer_opts = config["writerOpts"]
    if templates is None:
        templates = load_writer_templates(config)
    if transformer is None:
        transformer = CommitTransformer(build_type_table(config))
    return WriterOptions(
        main_template=templates["main_template"],
        header_partial=templates.get("header_partial", ""),
        commit_partial=templates.get("commit_partial", ""),
        footer_partial=templates.get("footer_partial", ""),
        group_by=writer_opts["groupBy"],
        commit_groups_sort=writer_opts.get("commitGroupsSort"),
        commits_sort=list(writer_opts["commitsSort"]),
        note_groups_sort=writer_opts.get("noteGroupsSort"),
        note_sort=writer_opts["noteSort"],
        transform=transformer,
    )
