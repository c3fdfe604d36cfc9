"""Built-in release settings used when no ``.versionrc.json`` overrides them."""

from __future__ import annotations

import copy
from typing import Any, Dict

from changelog_rc.grouping.commit_types import DEFAULT_TYPE_TABLE


CONFIG_FILENAME = ".versionrc.json"
DEFAULT_TEMPLATE_DIR = ".changelog-templates"

DEFAULT_HEADER = (
    "# Changelog\n\n"
    "All notable changes to this project will be documented in this file.\n\n"
    "The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),\n"
    "and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).\n"
)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "header": DEFAULT_HEADER,
    "infile": "CHANGELOG.md",
    "types": DEFAULT_TYPE_TABLE.as_dicts(),
    # Versioning
    "preMajor": False,
    "packageFiles": [{"filename": ".semver", "type": "plain-text"}],
    "bumpFiles": [{"filename": ".semver", "type": "plain-text"}],
    # Git behaviour
    "tagPrefix": "v",
    "releaseCommitMessageFormat": "chore(release): {{currentTag}}",
    "sign": False,
    "signoff": False,
    "noVerify": False,
    "commitAll": False,
    "tagForce": False,
    "gitTagFallback": True,
    "firstRelease": True,
    # URLs
    "commitUrlFormat": "{{host}}/{{owner}}/{{repository}}/commit/{{hash}}",
    "compareUrlFormat": "{{host}}/{{owner}}/{{repository}}/compare/{{previousTag}}...{{currentTag}}",
    "issueUrlFormat": "{{host}}/{{owner}}/{{repository}}/issues/{{id}}",
    "userUrlFormat": "{{host}}/{{user}}",
    "issuePrefixes": ["#"],
    # Lifecycle scripts
    "scripts": {
        "prebump": "",
        "prechangelog": "",
        "precommit": "",
        "pretag": "",
        "posttag": "",
    },
    "skip": {
        "bump": False,
        "changelog": False,
        "commit": False,
        "tag": False,
    },
    "releaseCount": 1,
    "silent": False,
    "dryRun": False,
    "writerOpts": {
        "templateDir": DEFAULT_TEMPLATE_DIR,
        "mainTemplate": "template.hbs",
        "headerPartial": "header.hbs",
        "commitPartial": "commit.hbs",
        "footerPartial": "footer.hbs",
        "groupBy": "type",
        "commitGroupsSort": "title",
        "commitsSort": ["scope", "subject"],
        "noteGroupsSort": "title",
        "noteSort": False,
    },
}


def default_settings() -> Dict[str, Any]:
    """Return a private deep copy of :data:`DEFAULT_SETTINGS`."""
    return copy.deepcopy(DEFAULT_SETTINGS)
