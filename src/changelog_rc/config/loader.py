"""
Configuration loader for changelog_rc.

Release settings are read from a JSON file named ``.versionrc.json`` in
the repository root (the current working directory unless told
otherwise). The file only needs to contain the settings that differ
from :data:`changelog_rc.config.defaults.DEFAULT_SETTINGS`; it is merged
over the defaults and the result is validated.

If an explicitly requested file is missing, or any file is malformed or
holds values of the wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from changelog_rc.config.defaults import CONFIG_FILENAME, DEFAULT_SETTINGS, default_settings
from changelog_rc.grouping.commit_types import TypeTable, TypeTableError


logger = logging.getLogger(__name__)
# Attach a null handler so library use without logging configuration stays
# quiet. The CLI configures the root logger explicitly.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class ConfigError(Exception):
    """Raised when the release configuration is missing or invalid."""

    pass


_BOOL_KEYS = (
    "preMajor",
    "sign",
    "signoff",
    "noVerify",
    "commitAll",
    "tagForce",
    "gitTagFallback",
    "firstRelease",
    "silent",
    "dryRun",
)
_STR_KEYS = (
    "header",
    "infile",
    "tagPrefix",
    "releaseCommitMessageFormat",
    "commitUrlFormat",
    "compareUrlFormat",
    "issueUrlFormat",
    "userUrlFormat",
)
_WRITER_STR_KEYS = (
    "templateDir",
    "mainTemplate",
    "headerPartial",
    "commitPartial",
    "footerPartial",
    "groupBy",
)
_WRITER_SORT_KEYS = ("commitGroupsSort", "noteGroupsSort")
_INTERNAL_KEYS = ("_configDir",)


def _get_repo_root() -> Path:
    """Directory searched for ``.versionrc.json`` when none is given."""
    return Path.cwd()


def merge_settings(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``overrides`` over ``base``.

    Nested objects are merged key by key; every other value (lists
    included) replaces the base value.
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def _check_file_list(key: str, value: Any) -> None:
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list")
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise ConfigError(f"'{key}[{index}]' must be an object")
        if not isinstance(item.get("filename"), str) or not item["filename"]:
            raise ConfigError(f"'{key}[{index}].filename' must be a non-empty string")
        for name, field_value in item.items():
            if not isinstance(field_value, str):
                raise ConfigError(f"'{key}[{index}].{name}' must be a string")


def _check_flag_table(key: str, value: Any, expected_type: type) -> None:
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be an object")
    known = DEFAULT_SETTINGS[key]
    unknown = sorted(set(value) - set(known))
    if unknown:
        raise ConfigError(f"Unknown '{key}' entries: {', '.join(unknown)}")
    for name, field_value in value.items():
        if not isinstance(field_value, expected_type):
            raise ConfigError(f"'{key}.{name}' must be a {expected_type.__name__}")


def _check_writer_opts(value: Any) -> None:
    if not isinstance(value, dict):
        raise ConfigError("'writerOpts' must be an object")
    unknown = sorted(set(value) - set(DEFAULT_SETTINGS["writerOpts"]))
    if unknown:
        raise ConfigError(f"Unknown 'writerOpts' entries: {', '.join(unknown)}")
    for name in _WRITER_STR_KEYS:
        if not isinstance(value.get(name), str) or not value[name]:
            raise ConfigError(f"'writerOpts.{name}' must be a non-empty string")
    for name in _WRITER_SORT_KEYS:
        if value.get(name) not in (None, "title"):
            raise ConfigError(f"'writerOpts.{name}' must be \"title\" or null")
    commits_sort = value.get("commitsSort")
    if not isinstance(commits_sort, list) or not all(isinstance(k, str) for k in commits_sort):
        raise ConfigError("'writerOpts.commitsSort' must be a list of strings")
    if not isinstance(value.get("noteSort"), bool):
        raise ConfigError("'writerOpts.noteSort' must be a boolean")


def validate_config(data: Mapping[str, Any]) -> None:
    """Validate merged settings, raising :class:`ConfigError` on the first problem."""
    unknown = sorted(key for key in data if key not in DEFAULT_SETTINGS and key not in _INTERNAL_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    for key in _BOOL_KEYS:
        if not isinstance(data.get(key), bool):
            raise ConfigError(f"'{key}' must be a boolean")
    for key in _STR_KEYS:
        if not isinstance(data.get(key), str):
            raise ConfigError(f"'{key}' must be a string")

    release_count = data.get("releaseCount")
    if isinstance(release_count, bool) or not isinstance(release_count, int) or release_count < 0:
        raise ConfigError("'releaseCount' must be a non-negative integer")

    prefixes = data.get("issuePrefixes")
    if not isinstance(prefixes, list) or not all(isinstance(p, str) and p for p in prefixes):
        raise ConfigError("'issuePrefixes' must be a list of non-empty strings")

    _check_file_list("packageFiles", data.get("packageFiles"))
    _check_file_list("bumpFiles", data.get("bumpFiles"))
    _check_flag_table("scripts", data.get("scripts"), str)
    _check_flag_table("skip", data.get("skip"), bool)
    _check_writer_opts(data.get("writerOpts"))

    types = data.get("types")
    if not isinstance(types, list) or not types:
        raise ConfigError("'types' must be a non-empty list")
    try:
        TypeTable.from_dicts(types)
    except TypeTableError as exc:
        raise ConfigError(f"Invalid commit types: {exc}") from exc


def build_type_table(config: Mapping[str, Any]) -> TypeTable:
    """Build the :class:`TypeTable` described by ``config['types']``."""
    try:
        return TypeTable.from_dicts(config["types"])
    except (KeyError, TypeTableError) as exc:
        raise ConfigError(f"Invalid commit types: {exc}") from exc


def load_config(config_path: Optional[Path] = None, repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load the release settings and return them merged over the defaults.

    Args:
        config_path: Explicit path to a JSON settings file. It must exist.
        repo_root: Directory holding ``.versionrc.json`` when
                   ``config_path`` is not given. Defaults to the current
                   working directory. A missing file there means the
                   built-in defaults are used.

    Returns:
        A dictionary with every key of ``DEFAULT_SETTINGS`` plus
        ``_configDir``, the directory relative template paths resolve
        against.

    Raises:
        ConfigError: If the file is missing (explicit path only),
                     malformed, or invalid.
    """
    explicit = config_path is not None
    if config_path is None:
        root = repo_root if repo_root is not None else _get_repo_root()
        config_path = Path(root) / CONFIG_FILENAME
    config_path = Path(config_path)

    overrides: Dict[str, Any] = {}
    if not config_path.exists():
        if explicit:
            logger.error("Configuration file '%s' does not exist", config_path)
            raise ConfigError(f"Missing configuration file: {config_path}")
        logger.debug("No %s in %s; using built-in defaults", CONFIG_FILENAME, config_path.parent)
    else:
        try:
            content = config_path.read_text(encoding="utf-8")
            overrides = json.loads(content)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Failed to read or parse configuration file: %s", exc)
            raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc
        if not isinstance(overrides, dict):
            raise ConfigError(f"{config_path.name} must contain a JSON object")

    data = merge_settings(default_settings(), overrides)
    try:
        validate_config(data)
    except ConfigError as exc:
        logger.error("Invalid configuration in %s: %s", config_path, exc)
        raise
    data["_configDir"] = config_path.parent

    logger.debug("Loaded release configuration from: %s", config_path)
    return data
