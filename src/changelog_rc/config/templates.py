"""
Changelog template loading.

Templates are mustache documents (a subset of Handlebars, so existing
``.hbs`` partials written without helpers keep working). A project keeps
them in ``.changelog-templates/`` next to its ``.versionrc.json``; when
that directory is absent the templates shipped with this package are
used instead.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from changelog_rc.config.defaults import DEFAULT_TEMPLATE_DIR
from changelog_rc.config.loader import ConfigError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


PACKAGED_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

# writerOpts key -> name used by WriterOptions
TEMPLATE_KEYS = {
    "mainTemplate": "main_template",
    "headerPartial": "header_partial",
    "commitPartial": "commit_partial",
    "footerPartial": "footer_partial",
}


def load_template(filename: str, template_dir: Path) -> str:
    """Read ``filename`` from ``template_dir``.

    Raises
    ------
    ConfigError
        If the file does not exist or cannot be read.
    """
    path = Path(template_dir) / filename
    if not path.is_file():
        logger.error("Template file '%s' does not exist", path)
        raise ConfigError(f"Missing template file: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to read template '%s': %s", path, exc)
        raise ConfigError(f"Could not read template {path}: {exc}") from exc


def resolve_template_dir(config: Mapping[str, Any]) -> Path:
    """Work out which directory the writer templates come from.

    A relative ``writerOpts.templateDir`` is resolved against the
    directory of the configuration file. The default directory name
    falls back to the packaged templates when it does not exist; any
    other configured directory must exist.
    """
    writer_opts = config.get("writerOpts", {})
    configured = writer_opts.get("templateDir", DEFAULT_TEMPLATE_DIR)
    base = Path(config.get("_configDir") or Path.cwd())
    template_dir = Path(configured)
    if not template_dir.is_absolute():
        template_dir = base / template_dir

    if template_dir.is_dir():
        return template_dir
    if configured == DEFAULT_TEMPLATE_DIR:
        logger.debug("No %s directory; using packaged templates", DEFAULT_TEMPLATE_DIR)
        return PACKAGED_TEMPLATE_DIR
    logger.error("Template directory '%s' does not exist", template_dir)
    raise ConfigError(f"Missing template directory: {template_dir}")


def load_writer_templates(config: Mapping[str, Any]) -> Dict[str, str]:
    """Load the main template and partials named in ``config['writerOpts']``.

    Returns
    -------
    Dict[str, str]
        ``main_template``, ``header_partial``, ``commit_partial`` and
        ``footer_partial`` mapped to their template text.
    """
    template_dir = resolve_template_dir(config)
    writer_opts = config.get("writerOpts", {})
    templates: Dict[str, str] = {}
    for key, name in TEMPLATE_KEYS.items():
        filename = writer_opts.get(key)
        if not filename:
            raise ConfigError(f"'writerOpts.{key}' is not set")
        templates[name] = load_template(filename, template_dir)
    logger.debug("Loaded changelog templates from: %s", template_dir)
    return templates
