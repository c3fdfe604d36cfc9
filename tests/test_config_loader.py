import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from changelog_rc.config.defaults import DEFAULT_SETTINGS
from changelog_rc.config.loader import (
    ConfigError,
    build_type_table,
    load_config,
    merge_settings,
    validate_config,
)


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def test_defaults_without_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with patch("changelog_rc.config.loader._get_repo_root", return_value=Path(tmp)):
                result = load_config()
        self.assertEqual(result["tagPrefix"], "v")
        self.assertEqual(result["infile"], "CHANGELOG.md")
        self.assertEqual(result["types"], DEFAULT_SETTINGS["types"])
        self.assertEqual(result["_configDir"], Path(tmp))

    def test_overrides_merged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            overrides = {
                "tagPrefix": "release-",
                "skip": {"tag": True},
                "writerOpts": {"commitsSort": ["subject"]},
            }
            (root / ".versionrc.json").write_text(json.dumps(overrides))
            result = load_config(repo_root=root)
        self.assertEqual(result["tagPrefix"], "release-")
        self.assertEqual(result["skip"], {"bump": False, "changelog": False, "commit": False, "tag": True})
        self.assertEqual(result["writerOpts"]["commitsSort"], ["subject"])
        self.assertEqual(result["writerOpts"]["groupBy"], "type")

    def test_explicit_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "release.json"
            path.write_text(json.dumps({"releaseCount": 0}))
            result = load_config(path)
        self.assertEqual(result["releaseCount"], 0)
        self.assertEqual(result["_configDir"], Path(tmp))

    def test_explicit_path_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError) as ctx:
                load_config(Path(tmp) / "missing.json")
        self.assertIn("Missing configuration file", str(ctx.exception))

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".versionrc.json").write_text("{invalid}")
            with self.assertRaises(ConfigError) as ctx:
                load_config(repo_root=root)
        self.assertIn("Invalid JSON", str(ctx.exception))

    def test_invalid_utf8(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".versionrc.json").write_bytes(b'{"tagPrefix": "\xff"}')
            with self.assertRaises(ConfigError):
                load_config(repo_root=root)

    def test_non_object_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".versionrc.json").write_text("[]")
            with self.assertRaises(ConfigError):
                load_config(repo_root=root)

    def test_custom_types(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            types = [
                {"type": "feat", "section": "Features"},
                {"type": "chore", "section": "Chores", "hidden": True},
            ]
            (root / ".versionrc.json").write_text(json.dumps({"types": types}))
            result = load_config(repo_root=root)
        table = build_type_table(result)
        self.assertEqual(table.section_for("feat"), "Features")
        self.assertTrue(table.is_hidden("chore"))
        self.assertIsNone(table.section_for("fix"))


class TestValidateConfig(unittest.TestCase):
    """Type checks on merged settings."""

    def _settings(self, **overrides):
        return merge_settings(DEFAULT_SETTINGS, overrides)

    def test_defaults_are_valid(self) -> None:
        validate_config(DEFAULT_SETTINGS)

    def test_invalid_values(self) -> None:
        cases = [
            {"unknownKey": 1},
            {"_tagPrefix": "x"},
            {"sign": "no"},
            {"tagPrefix": 1},
            {"releaseCount": -1},
            {"releaseCount": True},
            {"issuePrefixes": "#"},
            {"issuePrefixes": [""]},
            {"bumpFiles": [{"type": "plain-text"}]},
            {"packageFiles": "package.json"},
            {"scripts": {"postbump": "echo"}},
            {"scripts": {"prebump": 1}},
            {"skip": {"tag": "yes"}},
            {"writerOpts": {"groupBy": ""}},
            {"writerOpts": {"commitsSort": "subject"}},
            {"writerOpts": {"noteSort": "no"}},
            {"writerOpts": {"noteGroupsSort": "text"}},
            {"writerOpts": {"transform": "x"}},
            {"types": []},
            {"types": [{"type": "feat", "section": "Added"}, {"type": "feat", "section": "New"}]},
        ]
        for overrides in cases:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ConfigError):
                    validate_config(self._settings(**overrides))

    def test_null_group_sort_allowed(self) -> None:
        validate_config(self._settings(writerOpts={"commitGroupsSort": None, "noteGroupsSort": None}))

    def test_private_keys_allowed(self) -> None:
        validate_config(self._settings(_configDir="/tmp"))


class TestMergeSettings(unittest.TestCase):
    def test_nested_objects_merge_and_lists_replace(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": [1, 2], "c": "keep"}
        merged = merge_settings(base, {"a": {"y": 3}, "b": [9]})
        self.assertEqual(merged, {"a": {"x": 1, "y": 3}, "b": [9], "c": "keep"})
        self.assertEqual(base["a"], {"x": 1, "y": 2})


if __name__ == "__main__":
    unittest.main()
