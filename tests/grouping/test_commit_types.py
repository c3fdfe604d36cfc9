"""Tests for the commit type table."""

import unittest

from changelog_rc.grouping.commit_types import (
    DEFAULT_COMMIT_TYPES,
    DEFAULT_TYPE_TABLE,
    CommitType,
    TypeTable,
    TypeTableError,
)


class TestDefaultTypeTable(unittest.TestCase):
    """The built-in Keep a Changelog mapping."""

    def test_sections(self):
        expected = {
            "feat": "Added",
            "fix": "Fixed",
            "perf": "Changed",
            "docs": "Documentation",
            "revert": "Reverted",
            "security": "Security",
            "deprecate": "Deprecated",
            "remove": "Removed",
            "refactor": "Changed",
            "style": "Changed",
            "test": "Changed",
            "build": "Changed",
            "ci": "Changed",
            "chore": "Changed",
        }
        self.assertEqual(dict(DEFAULT_TYPE_TABLE.sections), expected)

    def test_hidden_types(self):
        self.assertEqual(
            DEFAULT_TYPE_TABLE.hidden,
            frozenset({"refactor", "style", "test", "build", "ci", "chore"}),
        )

    def test_hidden_types_are_mapped(self):
        for commit_type in DEFAULT_TYPE_TABLE.hidden:
            with self.subTest(type=commit_type):
                self.assertIn(commit_type, DEFAULT_TYPE_TABLE)

    def test_declarative_list_matches_lookups(self):
        for item in DEFAULT_TYPE_TABLE.as_dicts():
            with self.subTest(type=item["type"]):
                self.assertEqual(DEFAULT_TYPE_TABLE.section_for(item["type"]), item["section"])
                self.assertEqual(DEFAULT_TYPE_TABLE.is_hidden(item["type"]), item["hidden"])

    def test_as_dicts_preserves_order(self):
        self.assertEqual(
            [item["type"] for item in DEFAULT_TYPE_TABLE.as_dicts()],
            [entry.type for entry in DEFAULT_COMMIT_TYPES],
        )

    def test_visible_sections(self):
        self.assertEqual(
            DEFAULT_TYPE_TABLE.visible_sections(),
            ["Added", "Fixed", "Changed", "Documentation", "Reverted", "Security", "Deprecated", "Removed"],
        )

    def test_sections_are_read_only(self):
        with self.assertRaises(TypeError):
            DEFAULT_TYPE_TABLE.sections["feat"] = "New"  # type: ignore[index]

    def test_lookups_tolerate_odd_types(self):
        self.assertIsNone(DEFAULT_TYPE_TABLE.section_for(None))
        self.assertIsNone(DEFAULT_TYPE_TABLE.section_for(["feat"]))  # type: ignore[arg-type]
        self.assertFalse(DEFAULT_TYPE_TABLE.is_hidden(None))
        self.assertFalse(DEFAULT_TYPE_TABLE.is_hidden(["chore"]))  # type: ignore[arg-type]
        self.assertNotIn(None, DEFAULT_TYPE_TABLE)


class TestTypeTableValidation(unittest.TestCase):
    """Inconsistent tables are rejected when built."""

    def test_hidden_type_without_section(self):
        with self.assertRaises(TypeTableError) as ctx:
            TypeTable({"feat": "Added"}, hidden=["chore"])
        self.assertIn("chore", str(ctx.exception))

    def test_duplicate_type(self):
        with self.assertRaises(TypeTableError):
            TypeTable.from_entries([CommitType("feat", "Added"), CommitType("feat", "New")])

    def test_empty_section(self):
        with self.assertRaises(TypeTableError):
            TypeTable.from_entries([CommitType("feat", "")])

    def test_non_string_type(self):
        with self.assertRaises(TypeTableError):
            TypeTable.from_dicts([{"type": 1, "section": "Added"}])

    def test_non_bool_hidden(self):
        with self.assertRaises(TypeTableError):
            TypeTable.from_dicts([{"type": "chore", "section": "Changed", "hidden": "yes"}])

    def test_from_dicts_requires_keys(self):
        with self.assertRaises(TypeTableError):
            TypeTable.from_dicts([{"type": "feat"}])

    def test_from_dicts_rejects_non_objects(self):
        with self.assertRaises(TypeTableError):
            TypeTable.from_dicts(["feat"])  # type: ignore[list-item]

    def test_from_dicts_hidden_defaults_to_false(self):
        table = TypeTable.from_dicts([{"type": "feat", "section": "Features"}])
        self.assertFalse(table.is_hidden("feat"))
        self.assertEqual(table.section_for("feat"), "Features")
        self.assertEqual(len(table), 1)

    def test_table_from_mapping_builds_entries(self):
        table = TypeTable({"feat": "Added", "chore": "Changed"}, hidden=["chore"])
        self.assertEqual(
            table.as_dicts(),
            [
                {"type": "feat", "section": "Added", "hidden": False},
                {"type": "chore", "section": "Changed", "hidden": True},
            ],
        )


if __name__ == "__main__":
    unittest.main()
