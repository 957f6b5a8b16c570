"""Tests for layered config parsing and validation."""

import sys
import unittest
from copy import deepcopy
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FuzzyCast.config import SearchProfile, load_config, parse_config_dict


def _base_raw_config() -> dict:
    return {
        "log": {"level": "info", "to_file": False, "dir": "log"},
        "search": {
            "profiles": {
                "users": {"schema": "users", "fields": ["email", " name ", "email", ""]},
                "tags": {"schema": "tags"},
            },
        },
    }


class TestConfigLayering(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertFalse(cfg.runtime.to_file)
        self.assertEqual(
            cfg.search.profiles["users"],
            SearchProfile(name="users", schema="users", fields=("email", "name")),
        )
        self.assertIsNone(cfg.search.profiles["tags"].fields)

    def test_search_section_is_optional(self) -> None:
        raw = _base_raw_config()
        del raw["search"]
        cfg = parse_config_dict(raw)
        self.assertEqual(dict(cfg.search.profiles), {})

    def test_log_section_is_required(self) -> None:
        raw = _base_raw_config()
        del raw["log"]
        with self.assertRaisesRegex(ValueError, "log"):
            parse_config_dict(raw)

    def test_log_level_unknown_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "loud"
        with self.assertRaisesRegex(ValueError, "log\\.level"):
            parse_config_dict(raw)

    def test_log_to_file_type_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["log"]["to_file"] = "yes"
        with self.assertRaisesRegex(TypeError, "log\\.to_file"):
            parse_config_dict(raw)

    def test_log_dir_required_when_writing_files(self) -> None:
        raw = _base_raw_config()
        raw["log"]["to_file"] = True
        raw["log"]["dir"] = "  "
        with self.assertRaisesRegex(ValueError, "log\\.dir"):
            parse_config_dict(raw)

    def test_profile_missing_schema_error_contains_key(self) -> None:
        raw = deepcopy(_base_raw_config())
        del raw["search"]["profiles"]["tags"]["schema"]
        with self.assertRaisesRegex(ValueError, "search\\.profiles\\.tags\\.schema"):
            parse_config_dict(raw)

    def test_profile_fields_type_error_contains_key(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["search"]["profiles"]["users"]["fields"] = "email"
        with self.assertRaisesRegex(TypeError, "search\\.profiles\\.users\\.fields"):
            parse_config_dict(raw)

    def test_profile_empty_fields_after_normalization(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["search"]["profiles"]["users"]["fields"] = ["  "]
        with self.assertRaisesRegex(ValueError, "search\\.profiles\\.users\\.fields"):
            parse_config_dict(raw)

    def test_profile_protected_field_rejected(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["search"]["profiles"]["users"]["fields"] = ["email", "password_hash"]
        with self.assertRaisesRegex(ValueError, "password_hash"):
            parse_config_dict(raw)

    def test_profile_must_be_mapping(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["search"]["profiles"]["users"] = ["email"]
        with self.assertRaisesRegex(TypeError, "search\\.profiles\\.users"):
            parse_config_dict(raw)

    def test_default_config_file_parses(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(dict(cfg.search.profiles), {})


if __name__ == "__main__":
    unittest.main()
