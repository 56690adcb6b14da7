"""Tests for declaration file loading."""

from pathlib import Path

import pytest

from paddock.declarations import load_declarations, parse_declarations
from paddock.exceptions import DeclarationError
from paddock.records import FeatureRecord


class TestParseDeclarations:
    """Tests for parse_declarations."""

    def test_full_and_shorthand_forms(self) -> None:
        records = parse_declarations(
            {
                "features": {
                    "perimeter_fence": {"enabled": True, "in": ["dev", "test"]},
                    "raptor_cams": {"enabled": False, "in": "prod"},
                    "visitor_center": True,
                    "gift_shop": False,
                }
            }
        )

        assert records == [
            FeatureRecord.build("perimeter_fence", True, ["dev", "test"]),
            FeatureRecord.build("raptor_cams", False, "prod"),
            FeatureRecord.build("visitor_center", True),
            FeatureRecord.build("gift_shop", False),
        ]

    def test_enabled_defaults_to_true(self) -> None:
        (record,) = parse_declarations({"features": {"x": {"in": "dev"}}})
        assert record.enabled is True

    def test_environments_key_is_accepted(self) -> None:
        (record,) = parse_declarations(
            {"features": {"x": {"enabled": True, "environments": ["dev"]}}}
        )
        assert record.environments == frozenset({"dev"})

    def test_empty_environment_list_is_unrestricted(self) -> None:
        (record,) = parse_declarations({"features": {"x": {"in": []}}})
        assert record.environments is None

    def test_none_is_empty(self) -> None:
        assert parse_declarations(None) == []

    def test_missing_features_key_is_empty(self) -> None:
        assert parse_declarations({}) == []

    def test_non_string_names_are_coerced(self) -> None:
        (record,) = parse_declarations({"features": {404: True}})
        assert record.name == "404"

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(DeclarationError, match="must be a mapping"):
            parse_declarations(["x"])

    def test_unknown_top_level_key_rejected(self) -> None:
        with pytest.raises(DeclarationError, match="flags"):
            parse_declarations({"flags": {}})

    def test_unknown_feature_key_rejected(self) -> None:
        with pytest.raises(DeclarationError, match="percentage"):
            parse_declarations({"features": {"x": {"percentage": 10}}})

    def test_blank_environment_rejected(self) -> None:
        with pytest.raises(DeclarationError, match="blank"):
            parse_declarations({"features": {"x": {"in": ["dev", "  "]}}})

    def test_error_carries_path(self) -> None:
        path = Path("features.yaml")
        with pytest.raises(DeclarationError) as exc_info:
            parse_declarations(["x"], path)

        assert exc_info.value.path == path
        assert str(exc_info.value).startswith("features.yaml: ")


class TestLoadDeclarations:
    """Tests for load_declarations."""

    def test_loads_yaml(self, features_yaml: Path) -> None:
        records = load_declarations(features_yaml)
        assert [r.name for r in records] == [
            "perimeter_fence",
            "raptor_cams",
            "visitor_center",
            "gift_shop",
        ]

    def test_loads_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "features.toml"
        path.write_text(
            """\
[features]
visitor_center = true

[features.perimeter_fence]
enabled = true
in = ["development", "test"]

[features.raptor_cams]
enabled = false
in = "production"
""",
            encoding="utf-8",
        )

        records = {r.name: r for r in load_declarations(path)}

        assert records["visitor_center"] == FeatureRecord.build("visitor_center", True)
        assert records["perimeter_fence"].environments == frozenset(
            {"development", "test"}
        )
        assert records["raptor_cams"].enabled is False

    def test_empty_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_declarations(path) == []

    def test_yaml_switch_words_are_feature_names(self, tmp_path: Path) -> None:
        path = tmp_path / "features.yaml"
        path.write_text(
            "features:\n  off: true\n  yes:\n    in: production\n  maintenance: off\n",
            encoding="utf-8",
        )

        records = {r.name: r for r in load_declarations(path)}

        assert set(records) == {"off", "yes", "maintenance"}
        assert records["off"].enabled is True
        assert records["yes"].environments == frozenset({"production"})
        assert records["maintenance"].enabled is False

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_declarations(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("features: [unclosed\n", encoding="utf-8")

        with pytest.raises(DeclarationError, match="Invalid YAML syntax"):
            load_declarations(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[features\n", encoding="utf-8")

        with pytest.raises(DeclarationError, match="Invalid TOML syntax"):
            load_declarations(path)
