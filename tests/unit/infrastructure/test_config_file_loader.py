"""Unit tests for ConfigFileLoader discovery and parsing."""

from pathlib import Path

import pytest

from markup_style_linter.domain.exceptions import ConfigurationError
from markup_style_linter.infrastructure.config_file_loader import ConfigFileLoader


class TestDiscovery:
    def test_defaults_without_config(self, tmp_path: Path) -> None:
        config = ConfigFileLoader.load(cwd=tmp_path)
        assert config.indent_width == 4

    def test_pyproject_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.markup-style]\nindent-width = 2\nignore = ["img-alt"]\n', encoding="utf-8"
        )
        config = ConfigFileLoader.load(cwd=tmp_path)
        assert config.indent_width == 2
        assert config.ignore == ("img-alt",)

    def test_nearest_pyproject_in_parent(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.markup-style]\nquote-style = 'single'\n", encoding="utf-8")
        nested = tmp_path / "web" / "templates"
        nested.mkdir(parents=True)
        assert ConfigFileLoader.load(cwd=nested).quote_style == "single"

    def test_yaml_fallback_when_pyproject_has_no_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
        (tmp_path / ".markup-style.yaml").write_text("max_nesting_depth: 5\n", encoding="utf-8")
        assert ConfigFileLoader.load(cwd=tmp_path).max_nesting_depth == 5

    def test_pyproject_wins_over_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.markup-style]\nmax_nesting_depth = 2\n", encoding="utf-8")
        (tmp_path / ".markup-style.yaml").write_text("max_nesting_depth: 5\n", encoding="utf-8")
        assert ConfigFileLoader.load(cwd=tmp_path).max_nesting_depth == 2


class TestExplicitFile:
    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "style.yml"
        path.write_text("attribute_order: [id, class, other]\n", encoding="utf-8")
        assert ConfigFileLoader.load(str(path)).attribute_order == ("id", "class", "other")

    def test_plain_toml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "style.toml"
        path.write_text("fail_on = 'error'\n", encoding="utf-8")
        assert ConfigFileLoader.load(str(path)).fail_on == "error"

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigFileLoader.load(str(path)).indent_width == 4

    @pytest.mark.parametrize(
        ("name", "content", "fragment"),
        [
            ("bad.yaml", "indent_width: [", "invalid YAML"),
            ("bad.toml", "indent_width = ", "invalid TOML"),
            ("list.yaml", "- a\n- b\n", "must be a mapping"),
            ("style.json", "{}", "unsupported config file type"),
            ("neg.yaml", "indent_width: -2\n", "indent_width"),
        ],
    )
    def test_malformed_files(self, tmp_path: Path, name: str, content: str, fragment: str) -> None:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationError, match=fragment):
            ConfigFileLoader.load(str(path))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigFileLoader.load(str(tmp_path / "nope.yaml"))
