"""Unit tests for StyleConfiguration validation and mapping."""

from dataclasses import replace

import pytest

from markup_style_linter.domain.config import StyleConfiguration
from markup_style_linter.domain.constants import DEFAULT_ATTRIBUTE_ORDER
from markup_style_linter.domain.entities import Severity
from markup_style_linter.domain.exceptions import ConfigurationError


class TestDefaults:
    def test_documented_defaults(self) -> None:
        config = StyleConfiguration()
        assert config.indent_width == 4
        assert config.quote_char == '"'
        assert config.max_nesting_depth == 3
        assert config.attribute_order == DEFAULT_ATTRIBUTE_ORDER
        assert config.fail_on_severity is Severity.WARNING
        assert config.jobs >= 1


class TestValidation:
    @pytest.mark.parametrize(
        ("options", "fragment"),
        [
            ({"indent_width": -2}, "indent_width"),
            ({"indent_width": 0}, "indent_width"),
            ({"indent_width": True}, "indent_width"),
            ({"indent_style": "tabs"}, "indent_style"),
            ({"quote_style": "backtick"}, "quote_style"),
            ({"max_nesting_depth": 0}, "max_nesting_depth"),
            ({"fail_on": "info"}, "fail_on"),
            ({"jobs": 0}, "jobs"),
            ({"attribute_order": ("class", "id")}, "other"),
            ({"attribute_order": ("class", "class", "other")}, "more than once"),
            ({"declaration_order": ("property",)}, "missing"),
        ],
    )
    def test_rejects_malformed_values(self, options: dict, fragment: str) -> None:
        with pytest.raises(ConfigurationError, match=fragment):
            StyleConfiguration(**options)

    def test_rejects_rule_both_selected_and_ignored(self) -> None:
        with pytest.raises(ConfigurationError, match="both selected and ignored"):
            StyleConfiguration(select=("indentation",), ignore=("indentation",))

    def test_replace_revalidates(self) -> None:
        with pytest.raises(ConfigurationError):
            replace(StyleConfiguration(), jobs=-1)


class TestRuleActivation:
    def test_ignore_disables_rule(self) -> None:
        config = StyleConfiguration(ignore=("img-alt",))
        assert not config.is_rule_active("img-alt")
        assert config.is_rule_active("indentation")

    def test_select_limits_rules(self) -> None:
        config = StyleConfiguration(select=("indentation",))
        assert config.is_rule_active("indentation")
        assert not config.is_rule_active("img-alt")


class TestFromMapping:
    def test_empty_mapping_gives_defaults(self) -> None:
        assert StyleConfiguration.from_mapping({}) == StyleConfiguration.from_mapping(None)

    def test_accepts_kebab_case_and_lists(self) -> None:
        config = StyleConfiguration.from_mapping(
            {"indent-width": 2, "quote-style": "single", "ignore": ["img-alt"], "exclude": "vendor/*"}
        )
        assert config.indent_width == 2
        assert config.quote_char == "'"
        assert config.ignore == ("img-alt",)
        assert config.exclude == ("vendor/*",)

    def test_unknown_key_is_an_error(self) -> None:
        with pytest.raises(ConfigurationError, match="indent_widht"):
            StyleConfiguration.from_mapping({"indent_widht": 2})

    def test_non_list_order_is_an_error(self) -> None:
        with pytest.raises(ConfigurationError, match="attribute_order"):
            StyleConfiguration.from_mapping({"attribute_order": 3})
