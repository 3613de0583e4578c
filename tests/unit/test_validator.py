"""Tests for structural token validation."""

from __future__ import annotations

import pytest

from tokensync.core.config import TokenSyncConfig, ValidationConfig, create_config
from tokensync.core.lint import TokenValidator, validate_tokens
from tokensync.core.validator import (
    count_categories,
    count_tokens,
    find_duplicate_values,
    get_all_token_values,
    is_valid_color,
    is_valid_spacing,
    parse_spacing_value,
    validate_colors,
    validate_naming_consistency,
    validate_optional_categories,
    validate_required_categories,
    validate_scale_consistency,
    validate_spacing,
    validate_structure,
    validate_typography,
    validate_value_consistency,
)


class TestValuePredicates:
    """Single-value checks."""

    @pytest.mark.parametrize(
        "value",
        ["#fff", "#3B82F6", "rgb(0, 0, 0)", "rgba(0,0,0,0.5)", "hsl(210, 50%, 40%)", "red",
         "{colors.primary.500}"],
    )
    def test_valid_colors(self, value):
        assert is_valid_color(value)

    @pytest.mark.parametrize("value", ["#ff", "#12345", "not a color", "", 255, None])
    def test_invalid_colors(self, value):
        assert not is_valid_color(value)

    @pytest.mark.parametrize("value", ["0", "4px", "1.5rem", "100%", "12", 8, 0.5, "{spacing.sm}"])
    def test_valid_spacing(self, value):
        assert is_valid_spacing(value)

    @pytest.mark.parametrize("value", ["auto", "-4px", "px", True, -1, None, [4]])
    def test_invalid_spacing(self, value):
        assert not is_valid_spacing(value)

    @pytest.mark.parametrize(
        ("value", "expected"), [("16px", 16.0), ("1.5rem", 1.5), (8, 8.0), ("auto", None)]
    )
    def test_parse_spacing_value(self, value, expected):
        assert parse_spacing_value(value) == expected


class TestStructure:
    """Root shape and required categories."""

    def test_non_object_root(self):
        assert validate_structure(["colors"]) == (["Tokens must be an object"], [])

    def test_missing_colors(self):
        errors, _ = validate_structure({"spacing": {}})
        assert errors == ["Missing colors category - this is required"]

    def test_null_colors(self):
        errors, _ = validate_structure({"colors": None})
        assert errors == ["Missing colors category - this is required"]

    def test_typo_warning(self):
        _, warnings = validate_structure({"colour": {}, "fonts": {}})
        assert 'Found "colour" - did you mean "colors"?' in warnings
        assert 'Found "fonts" - did you mean "typography"?' in warnings

    def test_typo_ignored_when_canonical_present(self):
        _, warnings = validate_structure({"colors": {}, "spacing": {}, "spacings": {}})
        assert warnings == []

    def test_required_categories(self):
        errors, _ = validate_required_categories({"colors": {}}, ["colors", "spacing"])
        assert "Missing required token category: colors" in errors
        assert "Missing required token category: spacing" in errors

    def test_missing_primary(self):
        errors, _ = validate_required_categories({"colors": {"gray": {"1": "#000"}}}, [])
        assert errors == ["Missing required color category: colors.primary"]

    def test_optional_categories(self):
        _, warnings = validate_optional_categories({"colors": {}}, ["spacing", "typography"])
        assert warnings == [
            "Optional token category not found: spacing",
            "Optional token category not found: typography",
        ]


class TestColors:
    """Color value and shade checks."""

    def test_invalid_color_value(self):
        errors, _ = validate_colors({"colors": {"primary": {"500": "blue-ish!"}}})
        assert errors == ['Invalid color value: colors.primary.500 = "blue-ish!"']

    def test_token_studio_leaf_unwrapped(self):
        errors, _ = validate_colors({"colors": {"primary": {"500": {"value": "#3b82f6"}}}})
        assert errors == []

    def test_single_token_category(self):
        errors, _ = validate_colors({"colors": {"white": {"value": "nope nope"}}})
        assert errors == ['Invalid color value: colors.white = "nope nope"']

    def test_nested_shade_values(self):
        errors, _ = validate_colors({"colors": {"primary": {"hover": {"dark": "##"}}}})
        assert errors == ['Invalid color value: colors.primary.hover.dark = "##"']

    def test_unusual_shade(self):
        _, warnings = validate_colors({"colors": {"primary": {"125": "#000"}}})
        assert any("Unusual shade value: colors.primary.125" in w for w in warnings)

    def test_out_of_range_shade(self):
        _, warnings = validate_colors({"colors": {"primary": {"1000": "#000"}}})
        assert any("Unusual shade value: colors.primary.1000" in w for w in warnings)

    def test_missing_common_shades(self):
        _, warnings = validate_colors({"colors": {"primary": {"500": "#000"}}})
        assert warnings == [
            "Consider adding common shades to colors.primary: "
            "100, 200, 300, 400, 600, 700, 800, 900"
        ]

    def test_named_shades_not_checked_for_coverage(self):
        assert validate_colors({"colors": {"brand": {"main": "#000", "accent": "#fff"}}}) == (
            [],
            [],
        )

    def test_colors_not_an_object(self):
        errors, _ = validate_colors({"colors": "#fff"})
        assert errors == ["Invalid colors category structure: colors must be an object"]


class TestSpacing:
    """Spacing checks."""

    def test_missing_common_keys(self):
        _, warnings = validate_spacing({"spacing": {"0": "0", "1": "4px"}})
        assert warnings == ["Missing common spacing values: 2, 4, 8, 16"]

    def test_invalid_value(self):
        errors, _ = validate_spacing({"spacing": {"sm": "small"}})
        assert errors == ['Invalid spacing value: spacing.sm = "small"']

    def test_numbers_accepted(self):
        errors, _ = validate_spacing({"spacing": {"1": 4, "2": {"value": 8}}})
        assert errors == []

    def test_absent_spacing(self):
        assert validate_spacing({"colors": {}}) == ([], [])


class TestTypography:
    """Typography checks."""

    def test_missing_font_family(self):
        _, warnings = validate_typography({"typography": {"fontSize": {"sm": "12px"}}})
        assert warnings == ["Missing typography category: typography.fontFamily"]

    def test_missing_sans(self):
        errors, _ = validate_typography({"typography": {"fontFamily": {"serif": "Georgia"}}})
        assert errors == ["Missing sans-serif font family (typography.fontFamily.sans)"]

    def test_empty_font_family_value(self):
        errors, _ = validate_typography({"typography": {"fontFamily": {"sans": "  "}}})
        assert errors == ['Invalid font family: typography.fontFamily.sans = "  "']

    def test_invalid_font_size(self):
        errors, _ = validate_typography(
            {"typography": {"fontFamily": {"sans": "Inter"}, "fontSize": {"lg": "large"}}}
        )
        assert errors == ['Invalid font size: typography.fontSize.lg = "large"']


class TestConsistency:
    """Warning-only heuristics."""

    def test_mixed_naming(self):
        _, warnings = validate_naming_consistency(
            {"spacing": {"extra-small": "2px", "extraLarge": "64px"}}
        )
        assert len(warnings) == 1
        assert warnings[0].startswith("Mixed naming conventions detected")

    def test_consistent_naming(self):
        assert validate_naming_consistency({"spacing": {"sm": "2px", "lg": "64px"}}) == ([], [])

    def test_duplicate_values(self):
        tokens = {"colors": {"primary": {"500": "#000"}, "text": {"body": {"value": "#000"}}}}
        _, warnings = validate_value_consistency(tokens)
        assert warnings == ['Duplicate value "#000" found in: colors.primary.500, colors.text.body']

    def test_bool_and_int_not_merged(self):
        values = [("a", True), ("b", 1), ("c", 1)]
        assert find_duplicate_values(values) == [(1, ["b", "c"])]

    def test_all_token_values(self):
        tokens = {"a": {"b": {"value": 1}, "c": 2}}
        assert get_all_token_values(tokens) == [("a.b", 1), ("a.c", 2)]

    def test_consistent_scale(self):
        tokens = {"spacing": {"1": "4px", "2": "8px", "3": "16px", "4": "32px"}}
        assert validate_scale_consistency(tokens) == ([], [])

    def test_erratic_scale(self):
        tokens = {"spacing": {"a": "1px", "b": "2px", "c": "20px", "d": "21px", "e": "200px"}}
        _, warnings = validate_scale_consistency(tokens)
        assert warnings and warnings[0].startswith("Spacing scale appears inconsistent")

    def test_zero_skipped_in_scale(self):
        tokens = {"spacing": {"0": "0", "1": "4px", "2": "8px", "3": "16px"}}
        assert validate_scale_consistency(tokens) == ([], [])


class TestSummary:
    """Counting helpers."""

    def test_counts(self, flat_tokens):
        assert count_categories(flat_tokens) == 3
        assert count_tokens(flat_tokens) == 19

    def test_leaf_counts_once(self):
        assert count_tokens({"colors": {"a": {"value": "#000", "type": "color"}}}) == 1


class TestTokenValidator:
    """Aggregated validation."""

    def test_valid_document(self, flat_tokens):
        result = validate_tokens(flat_tokens)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == [
            'Duplicate value "16px" found in: spacing.4, typography.fontSize.base'
        ]
        assert result.summary.total_categories == 3
        assert result.summary.validated_tokens == 19
        assert result.summary.warning_count == 1

    def test_non_object_root_stops_early(self):
        result = validate_tokens("tokens")
        assert result.errors == ["Tokens must be an object"]
        assert result.summary.validated_tokens == 0

    def test_missing_colors_invalid(self):
        result = validate_tokens({"spacing": {"1": "4px"}})
        assert not result.is_valid
        assert "Missing colors category - this is required" in result.errors
        assert "Missing required token category: colors" in result.errors

    def test_config_sources(self):
        tokens = {"colors": {"primary": {"500": "#000"}}}
        required = create_config({"tokens": {"validation": {"required": ["colors", "sizing"]}}})
        assert "Missing required token category: sizing" in TokenValidator(required).validate(
            tokens
        ).errors
        validator = TokenValidator(ValidationConfig(optional=[]))
        assert not any("Optional" in w for w in validator.validate(tokens).warnings)
        assert TokenValidator(TokenSyncConfig()).config == ValidationConfig()

    def test_to_dict(self, flat_tokens):
        data = validate_tokens(flat_tokens).to_dict()
        assert data["is_valid"] is True
        assert data["summary"]["error_count"] == 0


def test_primary_required_even_when_colors_exist():
    result = validate_tokens({"colors": {"secondary": {"500": "#fff"}}})
    assert not result.is_valid
    assert "Missing required color category: colors.primary" in result.errors
