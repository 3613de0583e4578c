"""
Structural validation checks for raw token documents.

Each check inspects the raw (pre-resolution) document and returns a tuple
of (errors, warnings). Checks never raise for data-quality problems and
never depend on one another; ``lint.TokenValidator`` runs them all.

Reference strings (``{path}``) are accepted wherever a value is checked:
whether they resolve is the resolver's concern, not structural validity.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from .ir.tree import is_leaf_mapping, leaf_value
from .resolver import is_reference

# =============================================================================
# Validation Constants
# =============================================================================

# Misspelled top-level category -> canonical name
COMMON_TYPOS: dict[str, str] = {
    "colour": "colors",
    "spacings": "spacing",
    "typo": "typography",
    "fonts": "typography",
}

REQUIRED_COLOR_CATEGORIES = ("primary",)

COMMON_SHADES = ("100", "200", "300", "400", "500", "600", "700", "800", "900")
SHADE_MIN = 50
SHADE_MAX = 950
SHADE_STEP = 50

COMMON_SPACING_KEYS = ("0", "1", "2", "4", "8", "16")

# Spacing scale heuristic: a ratio "deviates" beyond this distance from the
# mean ratio, and the scale is flagged when more than this share deviates
SCALE_RATIO_TOLERANCE = 0.5
SCALE_DEVIATION_SHARE = 0.3

_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
_RGB_COLOR = re.compile(r"^rgba?\([\d\s,./]+\)$", re.IGNORECASE)
_HSL_COLOR = re.compile(r"^hsla?\([\d\s,%./]+\)$", re.IGNORECASE)
_NAMED_COLOR = re.compile(r"^[a-z]+$", re.IGNORECASE)
_DIMENSION = re.compile(r"^[\d.]+([a-z%]+)?$", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^([\d.]+)")
_NUMERIC_SHADE = re.compile(r"^\d+$")
_CAMEL_CASE = re.compile(r"[a-z][A-Z]")


# =============================================================================
# Value predicates
# =============================================================================


def is_valid_color(value: Any) -> bool:
    """Hex (3/6 digit), rgb()/rgba(), hsl()/hsla(), a color name, or a reference."""
    if not isinstance(value, str):
        return False
    return bool(
        _HEX_COLOR.match(value)
        or _RGB_COLOR.match(value)
        or _HSL_COLOR.match(value)
        or _NAMED_COLOR.match(value)
        or is_reference(value)
    )


def is_valid_spacing(value: Any) -> bool:
    """A number with an optional unit, ``"0"``, a plain JSON number, or a reference."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value >= 0
    if not isinstance(value, str):
        return False
    return bool(value == "0" or _DIMENSION.match(value) or is_reference(value))


def is_valid_size(value: Any) -> bool:
    return is_valid_spacing(value)


def is_numeric_shade(shade: str) -> bool:
    return _NUMERIC_SHADE.match(shade) is not None


def parse_spacing_value(value: Any) -> float | None:
    """Leading numeric magnitude of a spacing value, ignoring its unit."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_NUMBER.match(value)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def _is_empty(node: Any) -> bool:
    if node is None or node is False or node == "":
        return True
    if isinstance(node, (Mapping, list)):
        return len(node) == 0
    return False


def _iter_values(node: Mapping[str, Any], prefix: str) -> Iterator[tuple[str, Any]]:
    """Yield (dotted path, unwrapped value) for each token below ``node``."""
    for key, value in node.items():
        path = f"{prefix}.{key}"
        if isinstance(value, Mapping) and not is_leaf_mapping(value):
            yield from _iter_values(value, path)
        else:
            yield path, leaf_value(value)


def _format_value(value: Any) -> str:
    return f'"{value}"'


# =============================================================================
# Checks
# =============================================================================


def validate_structure(tokens: Any) -> tuple[list[str], list[str]]:
    """
    Validate the document's basic shape.

    Checks:
    - Root is an object
    - ``colors`` exists
    - Common category misspellings (only when the canonical key is absent)

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(tokens, Mapping):
        errors.append("Tokens must be an object")
        return errors, warnings

    if tokens.get("colors") is None:
        errors.append("Missing colors category - this is required")

    for typo, correct in COMMON_TYPOS.items():
        if typo in tokens and correct not in tokens:
            warnings.append(f'Found "{typo}" - did you mean "{correct}"?')

    return errors, warnings


def validate_required_categories(
    tokens: Mapping[str, Any], required: list[str]
) -> tuple[list[str], list[str]]:
    """
    Validate configured required categories and ``colors.primary``.

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []

    for category in required:
        if _is_empty(tokens.get(category)):
            errors.append(f"Missing required token category: {category}")

    colors = tokens.get("colors")
    if isinstance(colors, Mapping):
        for color_category in REQUIRED_COLOR_CATEGORIES:
            if _is_empty(colors.get(color_category)):
                errors.append(f"Missing required color category: colors.{color_category}")

    return errors, []


def validate_optional_categories(
    tokens: Mapping[str, Any], optional: list[str]
) -> tuple[list[str], list[str]]:
    """Warn about configured optional categories that are absent."""
    warnings = [
        f"Optional token category not found: {category}"
        for category in optional
        if category not in tokens or tokens[category] is None
    ]
    return [], warnings


def validate_colors(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """
    Validate color values and shade naming.

    Checks:
    - Every value under colors.<category> is a valid color or reference
    - Numeric shades lie in 50..950 on a step of 50 (warning)
    - Categories using numeric shades cover 100..900 (warning)

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    colors = tokens.get("colors")
    if not isinstance(colors, Mapping):
        if colors is not None:
            errors.append("Invalid colors category structure: colors must be an object")
        return errors, warnings

    for category, shades in colors.items():
        if is_leaf_mapping(shades):
            value = leaf_value(shades)
            if not is_valid_color(value):
                errors.append(f"Invalid color value: colors.{category} = {_format_value(value)}")
            continue
        if not isinstance(shades, Mapping):
            errors.append(f"Invalid color category structure: colors.{category}")
            continue

        for shade, raw in shades.items():
            shade = str(shade)
            if isinstance(raw, Mapping) and not is_leaf_mapping(raw):
                for path, value in _iter_values(raw, f"colors.{category}.{shade}"):
                    if not is_valid_color(value):
                        errors.append(f"Invalid color value: {path} = {_format_value(value)}")
            else:
                value = leaf_value(raw)
                if not is_valid_color(value):
                    errors.append(
                        f"Invalid color value: colors.{category}.{shade} = {_format_value(value)}"
                    )

            if is_numeric_shade(shade):
                shade_num = int(shade)
                if shade_num < SHADE_MIN or shade_num > SHADE_MAX or shade_num % SHADE_STEP != 0:
                    warnings.append(
                        f"Unusual shade value: colors.{category}.{shade} "
                        f"(consider using 50, 100, 200... 900, 950)"
                    )

        shade_keys = [str(s) for s in shades]
        if any(is_numeric_shade(s) for s in shade_keys):
            missing = [s for s in COMMON_SHADES if s not in shade_keys]
            if missing:
                warnings.append(
                    f"Consider adding common shades to colors.{category}: {', '.join(missing)}"
                )

    return errors, warnings


def validate_spacing(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """
    Validate spacing values.

    Checks:
    - Common increments 0, 1, 2, 4, 8, 16 are present (warning)
    - Every value is numeric with an optional unit, "0", or a reference

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    spacing = tokens.get("spacing")
    if spacing is None:
        return errors, warnings
    if not isinstance(spacing, Mapping):
        errors.append("Invalid spacing category structure: spacing must be an object")
        return errors, warnings

    keys = {str(k) for k in spacing}
    missing = [k for k in COMMON_SPACING_KEYS if k not in keys]
    if missing:
        warnings.append(f"Missing common spacing values: {', '.join(missing)}")

    for path, value in _iter_values(spacing, "spacing"):
        if not is_valid_spacing(value):
            errors.append(f"Invalid spacing value: {path} = {_format_value(value)}")

    return errors, warnings


def validate_typography(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """
    Validate typography.

    Checks:
    - fontFamily sub-category exists (warning)
    - fontFamily.sans exists (error, when fontFamily is present)
    - font families are non-empty strings
    - font sizes pass the spacing value check

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    typography = tokens.get("typography")
    if typography is None:
        return errors, warnings
    if not isinstance(typography, Mapping):
        errors.append("Invalid typography category structure: typography must be an object")
        return errors, warnings

    font_family = typography.get("fontFamily")
    if font_family is None:
        warnings.append("Missing typography category: typography.fontFamily")
    elif isinstance(font_family, Mapping):
        if "sans" not in font_family:
            errors.append("Missing sans-serif font family (typography.fontFamily.sans)")
        for path, value in _iter_values(font_family, "typography.fontFamily"):
            if not isinstance(value, str) or not value.strip():
                errors.append(f"Invalid font family: {path} = {_format_value(value)}")
    else:
        errors.append("Invalid typography category structure: typography.fontFamily")

    font_size = typography.get("fontSize")
    if isinstance(font_size, Mapping):
        for path, value in _iter_values(font_size, "typography.fontSize"):
            if not is_valid_size(value):
                errors.append(f"Invalid font size: {path} = {_format_value(value)}")

    return errors, warnings


# -----------------------------------------------------------------------------
# Cross-token consistency (warnings only)
# -----------------------------------------------------------------------------


def get_all_token_keys(tokens: Mapping[str, Any]) -> list[str]:
    """Every key in the document, not descending into token leaves."""
    keys: list[str] = []

    def extract(node: Mapping[str, Any]) -> None:
        for key, value in node.items():
            keys.append(str(key))
            if isinstance(value, Mapping) and not is_leaf_mapping(value):
                extract(value)

    extract(tokens)
    return keys


def get_all_token_values(tokens: Mapping[str, Any]) -> list[tuple[str, Any]]:
    """(dotted path, value) for every token leaf and direct scalar."""
    values: list[tuple[str, Any]] = []

    def extract(node: Mapping[str, Any], prefix: str) -> None:
        for key, value in node.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if is_leaf_mapping(value):
                values.append((path, value["value"]))
            elif isinstance(value, Mapping):
                extract(value, path)
            else:
                values.append((path, value))

    extract(tokens, "")
    return values


def find_duplicate_values(values: list[tuple[str, Any]]) -> list[tuple[Any, list[str]]]:
    """Group paths sharing the same scalar value; only groups of 2+ are returned."""
    groups: dict[tuple[bool, Any], list[str]] = {}
    originals: dict[tuple[bool, Any], Any] = {}
    for path, value in values:
        if isinstance(value, (Mapping, list)):
            continue
        # Keep True distinct from 1
        key = (isinstance(value, bool), value)
        groups.setdefault(key, []).append(path)
        originals.setdefault(key, value)
    return [(originals[key], paths) for key, paths in groups.items() if len(paths) > 1]


def validate_naming_consistency(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """Warn once when kebab-case, camelCase and snake_case keys are mixed."""
    keys = get_all_token_keys(tokens)
    has_kebab = any("-" in key for key in keys)
    has_camel = any(_CAMEL_CASE.search(key) for key in keys)
    has_snake = any("_" in key for key in keys)

    if sum((has_kebab, has_camel, has_snake)) > 1:
        return [], [
            "Mixed naming conventions detected. Consider using consistent naming "
            "(kebab-case, camelCase, or snake_case)"
        ]
    return [], []


def validate_value_consistency(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """Warn once per group of token paths sharing a literal value."""
    warnings = [
        f'Duplicate value "{value}" found in: {", ".join(paths)}'
        for value, paths in find_duplicate_values(get_all_token_values(tokens))
    ]
    return [], warnings


def validate_scale_consistency(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """
    Flag spacing scales whose successive ratios are erratic.

    Magnitudes are sorted; zero magnitudes are skipped since they have no
    ratio. The scale is flagged when more than 30% of ratios sit more than
    0.5 away from the mean ratio.
    """
    spacing = tokens.get("spacing")
    if not isinstance(spacing, Mapping):
        return [], []

    magnitudes = sorted(
        m
        for m in (parse_spacing_value(leaf_value(v)) for v in spacing.values())
        if m is not None and m > 0
    )
    if len(magnitudes) <= 2:
        return [], []

    ratios = [magnitudes[i] / magnitudes[i - 1] for i in range(1, len(magnitudes))]
    mean_ratio = sum(ratios) / len(ratios)
    deviating = [r for r in ratios if abs(r - mean_ratio) > SCALE_RATIO_TOLERANCE]

    if len(deviating) > len(ratios) * SCALE_DEVIATION_SHARE:
        return [], [
            "Spacing scale appears inconsistent. Consider using a consistent ratio or modular scale"
        ]
    return [], []


def validate_consistency(tokens: Mapping[str, Any]) -> tuple[list[str], list[str]]:
    """Naming, duplicate-value and scale checks. Produces warnings only."""
    warnings: list[str] = []
    for check in (
        validate_naming_consistency,
        validate_value_consistency,
        validate_scale_consistency,
    ):
        _, check_warnings = check(tokens)
        warnings.extend(check_warnings)
    return [], warnings


# =============================================================================
# Summary counts
# =============================================================================


def count_categories(tokens: Mapping[str, Any]) -> int:
    return sum(1 for value in tokens.values() if isinstance(value, (Mapping, list)))


def count_tokens(tokens: Mapping[str, Any]) -> int:
    """Token Studio leaves count once; nested direct scalars count once each."""

    def count_in(node: Mapping[str, Any]) -> int:
        count = 0
        for value in node.values():
            if isinstance(value, Mapping) and not is_leaf_mapping(value):
                count += count_in(value)
            else:
                count += 1
        return count

    return sum(count_in(category) for category in tokens.values() if isinstance(category, Mapping))
