"""
Structural normalization of resolved token trees.

Token documents arrive in several dialects: flat (``colors``, ``spacing``),
three-tier (``core.*``, ``semantic.*``, ``component.*``), singular ``color``,
and Token Studio exports with ``{"value": ...}`` leaves and a ``text``
typography group. Each category is located through a priority-ordered list
of aliases and reshaped into the canonical ``TokenCategoryModel``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .ir.model import TokenCategoryModel, TransitionTokens, TypographyTokens
from .ir.tree import TokenGroup, TokenLeaf, TokenNode, map_leaves, parse_token_tree

logger = logging.getLogger(__name__)

# =============================================================================
# Aliases
# =============================================================================

# Canonical category -> dot paths tried in order; the first present wins
CATEGORY_ALIASES: dict[str, tuple[str, ...]] = {
    "spacing": ("core.spacing", "spacing"),
    "sizing": ("core.sizing", "sizing"),
    "borderRadius": ("core.borderRadius", "borderRadius", "radius"),
    "shadows": ("core.shadows", "shadows"),
    "opacity": ("core.opacity", "opacity"),
    "zIndex": ("core.zIndex", "zIndex"),
    "breakpoints": ("core.breakpoints", "breakpoints"),
    "transitionDuration": (
        "core.transitionDuration",
        "transitionDuration",
        "transitions.duration",
    ),
    "transitionEasing": ("core.transitionEasing", "transitionEasing", "transitions.easing"),
    "typography": ("core.typography", "typography", "text"),
}

TYPOGRAPHY_FIELDS = ("fontFamily", "fontSize", "fontWeight", "lineHeight", "letterSpacing")

# Token Studio ``text`` group sub-keys -> canonical typography field
TOKEN_STUDIO_TYPOGRAPHY_KEYS: dict[str, str] = {
    "font family": "fontFamily",
    "font-size": "fontSize",
    "font weight": "fontWeight",
    "font line height": "lineHeight",
    "letter spacing": "letterSpacing",
}

# =============================================================================
# Defaults (applied only when a category is absent from the input)
# =============================================================================

DEFAULT_FONT_FAMILY: dict[str, str] = {
    "sans": "Inter, system-ui, sans-serif",
    "mono": "Fira Code, monospace",
}

DEFAULT_BORDER_RADIUS: dict[str, str] = {
    "none": "0",
    "sm": "0.125rem",
    "base": "0.25rem",
    "md": "0.375rem",
    "lg": "0.5rem",
    "xl": "0.75rem",
    "full": "9999px",
}

DEFAULT_SHADOWS: dict[str, str] = {
    "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
    "md": "0 4px 6px -1px rgb(0 0 0 / 0.1)",
    "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1)",
    "xl": "0 20px 25px -5px rgb(0 0 0 / 0.1)",
}

DEFAULT_OPACITY: dict[str, str] = {
    "0": "0",
    "25": "0.25",
    "50": "0.5",
    "75": "0.75",
    "100": "1",
}

DEFAULT_Z_INDEX: dict[str, int] = {
    "auto": 0,
    "base": 1,
    "dropdown": 1000,
    "modal": 1040,
    "popover": 1050,
    "tooltip": 1060,
}

DEFAULT_TRANSITION_DURATION: dict[str, str] = {
    "fast": "150ms",
    "normal": "300ms",
    "slow": "500ms",
}

DEFAULT_TRANSITION_EASING: dict[str, str] = {
    "linear": "linear",
    "ease": "ease",
    "ease-in": "ease-in",
    "ease-out": "ease-out",
    "ease-in-out": "ease-in-out",
}

DEFAULT_BREAKPOINTS: dict[str, str] = {
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
    "2xl": "1536px",
}

# Key used when a color category is a single token rather than a shade map
DEFAULT_SHADE_KEY = "DEFAULT"


# =============================================================================
# Tree helpers
# =============================================================================


def _as_tree(tokens: TokenGroup | Mapping[str, Any]) -> TokenGroup:
    if isinstance(tokens, TokenGroup):
        return tokens
    return parse_token_tree(tokens)


def locate_category(tree: TokenGroup, category: str) -> TokenNode | None:
    """Find a category's subtree using its alias list."""
    for alias in CATEGORY_ALIASES.get(category, (category,)):
        node = tree.lookup(alias)
        if node is not None:
            return node
    return None


def flatten_category(node: TokenNode, prefix: str = "") -> dict[str, Any]:
    """
    Flatten a subtree into a single level keyed by dash-joined paths.

    Groups are descended into; leaves (including bare scalars and lists)
    contribute their value.
    """
    if isinstance(node, TokenLeaf):
        return {prefix: node.value} if prefix else {}
    head = (prefix,) if prefix else ()
    return {"-".join(path): leaf.value for path, leaf in node.iter_leaves(head)}


def collapse_leaves(node: TokenNode) -> Any:
    """Replace every leaf by its value, keeping the grouping structure."""
    if isinstance(node, TokenLeaf):
        return node.value
    return map_leaves(node, lambda _, leaf: TokenLeaf(value=leaf.value, bare=True)).to_raw()


def preserve_color_structure(node: TokenNode) -> dict[str, dict[str, Any]]:
    """
    Shape a color subtree into exactly two levels: category -> shade -> value.

    Anything nested deeper than a shade is dash-joined into the shade key; a
    category that is itself a single token is stored under ``DEFAULT``.
    """
    if not isinstance(node, TokenGroup):
        return {}

    structured: dict[str, dict[str, Any]] = {}
    for category, shades in node.children.items():
        if isinstance(shades, TokenLeaf):
            structured[category] = {DEFAULT_SHADE_KEY: shades.value}
        else:
            structured[category] = flatten_category(shades)
    return structured


def _category_or_default(tree: TokenGroup, category: str, default: Mapping[str, Any]) -> dict[str, Any]:
    node = locate_category(tree, category)
    if node is None:
        return dict(default)
    return flatten_category(node)


# =============================================================================
# Extractors
# =============================================================================


def extract_colors(tree: TokenGroup) -> dict[str, dict[str, Any]]:
    """
    Extract colors.

    ``core.colors`` and ``semantic.colors`` are merged (semantic wins per
    category); otherwise ``color`` then ``colors`` are tried.
    """
    core_colors = tree.lookup("core.colors")
    semantic_colors = tree.lookup("semantic.colors")

    colors: dict[str, dict[str, Any]] = {}
    if core_colors is not None or semantic_colors is not None:
        if core_colors is not None:
            colors.update(preserve_color_structure(core_colors))
        if semantic_colors is not None:
            colors.update(preserve_color_structure(semantic_colors))
    elif (singular := tree.get("color")) is not None:
        colors.update(preserve_color_structure(singular))
    elif (plural := tree.get("colors")) is not None:
        colors.update(preserve_color_structure(plural))
    return colors


def extract_spacing(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "spacing", {})


def extract_sizing(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "sizing", {})


def extract_typography(tree: TokenGroup) -> TypographyTokens:
    """
    Extract typography, mapping Token Studio ``text`` sub-keys when that
    dialect is the one found.
    """
    fields: dict[str, dict[str, Any]] = {name: {} for name in TYPOGRAPHY_FIELDS}
    found: set[str] = set()

    source_alias = None
    typography_node: TokenNode | None = None
    for alias in CATEGORY_ALIASES["typography"]:
        typography_node = tree.lookup(alias)
        if typography_node is not None:
            source_alias = alias
            break

    if isinstance(typography_node, TokenGroup):
        if source_alias == "text":
            for studio_key, field_name in TOKEN_STUDIO_TYPOGRAPHY_KEYS.items():
                sub = typography_node.get(studio_key)
                if sub is not None:
                    fields[field_name] = flatten_category(sub)
                    found.add(field_name)
        else:
            for field_name in TYPOGRAPHY_FIELDS:
                sub = typography_node.get(field_name)
                if sub is not None:
                    fields[field_name] = flatten_category(sub)
                    found.add(field_name)

    if "fontFamily" not in found:
        fields["fontFamily"] = dict(DEFAULT_FONT_FAMILY)

    return TypographyTokens.model_validate(fields)


def extract_border_radius(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "borderRadius", DEFAULT_BORDER_RADIUS)


def extract_shadows(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "shadows", DEFAULT_SHADOWS)


def extract_opacity(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "opacity", DEFAULT_OPACITY)


def extract_z_index(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "zIndex", DEFAULT_Z_INDEX)


def extract_transitions(tree: TokenGroup) -> TransitionTokens:
    return TransitionTokens(
        duration=_category_or_default(tree, "transitionDuration", DEFAULT_TRANSITION_DURATION),
        easing=_category_or_default(tree, "transitionEasing", DEFAULT_TRANSITION_EASING),
    )


def extract_breakpoints(tree: TokenGroup) -> dict[str, Any]:
    return _category_or_default(tree, "breakpoints", DEFAULT_BREAKPOINTS)


def extract_semantic_tokens(tree: TokenGroup) -> dict[str, Any]:
    """Semantic tier: category -> nested subtree of values."""
    semantic = tree.get("semantic")
    if not isinstance(semantic, TokenGroup):
        return {}
    return {category: collapse_leaves(node) for category, node in semantic.children.items()}


def extract_component_tokens(tree: TokenGroup) -> dict[str, Any]:
    """Component tier: component -> property -> value or nested variant map."""
    component = tree.get("component")
    if not isinstance(component, TokenGroup):
        return {}

    components: dict[str, Any] = {}
    for name, node in component.children.items():
        if isinstance(node, TokenLeaf):
            logger.debug("Component token %s is a single value, not a property map", name)
            components[name] = node.value
        else:
            components[name] = {prop: collapse_leaves(child) for prop, child in node.children.items()}
    return components


# =============================================================================
# Entry point
# =============================================================================


def normalize_tokens(
    tokens: TokenGroup | Mapping[str, Any],
    *,
    source: str = "tokens.json",
) -> TokenCategoryModel:
    """
    Normalize a resolved token tree into the canonical category model.

    Args:
        tokens: Resolved tree (raw mapping or parsed TokenGroup)
        source: Name of the token source, kept as metadata

    Returns:
        TokenCategoryModel with every category present
    """
    tree = _as_tree(tokens)
    return TokenCategoryModel(
        colors=extract_colors(tree),
        spacing=extract_spacing(tree),
        typography=extract_typography(tree),
        border_radius=extract_border_radius(tree),
        sizing=extract_sizing(tree),
        shadows=extract_shadows(tree),
        opacity=extract_opacity(tree),
        z_index=extract_z_index(tree),
        transitions=extract_transitions(tree),
        breakpoints=extract_breakpoints(tree),
        semantic=extract_semantic_tokens(tree),
        component=extract_component_tokens(tree),
        source=source,
    )
