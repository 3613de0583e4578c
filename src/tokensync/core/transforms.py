"""
Token transforms and filters.

A transform is a named, conditionally applied function over one token: a
*value* transform rewrites the token's value, a *name* transform rewrites
the key it is stored under. A filter is a named predicate over the same
token shape. Both operate copy-on-write: every call returns a new tree.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .errors import TransformError
from .ir.tree import TokenGroup, TokenLeaf, TokenNode, parse_token_tree
from .resolver import is_reference

logger = logging.getLogger(__name__)

REM_BASE_PX = 16.0

DEFAULT_TRANSFORMS: tuple[str, ...] = ("color/hex", "size/rem", "name/kebab")

PLATFORM_TRANSFORMS: dict[str, tuple[str, ...]] = {
    "web": ("color/hex", "size/rem"),
    "ios": ("color/hex", "size/rem"),
    "android": ("color/hex", "size/rem"),
    "react": ("color/hex", "size/rem"),
    "flutter": ("color/hex", "size/rem"),
}

SIZE_TYPES = frozenset({"spacing", "sizing", "borderRadius", "dimension"})

# Top-level category -> token type, used when a leaf declares no type
CATEGORY_TYPES: dict[str, str] = {
    "colors": "color",
    "color": "color",
    "spacing": "spacing",
    "sizing": "sizing",
    "borderRadius": "borderRadius",
    "radius": "borderRadius",
    "typography": "typography",
    "text": "typography",
    "shadows": "boxShadow",
    "opacity": "opacity",
    "zIndex": "zIndex",
}

_SHORT_HEX = re.compile(r"^#([0-9a-fA-F]{3,4})$")
_RGBA = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([\d.]+)\s*\)$", re.IGNORECASE
)
_PX_VALUE = re.compile(r"^(-?\d*\.?\d+)px$")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


class TransformKind(StrEnum):
    """What a transform rewrites."""

    VALUE = "value"
    NAME = "name"


@dataclass(frozen=True)
class Token:
    """
    Per-leaf view handed to matchers, transformers and filters.

    Attributes:
        name: Key the leaf is stored under
        value: Current (possibly already transformed) value
        type: Declared type, or one inferred from the top-level category
        path: Full key path from the root
    """

    name: str
    value: Any
    type: str | None
    path: tuple[str, ...]

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


Matcher = Callable[[Token], bool]
Transformer = Callable[[Token], Any]
TokenFilter = Callable[[Token], bool]


@dataclass(frozen=True)
class Transform:
    """A registered transform. ``matcher=None`` means it always fires."""

    name: str
    kind: TransformKind
    transformer: Transformer
    matcher: Matcher | None = None

    def matches(self, token: Token) -> bool:
        return self.matcher is None or self.matcher(token)


def infer_token_type(path: Sequence[str], declared: str | None = None) -> str | None:
    """Return the declared type, else one inferred from the path's categories."""
    if declared:
        return declared
    for segment in path[:2]:
        if segment in CATEGORY_TYPES:
            return CATEGORY_TYPES[segment]
    return None


# =============================================================================
# Built-in transformers
# =============================================================================


def normalize_hex_color(token: Token) -> Any:
    """Expand short hex (``#abc``/``#abcd``) to long form; other notations pass through."""
    value = token.value
    if not isinstance(value, str):
        return value
    match = _SHORT_HEX.match(value)
    if match:
        return "#" + "".join(ch * 2 for ch in match.group(1)).lower()
    if value.startswith("#"):
        return value.lower()
    return value


def rgba_to_hex_alpha(token: Token) -> Any:
    """Convert ``rgba(r, g, b, a)`` to ``#rrggbbaa``."""
    if not isinstance(token.value, str):
        return token.value
    match = _RGBA.match(token.value.strip())
    if not match:
        return token.value
    r, g, b = (min(int(c), 255) for c in match.group(1, 2, 3))
    alpha = max(0.0, min(float(match.group(4)), 1.0))
    return f"#{r:02x}{g:02x}{b:02x}{round(alpha * 255):02x}"


def _format_number(number: float) -> str:
    text = f"{number:.10f}".rstrip("0").rstrip(".")
    return text or "0"


def px_to_rem(token: Token) -> Any:
    """Convert ``Npx`` to rem at a 16px base; anything else is unchanged."""
    value = token.value
    if not isinstance(value, str):
        return value
    match = _PX_VALUE.match(value.strip())
    if not match:
        return value
    return f"{_format_number(float(match.group(1)) / REM_BASE_PX)}rem"


def typography_shorthand(token: Token) -> Any:
    """Fold a structured typography value into ``weight size/lineHeight family``."""
    value = token.value
    if not isinstance(value, Mapping) or "fontSize" not in value:
        return value
    size = str(value["fontSize"])
    if value.get("lineHeight") is not None:
        size = f"{size}/{value['lineHeight']}"
    parts = [str(value["fontWeight"])] if value.get("fontWeight") is not None else []
    parts.append(size)
    if value.get("fontFamily") is not None:
        parts.append(str(value["fontFamily"]))
    return " ".join(parts)


def kebab_case_name(token: Token) -> str:
    """camelCase -> kebab-case."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", token.name).lower()


BUILTIN_TRANSFORMS: tuple[Transform, ...] = (
    Transform(
        name="color/hex",
        kind=TransformKind.VALUE,
        matcher=lambda t: t.type == "color",
        transformer=normalize_hex_color,
    ),
    Transform(
        name="color/hexAlpha",
        kind=TransformKind.VALUE,
        matcher=lambda t: t.type == "color" and isinstance(t.value, str) and "rgba" in t.value,
        transformer=rgba_to_hex_alpha,
    ),
    Transform(
        name="size/rem",
        kind=TransformKind.VALUE,
        matcher=lambda t: t.type in SIZE_TYPES,
        transformer=px_to_rem,
    ),
    Transform(
        name="typography/css/shorthand",
        kind=TransformKind.VALUE,
        matcher=lambda t: t.type == "typography",
        transformer=typography_shorthand,
    ),
    Transform(
        name="name/kebab",
        kind=TransformKind.NAME,
        transformer=kebab_case_name,
    ),
)

BUILTIN_FILTERS: dict[str, TokenFilter] = {
    "type/color": lambda t: t.type == "color",
    "type/size": lambda t: t.type in SIZE_TYPES,
    "type/typography": lambda t: t.type == "typography",
    "value/resolved": lambda t: not is_reference(t.value),
}


# =============================================================================
# Engine
# =============================================================================


def _as_tree(tokens: TokenGroup | Mapping[str, Any]) -> TokenGroup:
    if isinstance(tokens, TokenGroup):
        return tokens
    return parse_token_tree(tokens)


def _make_token(path: tuple[str, ...], leaf: TokenLeaf) -> Token:
    return Token(
        name=path[-1],
        value=leaf.value,
        type=infer_token_type(path, leaf.type),
        path=path,
    )


class TransformEngine:
    """
    Registry of named transforms and filters plus the tree walks applying them.

    Example:
        engine = TransformEngine()
        web_tokens = engine.create_platform_tokens(resolved, "web")
    """

    def __init__(self, platform_transforms: Mapping[str, Sequence[str]] | None = None):
        self.transforms: dict[str, Transform] = {t.name: t for t in BUILTIN_TRANSFORMS}
        self.filters: dict[str, TokenFilter] = dict(BUILTIN_FILTERS)
        self.platform_transforms: dict[str, tuple[str, ...]] = dict(PLATFORM_TRANSFORMS)
        if platform_transforms:
            for platform, names in platform_transforms.items():
                self.platform_transforms[platform] = tuple(names)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_transform(
        self,
        name: str,
        transformer: Transformer,
        *,
        kind: TransformKind | str = TransformKind.VALUE,
        matcher: Matcher | None = None,
    ) -> Transform:
        """Register (or replace) a named transform."""
        if not name:
            raise TransformError("Transform name must not be empty")
        try:
            transform_kind = TransformKind(kind)
        except ValueError as e:
            raise TransformError(f"Unknown transform kind '{kind}' for '{name}'") from e
        transform = Transform(name=name, kind=transform_kind, transformer=transformer, matcher=matcher)
        self.transforms[name] = transform
        return transform

    def register_filter(self, name: str, predicate: TokenFilter) -> None:
        """Register (or replace) a named filter."""
        if not name:
            raise TransformError("Filter name must not be empty")
        self.filters[name] = predicate

    def _lookup_transforms(self, names: Sequence[str]) -> list[Transform]:
        found = []
        for name in names:
            transform = self.transforms.get(name)
            if transform is None:
                logger.warning(f"Unknown transform '{name}' skipped")
                continue
            found.append(transform)
        return found

    def _lookup_filters(self, names: Sequence[str]) -> list[TokenFilter]:
        found = []
        for name in names:
            predicate = self.filters.get(name)
            if predicate is None:
                logger.warning(f"Unknown filter '{name}' skipped")
                continue
            found.append(predicate)
        return found

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------

    def transform_token(self, token: Token, transforms: Sequence[Transform]) -> Token:
        """Run transforms over one token, in order; each sees the previous result."""
        for transform in transforms:
            if not transform.matches(token):
                continue
            result = transform.transformer(token)
            if transform.kind is TransformKind.NAME:
                token = Token(name=str(result), value=token.value, type=token.type, path=token.path)
            else:
                token = Token(name=token.name, value=result, type=token.type, path=token.path)
        return token

    def apply_transforms(
        self,
        tokens: TokenGroup | Mapping[str, Any],
        transform_names: Sequence[str] | None = None,
    ) -> TokenGroup:
        """
        Apply named transforms to every leaf.

        Args:
            tokens: Token tree (raw mapping or TokenGroup); not modified
            transform_names: Transforms in application order. An empty or
                missing list means ``DEFAULT_TRANSFORMS``.

        Returns:
            New tree with transformed values and, for name transforms,
            renamed leaf keys
        """
        names = list(transform_names) if transform_names else list(DEFAULT_TRANSFORMS)
        transforms = self._lookup_transforms(names)

        def walk(group: TokenGroup, prefix: tuple[str, ...]) -> TokenGroup:
            children: dict[str, TokenNode] = {}
            for key, child in group.children.items():
                path = prefix + (key,)
                if isinstance(child, TokenGroup):
                    children[key] = walk(child, path)
                    continue
                token = self.transform_token(_make_token(path, child), transforms)
                if token.name in children:
                    logger.warning(
                        f"Token {'.'.join(path)} collides with '{token.name}'; "
                        f"later token wins"
                    )
                children[token.name] = child.with_value(token.value)
            return TokenGroup(children)

        return walk(_as_tree(tokens), ())

    def apply_filters(
        self,
        tokens: TokenGroup | Mapping[str, Any],
        filter_names: Sequence[str] | None = None,
    ) -> TokenGroup:
        """
        Keep only leaves passing every named filter (AND semantics).

        Surviving branches keep their nesting; branches left empty are pruned.
        No filter names returns the tree unchanged.
        """
        tree = _as_tree(tokens)
        if not filter_names:
            return tree
        predicates = self._lookup_filters(filter_names)

        def walk(group: TokenGroup, prefix: tuple[str, ...]) -> TokenGroup | None:
            children: dict[str, TokenNode] = {}
            for key, child in group.children.items():
                path = prefix + (key,)
                if isinstance(child, TokenGroup):
                    kept = walk(child, path)
                    if kept is not None:
                        children[key] = kept
                    continue
                token = _make_token(path, child)
                if all(predicate(token) for predicate in predicates):
                    children[key] = child
            return TokenGroup(children) if children else None

        return walk(tree, ()) or TokenGroup()

    def create_platform_tokens(
        self, tokens: TokenGroup | Mapping[str, Any], platform: str
    ) -> TokenGroup:
        """Apply a platform's transform list; unknown platforms get no transforms."""
        names = self.platform_transforms.get(platform)
        if not names:
            logger.debug(f"No transforms registered for platform '{platform}'")
            return _as_tree(tokens)
        return self.apply_transforms(tokens, names)

    def compose_tokens(
        self,
        base: TokenGroup | Mapping[str, Any],
        override: TokenGroup | Mapping[str, Any],
    ) -> TokenGroup:
        """Deep-merge ``override`` over ``base``; leaves in ``override`` win."""

        def merge(left: TokenGroup, right: TokenGroup) -> TokenGroup:
            children = dict(left.children)
            for key, child in right.children.items():
                existing = children.get(key)
                if isinstance(existing, TokenGroup) and isinstance(child, TokenGroup):
                    children[key] = merge(existing, child)
                else:
                    children[key] = child
            return TokenGroup(children)

        return merge(_as_tree(base), _as_tree(override))
