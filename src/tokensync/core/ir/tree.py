"""
Typed token tree.

A raw token document is an untyped JSON tree in which a token is recognised
structurally: any mapping carrying a ``value`` key. ``parse_token_tree``
makes that decision once and produces a tree of ``TokenLeaf`` and
``TokenGroup`` nodes, so later stages never re-infer it.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

# Keys with a meaning of their own on a token leaf
VALUE_KEY = "value"
TYPE_KEY = "type"
DESCRIPTION_KEY = "description"


def is_leaf_mapping(node: Any) -> bool:
    """Return True if a raw node is a token leaf (a mapping with a ``value`` key)."""
    return isinstance(node, Mapping) and VALUE_KEY in node


@dataclass(frozen=True)
class TokenLeaf:
    """
    A single design token.

    Attributes:
        value: Literal value, reference string, or composite (mapping/list)
        type: Optional declared token type ("color", "spacing", ...)
        description: Optional human description
        extensions: Any other keys present on the leaf, kept verbatim
        bare: True when the token was written as a plain scalar instead of
            a ``{"value": ...}`` object
    """

    value: Any
    type: str | None = None
    description: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)
    bare: bool = False

    def with_value(self, value: Any) -> TokenLeaf:
        """Return a copy of this leaf holding a different value."""
        return TokenLeaf(
            value=value,
            type=self.type,
            description=self.description,
            extensions=dict(self.extensions),
            bare=self.bare,
        )

    def to_raw(self) -> Any:
        """Serialize back to the JSON-equivalent form it was parsed from."""
        if self.bare:
            return copy.deepcopy(self.value)
        raw: dict[str, Any] = {VALUE_KEY: copy.deepcopy(self.value)}
        if self.type is not None:
            raw[TYPE_KEY] = self.type
        if self.description is not None:
            raw[DESCRIPTION_KEY] = self.description
        raw.update(copy.deepcopy(self.extensions))
        return raw


@dataclass(frozen=True)
class TokenGroup:
    """An intermediate grouping node: key -> child node, in document order."""

    children: dict[str, TokenNode] = field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return key in self.children

    def get(self, key: str) -> TokenNode | None:
        return self.children.get(key)

    def lookup(self, path: str | tuple[str, ...]) -> TokenNode | None:
        """
        Walk a dot-separated path (or key tuple) down from this group.

        Numeric segments such as ``"500"`` are ordinary keys. Returns None if
        any segment is missing or the walk hits a leaf before the end.
        """
        segments = path.split(".") if isinstance(path, str) else path
        current: TokenNode = self
        for segment in segments:
            if not isinstance(current, TokenGroup):
                return None
            child = current.children.get(segment)
            if child is None:
                return None
            current = child
        return current

    def iter_leaves(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], TokenLeaf]]:
        """Yield ``(path, leaf)`` for every leaf below this group, depth first."""
        stack = [(iter(self.children.items()), prefix)]
        while stack:
            items, path = stack[-1]
            for key, child in items:
                if isinstance(child, TokenLeaf):
                    yield path + (key,), child
                else:
                    stack.append((iter(child.children.items()), path + (key,)))
                    break
            else:
                stack.pop()

    def to_raw(self) -> dict[str, Any]:
        raw: dict[str, Any] = {}
        stack = [(iter(self.children.items()), raw)]
        while stack:
            items, out = stack[-1]
            for key, child in items:
                if isinstance(child, TokenLeaf):
                    out[key] = child.to_raw()
                else:
                    out[key] = {}
                    stack.append((iter(child.children.items()), out[key]))
                    break
            else:
                stack.pop()
        return raw


TokenNode = Union[TokenLeaf, TokenGroup]


def map_leaves(
    group: TokenGroup,
    fn: Callable[[tuple[str, ...], TokenLeaf], TokenLeaf],
    prefix: tuple[str, ...] = (),
) -> TokenGroup:
    """
    Rebuild ``group`` with every leaf replaced by ``fn(path, leaf)``.

    Leaves are visited in document order. Walks with an explicit stack, so
    nesting depth is not bounded by the interpreter's recursion limit.
    """
    root: dict[str, TokenNode] = {}
    stack = [(iter(group.children.items()), prefix, root)]
    while stack:
        items, path, children = stack[-1]
        for key, child in items:
            if isinstance(child, TokenLeaf):
                children[key] = fn(path + (key,), child)
            else:
                sub: dict[str, TokenNode] = {}
                children[key] = TokenGroup(sub)
                stack.append((iter(child.children.items()), path + (key,), sub))
                break
        else:
            stack.pop()
    return TokenGroup(root)


def _parse_leaf(raw: Any) -> TokenLeaf:
    if not is_leaf_mapping(raw):
        return TokenLeaf(value=copy.deepcopy(raw), bare=True)
    extensions = {
        k: copy.deepcopy(v) for k, v in raw.items() if k not in (VALUE_KEY, TYPE_KEY, DESCRIPTION_KEY)
    }
    token_type = raw.get(TYPE_KEY)
    description = raw.get(DESCRIPTION_KEY)
    return TokenLeaf(
        value=copy.deepcopy(raw[VALUE_KEY]),
        type=token_type if isinstance(token_type, str) else None,
        description=description if isinstance(description, str) else None,
        extensions=extensions,
    )


def _parse_group(raw: Mapping[Any, Any]) -> TokenGroup:
    root: dict[str, TokenNode] = {}
    stack = [(iter(raw.items()), root)]
    while stack:
        items, children = stack[-1]
        for key, value in items:
            if isinstance(value, Mapping) and not is_leaf_mapping(value):
                sub: dict[str, TokenNode] = {}
                children[str(key)] = TokenGroup(sub)
                stack.append((iter(value.items()), sub))
                break
            children[str(key)] = _parse_leaf(value)
        else:
            stack.pop()
    return TokenGroup(root)


def parse_token_node(raw: Any) -> TokenNode:
    """Parse one raw node. Non-mapping values become bare leaves."""
    if isinstance(raw, Mapping) and not is_leaf_mapping(raw):
        return _parse_group(raw)
    return _parse_leaf(raw)


def parse_token_tree(raw: Mapping[str, Any]) -> TokenGroup:
    """
    Parse a raw token document into a typed tree.

    A root carrying ``value`` is still treated as a group of its keys.

    Raises:
        TypeError: If the root is not a mapping
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"Token document root must be an object, got {type(raw).__name__}")
    return _parse_group(raw)


def leaf_value(raw: Any) -> Any:
    """Unwrap a raw Token Studio leaf (``{"value": x}`` -> x); pass others through."""
    if is_leaf_mapping(raw):
        return raw[VALUE_KEY]
    return raw
