"""
Token reference resolution.

A reference is a string whose entire content is ``{dot.separated.path}``.
Resolution walks the path through the original token tree; when it lands on
a token, that token's value is resolved again, so chains of any depth
collapse to a literal. Failures are soft: a reference that points nowhere,
or that takes part in a cycle, is returned unchanged and recorded in a
``ResolutionReport``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .ir.tree import TokenGroup, map_leaves, parse_token_tree

logger = logging.getLogger(__name__)

REFERENCE_PATTERN = re.compile(r"^\{(.+)\}$")

# Any {...} occurrence, used only to audit references embedded in strings
_EMBEDDED_REFERENCE = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True)
class UnresolvedReference:
    """A reference that could not be resolved to a literal."""

    reference: str
    token_path: str | None = None
    reason: str = "missing"  # "missing" | "cycle"

    def format(self) -> str:
        location = f" in {self.token_path}" if self.token_path else ""
        if self.reason == "cycle":
            return f"Circular token reference {self.reference}{location}"
        return f"Unresolved token reference {self.reference}{location}"


@dataclass
class ResolutionReport:
    """Collects soft failures from one resolution run."""

    unresolved: list[UnresolvedReference] = field(default_factory=list)

    @property
    def cycles(self) -> list[UnresolvedReference]:
        return [u for u in self.unresolved if u.reason == "cycle"]

    @property
    def missing(self) -> list[UnresolvedReference]:
        return [u for u in self.unresolved if u.reason == "missing"]

    def record(self, reference: str, token_path: str | None, reason: str) -> None:
        entry = UnresolvedReference(reference=reference, token_path=token_path, reason=reason)
        if entry not in self.unresolved:
            self.unresolved.append(entry)

    def as_warnings(self) -> list[str]:
        return [u.format() for u in self.unresolved]


def is_reference(value: Any) -> bool:
    """Return True if value is a whole-string ``{path}`` reference."""
    return isinstance(value, str) and REFERENCE_PATTERN.match(value) is not None


def reference_path(value: str) -> str | None:
    """Extract the dot path from a reference string, or None."""
    match = REFERENCE_PATTERN.match(value)
    return match.group(1) if match else None


def _as_tree(root: TokenGroup | Mapping[str, Any]) -> TokenGroup:
    if isinstance(root, TokenGroup):
        return root
    return parse_token_tree(root)


class _Resolver:
    """One resolution run against a fixed root tree."""

    def __init__(self, root: TokenGroup, report: ResolutionReport | None):
        self.root = root
        self.report = report
        # Path -> scalar literal its chain ended in, for this run only
        self._literals: dict[str, Any] = {}

    def resolve(self, value: Any, token_path: str | None, in_progress: frozenset[str]) -> Any:
        if isinstance(value, list):
            return [self.resolve(item, token_path, in_progress) for item in value]
        if isinstance(value, Mapping):
            return {k: self.resolve(v, token_path, in_progress) for k, v in value.items()}
        path = reference_path(value) if isinstance(value, str) else None
        if path is None:
            return value

        # Follow the chain hop by hop; a failed hop anywhere leaves the
        # whole chain unresolved
        seen = set(in_progress)
        hops: list[str] = []
        current: Any = value
        while path is not None:
            if path in self._literals:
                result = self._literals[path]
                break
            if path in seen:
                logger.debug("Circular reference %s at %s", current, token_path)
                self._record(current, token_path, "cycle")
                return value
            target = self.root.lookup(path)
            if target is None:
                logger.debug("Unresolved reference %s at %s", current, token_path)
                self._record(current, token_path, "missing")
                return value
            seen.add(path)
            if isinstance(target, TokenGroup):
                # Reference to a group: hand back its subtree, itself resolved
                return self.resolve_group(target, token_path, frozenset(seen)).to_raw()
            hops.append(path)
            current = target.value
            path = reference_path(current) if isinstance(current, str) else None
        else:
            if isinstance(current, (list, Mapping)):
                return self.resolve(current, token_path, frozenset(seen))
            result = current

        for hop in hops:
            self._literals[hop] = result
        return result

    def resolve_group(
        self, group: TokenGroup, token_path: str | None, in_progress: frozenset[str]
    ) -> TokenGroup:
        return map_leaves(
            group,
            lambda _, leaf: leaf.with_value(self.resolve(leaf.value, token_path, in_progress)),
        )

    def _record(self, reference: str, token_path: str | None, reason: str) -> None:
        if self.report is not None:
            self.report.record(reference, token_path, reason)


def resolve_value(
    value: Any,
    root: TokenGroup | Mapping[str, Any],
    *,
    report: ResolutionReport | None = None,
    token_path: str | None = None,
) -> Any:
    """
    Resolve a single value against a token tree.

    Args:
        value: Candidate value; only whole-string ``{path}`` references change
        root: Original token tree (raw mapping or parsed TokenGroup)
        report: Optional report collecting unresolved references
        token_path: Path of the token holding ``value``, for reporting

    Returns:
        The literal the reference chain ends in, or ``value`` unchanged when
        it is not a reference or cannot be resolved.
    """
    return _Resolver(_as_tree(root), report).resolve(value, token_path, frozenset())


def resolve_token_tree(
    tree: TokenGroup, *, report: ResolutionReport | None = None
) -> TokenGroup:
    """Return a new tree with every leaf value resolved against ``tree`` itself."""
    resolver = _Resolver(tree, report)
    return map_leaves(
        tree,
        lambda path, leaf: leaf.with_value(
            resolver.resolve(leaf.value, ".".join(path), frozenset())
        ),
    )


def resolve_all_token_references(
    raw_tokens: Mapping[str, Any], *, report: ResolutionReport | None = None
) -> dict[str, Any]:
    """
    Resolve every reference in a raw token document.

    The input is never mutated; references always resolve against the
    original document, never against a partially resolved copy.

    Returns:
        A new raw document (JSON-equivalent) with references replaced
    """
    resolved = resolve_token_tree(parse_token_tree(raw_tokens), report=report)
    if report is not None and report.unresolved:
        logger.debug("%d token reference(s) left unresolved", len(report.unresolved))
    return resolved.to_raw()


def find_invalid_references(raw_tokens: Mapping[str, Any]) -> list[str]:
    """
    Audit every string in the document for references to non-token paths.

    Unlike resolution, this also inspects ``{...}`` occurrences embedded in
    longer strings.

    Returns:
        Human-readable issue messages, one per bad reference occurrence
    """
    tree = parse_token_tree(raw_tokens)
    token_paths = {".".join(path) for path, leaf in tree.iter_leaves() if not leaf.bare}
    issues: list[str] = []

    def scan(value: Any, location: str) -> None:
        if isinstance(value, str):
            for ref in _EMBEDDED_REFERENCE.findall(value):
                if ref not in token_paths:
                    issues.append(f'Invalid reference "{ref}" in {location}')
        elif isinstance(value, list):
            for item in value:
                scan(item, location)
        elif isinstance(value, Mapping):
            for item in value.values():
                scan(item, location)

    for path, leaf in tree.iter_leaves():
        scan(leaf.value, ".".join(path))

    return issues
