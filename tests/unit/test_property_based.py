"""
Property-based tests using Hypothesis.

These tests verify invariants of resolution, normalization and validation
across generated token documents.
"""

from __future__ import annotations

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from tokensync.core.lint import validate_tokens
from tokensync.core.normalizer import normalize_tokens
from tokensync.core.resolver import is_reference, resolve_all_token_references

TOKEN_NAMES = [f"t{i}" for i in range(8)]

literals = st.text(alphabet="abcdef#0123456789px ", min_size=1, max_size=8).filter(
    lambda s: not is_reference(s)
)

# Each token holds a literal or a reference to any name, existing or not
reference_graphs = st.dictionaries(
    keys=st.sampled_from(TOKEN_NAMES),
    values=st.one_of(literals, st.sampled_from(TOKEN_NAMES + ["missing"]).map(lambda n: f"{{{n}}}")),
    min_size=1,
    max_size=len(TOKEN_NAMES),
)

json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=12),
)
json_documents = st.dictionaries(
    keys=st.text(max_size=8),
    values=st.recursive(
        json_scalars,
        lambda children: st.one_of(
            st.lists(children, max_size=3),
            st.dictionaries(st.text(max_size=8), children, max_size=4),
        ),
        max_leaves=20,
    ),
    max_size=6,
)


def _follow(graph: dict[str, str], name: str) -> str:
    """Reference chain oracle: the literal a token ends in, else its own value."""
    seen = set()
    current = name
    while True:
        value = graph[current]
        if not is_reference(value):
            return value
        target = value[1:-1]
        if target in seen or target not in graph:
            return graph[name]
        seen.add(current)
        current = target


def _as_document(graph: dict[str, str]) -> dict:
    return {name: {"value": value} for name, value in graph.items()}


class TestResolverProperties:
    """Invariants of reference resolution."""

    @given(reference_graphs)
    @settings(max_examples=200)
    def test_resolution_matches_chain_walk(self, graph: dict[str, str]) -> None:
        """Invariant: every token resolves to its chain's literal, or keeps its reference."""
        resolved = resolve_all_token_references(_as_document(graph))
        for name in graph:
            assert resolved[name]["value"] == _follow(graph, name)

    @given(reference_graphs)
    @settings(max_examples=200)
    def test_resolution_is_idempotent(self, graph: dict[str, str]) -> None:
        """Invariant: resolving an already resolved document changes nothing."""
        once = resolve_all_token_references(_as_document(graph))
        assert resolve_all_token_references(once) == once

    @given(reference_graphs)
    @settings(max_examples=100)
    def test_input_never_mutated(self, graph: dict[str, str]) -> None:
        document = _as_document(graph)
        resolve_all_token_references(document)
        assert document == _as_document(graph)


class TestPipelineRobustness:
    """Arbitrary JSON never crashes validation or normalization."""

    @given(json_documents)
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_validate_never_raises(self, document: dict) -> None:
        result = validate_tokens(document)
        assert result.summary.error_count == len(result.errors)
        assert result.is_valid == (not result.errors)

    @given(json_documents)
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_normalize_never_raises(self, document: dict) -> None:
        model = normalize_tokens(resolve_all_token_references(document))
        for shades in model.colors.values():
            assert isinstance(shades, dict)
