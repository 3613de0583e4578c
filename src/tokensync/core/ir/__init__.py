"""
tokensync intermediate representation.

- tree: typed token tree (TokenLeaf | TokenGroup)
- model: normalized TokenCategoryModel
- diagnostics: validation results
"""

from .diagnostics import ValidationDiagnostics, ValidationSummary
from .model import TokenCategoryModel, TransitionTokens, TypographyTokens
from .tree import (
    TokenGroup,
    TokenLeaf,
    TokenNode,
    is_leaf_mapping,
    leaf_value,
    map_leaves,
    parse_token_node,
    parse_token_tree,
)

__all__ = [
    # Tree
    "TokenGroup",
    "TokenLeaf",
    "TokenNode",
    "is_leaf_mapping",
    "leaf_value",
    "map_leaves",
    "parse_token_node",
    "parse_token_tree",
    # Model
    "TokenCategoryModel",
    "TransitionTokens",
    "TypographyTokens",
    # Diagnostics
    "ValidationDiagnostics",
    "ValidationSummary",
]
