"""
Canonical token category model.

This is the normalized output handed to output generators. Every category
is always present: populated from the input, or filled with its default.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class TypographyTokens(_CamelModel):
    """Typography sub-categories, each flattened to name -> value."""

    font_family: dict[str, Any] = Field(default_factory=dict)
    font_size: dict[str, Any] = Field(default_factory=dict)
    font_weight: dict[str, Any] = Field(default_factory=dict)
    line_height: dict[str, Any] = Field(default_factory=dict)
    letter_spacing: dict[str, Any] = Field(default_factory=dict)


class TransitionTokens(_CamelModel):
    """Transition durations and easing curves."""

    duration: dict[str, Any] = Field(default_factory=dict)
    easing: dict[str, Any] = Field(default_factory=dict)


class TokenCategoryModel(_CamelModel):
    """
    Fully resolved, normalized design tokens.

    Colors keep two levels (category -> shade -> value). Scalar categories
    are flat mappings of dash-joined path -> value. Semantic and component
    tokens keep their nesting because consumers group by them.
    """

    colors: dict[str, dict[str, Any]] = Field(default_factory=dict)
    spacing: dict[str, Any] = Field(default_factory=dict)
    typography: TypographyTokens = Field(default_factory=TypographyTokens)
    border_radius: dict[str, Any] = Field(default_factory=dict)
    sizing: dict[str, Any] = Field(default_factory=dict)
    shadows: dict[str, Any] = Field(default_factory=dict)
    opacity: dict[str, Any] = Field(default_factory=dict)
    z_index: dict[str, Any] = Field(default_factory=dict)
    transitions: TransitionTokens = Field(default_factory=TransitionTokens)
    breakpoints: dict[str, Any] = Field(default_factory=dict)
    semantic: dict[str, Any] = Field(default_factory=dict)
    component: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source: str = "tokens.json"
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Dump with camelCase category names, as generators expect."""
        return self.model_dump(mode="json", by_alias=True)
