"""Validation diagnostics returned by the token validator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ValidationSummary(BaseModel):
    """Counts describing one validation run."""

    model_config = ConfigDict(frozen=True)

    total_categories: int = Field(default=0, description="Top-level object categories")
    validated_tokens: int = Field(default=0, description="Leaf tokens found in the document")
    error_count: int = 0
    warning_count: int = 0


class ValidationDiagnostics(BaseModel):
    """
    Result of validating a raw token document.

    Errors block a sync unless the caller forces it; warnings never block.
    """

    model_config = ConfigDict(frozen=True)

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def with_warnings(self, extra: list[str]) -> ValidationDiagnostics:
        """Return a copy with additional warnings appended."""
        if not extra:
            return self
        warnings = [*self.warnings, *extra]
        summary = self.summary.model_copy(update={"warning_count": len(warnings)})
        return self.model_copy(update={"warnings": warnings, "summary": summary})

    def to_dict(self) -> dict[str, object]:
        data = self.model_dump(mode="json")
        data["is_valid"] = self.is_valid
        return data
