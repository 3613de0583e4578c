"""
Token document validation entry point.

Runs every structural check in a fixed order and concatenates the results,
so one pass reports everything that is wrong with a document.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .config import TokenSyncConfig, ValidationConfig
from .ir.diagnostics import ValidationDiagnostics, ValidationSummary
from .validator import (
    count_categories,
    count_tokens,
    validate_colors,
    validate_consistency,
    validate_optional_categories,
    validate_required_categories,
    validate_spacing,
    validate_structure,
    validate_typography,
)

logger = logging.getLogger(__name__)


class TokenValidator:
    """
    Validates raw token documents against a fixed validation config.

    The validator is stateless between calls; its configuration is taken
    once at construction.
    """

    def __init__(self, config: TokenSyncConfig | ValidationConfig | None = None):
        if isinstance(config, TokenSyncConfig):
            config = config.tokens.validation
        self.config = config or ValidationConfig()

    def validate(self, tokens: Any) -> ValidationDiagnostics:
        """
        Validate a raw (pre-resolution) token document.

        Performs:
        - Structure validation (object root, colors present, typos)
        - Required/optional category validation
        - Color, spacing and typography value validation
        - Consistency heuristics (naming, duplicates, spacing scale)

        Args:
            tokens: Raw token document

        Returns:
            ValidationDiagnostics; ``is_valid`` is False when any error exists
        """
        all_errors: list[str] = []
        all_warnings: list[str] = []

        errors, warnings = validate_structure(tokens)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        if not isinstance(tokens, Mapping):
            return self._diagnostics(all_errors, all_warnings, {})

        errors, warnings = validate_required_categories(tokens, self.config.required)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        errors, warnings = validate_optional_categories(tokens, self.config.optional)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        errors, warnings = validate_colors(tokens)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        errors, warnings = validate_spacing(tokens)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        errors, warnings = validate_typography(tokens)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        errors, warnings = validate_consistency(tokens)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        return self._diagnostics(all_errors, all_warnings, tokens)

    def _diagnostics(
        self, errors: list[str], warnings: list[str], tokens: Mapping[str, Any]
    ) -> ValidationDiagnostics:
        logger.debug(f"Validation finished: {len(errors)} error(s), {len(warnings)} warning(s)")
        return ValidationDiagnostics(
            errors=errors,
            warnings=warnings,
            summary=ValidationSummary(
                total_categories=count_categories(tokens),
                validated_tokens=count_tokens(tokens),
                error_count=len(errors),
                warning_count=len(warnings),
            ),
        )


def validate_tokens(
    tokens: Any, config: TokenSyncConfig | ValidationConfig | None = None
) -> ValidationDiagnostics:
    """Validate a raw token document with a one-off validator."""
    return TokenValidator(config).validate(tokens)
