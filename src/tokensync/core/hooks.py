"""
Pipeline-stage hooks.

Hooks are plain callables registered against a phase. Each receives the
current ``PipelineContext`` and may return a replacement (contexts are
immutable; use ``dataclasses.replace``). Returning None keeps the context.
Hooks run strictly in registration order; a hook that raises is logged
and skipped so the remaining hooks still run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .resolver import find_invalid_references

if TYPE_CHECKING:
    from .config import TokenSyncConfig
    from .ir.diagnostics import ValidationDiagnostics
    from .ir.model import TokenCategoryModel

logger = logging.getLogger(__name__)

PROCESSOR_VERSION = "1"


class HookPhase(StrEnum):
    """Points in the pipeline where hooks run."""

    BEFORE_PROCESS = "before_process"
    BEFORE_VALIDATE = "before_validate"
    AFTER_VALIDATE = "after_validate"
    AFTER_PROCESS = "after_process"


@dataclass(frozen=True)
class PipelineContext:
    """Immutable state handed from hook to hook."""

    raw_tokens: Mapping[str, Any]
    config: TokenSyncConfig | None = None
    options: Mapping[str, Any] = field(default_factory=dict)
    validation: ValidationDiagnostics | None = None
    tokens: TokenCategoryModel | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def with_metadata(self, **values: Any) -> PipelineContext:
        return replace(self, metadata=MappingProxyType({**self.metadata, **values}))


Hook = Callable[[PipelineContext], "PipelineContext | None"]


class PipelineHooks:
    """Ordered hook lists per phase."""

    def __init__(self) -> None:
        self.hooks: dict[HookPhase, list[Hook]] = {phase: [] for phase in HookPhase}

    def register(self, phase: HookPhase | str, hook: Hook) -> None:
        """Register a hook; unknown phase names are ignored with a warning."""
        try:
            key = HookPhase(phase)
        except ValueError:
            logger.warning(f"Unknown hook phase '{phase}' ignored")
            return
        self.hooks[key].append(hook)

    def run(self, phase: HookPhase | str, context: PipelineContext) -> PipelineContext:
        """Run every hook for a phase and return the final context."""
        for hook in self.hooks.get(HookPhase(phase), []):
            try:
                result = hook(context)
            except Exception:
                logger.exception(f"Hook {getattr(hook, '__name__', hook)!r} failed in {phase}")
                continue
            if result is not None:
                context = result
        return context

    def register_common_hooks(self) -> None:
        """Register the reference audit and processing metadata hooks."""
        self.register(HookPhase.BEFORE_VALIDATE, check_references_hook)
        self.register(HookPhase.AFTER_PROCESS, processing_metadata_hook)


# =============================================================================
# Common hooks
# =============================================================================


def check_references_hook(context: PipelineContext) -> PipelineContext:
    """Log references that point at no token, including embedded ones."""
    issues = find_invalid_references(context.raw_tokens)
    if issues:
        logger.warning(f"Token reference issues found: {'; '.join(issues)}")
    return context.with_metadata(reference_issues=tuple(issues))


def processing_metadata_hook(context: PipelineContext) -> PipelineContext:
    """Stamp the context with processing time and processor version."""
    return context.with_metadata(
        processed_at=datetime.now(UTC).isoformat(),
        version=PROCESSOR_VERSION,
    )
