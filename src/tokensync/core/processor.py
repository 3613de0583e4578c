"""
Token processing pipeline.

raw document -> validation -> reference resolution -> transforms/filters
-> normalization. The processor owns no state across runs beyond the
cached raw document and the last result: every run re-resolves the
document from scratch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from .config import TokenSyncConfig, load_config
from .errors import TokenSourceError, TokenValidationError
from .hooks import HookPhase, PipelineContext, PipelineHooks
from .ir.diagnostics import ValidationDiagnostics
from .ir.model import TokenCategoryModel
from .ir.tree import TokenGroup, parse_token_tree
from .lint import TokenValidator
from .loader import TokenSourceLoader
from .normalizer import normalize_tokens
from .resolver import ResolutionReport, resolve_token_tree
from .transforms import TransformEngine

logger = logging.getLogger(__name__)


@contextmanager
def _nesting_guard() -> Iterator[None]:
    try:
        yield
    except RecursionError as e:
        raise TokenSourceError("Token document is nested too deeply to process") from e


@dataclass(frozen=True)
class ProcessResult:
    """
    Output of one pipeline run.

    Attributes:
        tokens: Normalized model for output generators
        validation: Diagnostics from the raw document
        resolved: Tree after reference resolution
        processed: Tree after transforms and filters
        resolution: Unresolved references found while resolving
        context: Final hook context
    """

    tokens: TokenCategoryModel
    validation: ValidationDiagnostics
    resolved: TokenGroup
    processed: TokenGroup
    resolution: ResolutionReport
    context: PipelineContext


class TokenProcessor:
    """
    Runs the full token pipeline for a configuration.

    Example:
        processor = TokenProcessor(load_config("."))
        result = processor.sync()
        css_input = result.tokens.to_dict()
    """

    def __init__(
        self,
        config: TokenSyncConfig | None = None,
        *,
        hooks: PipelineHooks | None = None,
        engine: TransformEngine | None = None,
        register_common_hooks: bool = True,
    ):
        self.config = config or load_config()
        self.validator = TokenValidator(self.config)
        self.engine = engine or TransformEngine(self.config.platforms)
        self.loader = TokenSourceLoader(self.config.input_path)
        if hooks is None:
            hooks = PipelineHooks()
            if register_common_hooks:
                hooks.register_common_hooks()
        self.hooks = hooks
        self.tokens: TokenCategoryModel | None = None
        self.last_result: ProcessResult | None = None

    # -------------------------------------------------------------------------
    # Pure pipeline
    # -------------------------------------------------------------------------

    def transform_tokens(
        self, raw_tokens: Mapping[str, Any], report: ResolutionReport | None = None
    ) -> tuple[TokenGroup, TokenGroup, TokenCategoryModel]:
        """
        Resolve, transform, filter and normalize a raw document.

        Returns:
            Tuple of (resolved tree, processed tree, normalized model)
        """
        with _nesting_guard():
            resolved = resolve_token_tree(parse_token_tree(raw_tokens), report=report)

            processed = resolved
            pipeline = self.config.pipeline
            if pipeline.transforms is not None:
                processed = self.engine.apply_transforms(processed, pipeline.transforms)
            if pipeline.filters:
                processed = self.engine.apply_filters(processed, pipeline.filters)

            model = normalize_tokens(processed, source=self.config.tokens.input)
        return resolved, processed, model

    def process(self, raw_tokens: Mapping[str, Any], *, force: bool = False) -> ProcessResult:
        """
        Run the pipeline over an in-memory raw document.

        Args:
            raw_tokens: Raw token document (not modified)
            force: Continue even when validation reports errors

        Raises:
            TokenSourceError: The document is not an object or is nested too deeply
            TokenValidationError: Validation failed and ``force`` is False
        """
        if not isinstance(raw_tokens, Mapping):
            raise TokenSourceError(
                f"Token document must be an object, got {type(raw_tokens).__name__}"
            )
        context = PipelineContext(
            raw_tokens=MappingProxyType(dict(raw_tokens)),
            config=self.config,
            options=MappingProxyType({"force": force}),
        )
        context = self.hooks.run(HookPhase.BEFORE_PROCESS, context)
        context = self.hooks.run(HookPhase.BEFORE_VALIDATE, context)

        with _nesting_guard():
            validation = self.validator.validate(context.raw_tokens)

        report = ResolutionReport()
        resolved, processed, model = self.transform_tokens(context.raw_tokens, report)

        if self.config.pipeline.strict_references:
            validation = validation.with_warnings(report.as_warnings())

        if not validation.is_valid and not force:
            for error in validation.errors:
                logger.error(f"Token validation error: {error}")
            raise TokenValidationError("Token validation failed", validation)

        for warning in validation.warnings:
            logger.warning(f"Token warning: {warning}")

        context = replace(context, validation=validation)
        context = self.hooks.run(HookPhase.AFTER_VALIDATE, context)

        context = replace(context, tokens=model)
        context = self.hooks.run(HookPhase.AFTER_PROCESS, context)

        result = ProcessResult(
            tokens=context.tokens or model,
            validation=validation,
            resolved=resolved,
            processed=processed,
            resolution=report,
            context=context,
        )
        self.last_result = result
        self.tokens = result.tokens
        return result

    # -------------------------------------------------------------------------
    # File-backed runs
    # -------------------------------------------------------------------------

    def load_tokens(self, force_reload: bool = False) -> TokenCategoryModel:
        """Load the configured token file and return the normalized model."""
        if self.tokens is not None and not force_reload:
            return self.tokens
        raw = self.loader.load(force_reload=force_reload)
        _, _, self.tokens = self.transform_tokens(raw)
        return self.tokens

    def sync(self, *, force: bool = False) -> ProcessResult:
        """
        Re-read the token file and run the full pipeline.

        Raises:
            TokenSourceError: The token file is missing or malformed
            TokenValidationError: Validation failed and ``force`` is False
        """
        logger.info("Starting token sync...")
        raw = self.loader.load(force_reload=True)
        result = self.process(raw, force=force)
        logger.info("Token sync completed successfully")
        return result

    def create_platform_tokens(self, platform: str) -> TokenGroup:
        """Platform variant of the last resolved tree."""
        if self.last_result is None:
            raise RuntimeError("Tokens not processed. Call sync() or process() first.")
        return self.engine.create_platform_tokens(self.last_result.resolved, platform)

    def refresh(self) -> None:
        """Forget the cached document and result."""
        self.loader.refresh()
        self.tokens = None
        self.last_result = None

    def get_tokens(self) -> TokenCategoryModel:
        if self.tokens is None:
            raise RuntimeError("Tokens not loaded. Call load_tokens() or sync() first.")
        return self.tokens
