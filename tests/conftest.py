"""Shared pytest fixtures for tokensync tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def flat_tokens() -> dict[str, Any]:
    """A small, valid flat-dialect token document."""
    return {
        "colors": {
            "primary": {
                "100": "#dbeafe",
                "200": "#bfdbfe",
                "300": "#93c5fd",
                "400": "#60a5fa",
                "500": "#3b82f6",
                "600": "#2563eb",
                "700": "#1d4ed8",
                "800": "#1e40af",
                "900": "#1e3a8a",
            },
        },
        "spacing": {
            "0": "0",
            "1": "4px",
            "2": "8px",
            "4": "16px",
            "8": "32px",
            "16": "64px",
        },
        "typography": {
            "fontFamily": {"sans": "Inter, sans-serif", "mono": "Fira Code, monospace"},
            "fontSize": {"sm": "14px", "base": "16px"},
        },
    }


@pytest.fixture
def tiered_tokens() -> dict[str, Any]:
    """A three-tier (core/semantic/component) Token Studio document."""
    return {
        "core": {
            "colors": {
                "primary": {"500": {"value": "#3b82f6", "type": "color"}},
                "gray": {"900": {"value": "#111827", "type": "color"}},
            },
            "spacing": {"sm": {"value": "8px", "type": "spacing"}},
        },
        "semantic": {
            "colors": {
                "brand": {"primary": {"value": "{core.colors.primary.500}", "type": "color"}},
            },
            "text": {"default": {"value": "{core.colors.gray.900}"}},
        },
        "component": {
            "button": {
                "primary": {
                    "backgroundColor": {"value": "{semantic.colors.brand.primary}"},
                    "padding": {"value": "{core.spacing.sm}"},
                },
                "radius": {"value": "4px"},
            },
        },
    }


@pytest.fixture
def token_file(tmp_path: Path, flat_tokens: dict[str, Any]) -> Path:
    """Write the flat document to tokens.json in a temp project."""
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps(flat_tokens), encoding="utf-8")
    return path
