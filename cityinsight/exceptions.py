"""Exceptions raised inside the insight pipeline.

None of these escape ``InferenceOrchestrator.run_inference``; the orchestrator
converts them into a safe fallback result.
"""

from __future__ import annotations

from typing import Any, Optional


class CityInsightError(Exception):
    """Base exception for all cityinsight errors."""

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}


class ConfigurationError(CityInsightError):
    """Threshold configuration could not be loaded or failed validation."""

    def __init__(self, message: str, *, config_path: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.config_path = config_path

    def __str__(self) -> str:
        if self.config_path:
            return f"[{self.config_path}] {self.message}"
        return self.message


class InferenceError(CityInsightError):
    """A pipeline stage was handed input it cannot work with."""
