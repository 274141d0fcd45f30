"""Deterministic, rule-based city insight inference."""

from cityinsight.models.inference_result import InferenceResult
from cityinsight.models.score_input import ScoreInput, build_score_input
from cityinsight.orchestrator.pipeline import InferenceOrchestrator

__version__ = "1.0.0"

__all__ = ["InferenceOrchestrator", "InferenceResult", "ScoreInput", "build_score_input"]
