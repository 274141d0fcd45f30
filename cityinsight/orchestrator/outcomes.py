"""Tagged result of a staged pipeline run.

``InferenceOrchestrator`` dispatches on ``status`` instead of routing
fallbacks through exceptions. Only the fields relevant to a status are set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cityinsight.models.inference_result import InferenceResult
from cityinsight.models.results import (
    ConfidenceResult,
    GuardResult,
    InferenceInsights,
    QualityResult,
    ValidationResult,
)
from cityinsight.models.score_input import ScoreInput
from cityinsight.rules.registry import RuleFiring


class OutcomeStatus(str, Enum):
    COMPLETED = "completed"
    BLOCKED = "blocked"
    LOW_CONFIDENCE = "low_confidence"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineOutcome:
    status: OutcomeStatus
    score_input: Optional[ScoreInput] = None
    result: Optional[InferenceResult] = None
    guard: Optional[GuardResult] = None
    quality: Optional[QualityResult] = None
    insights: Optional[InferenceInsights] = None
    confidence: Optional[ConfidenceResult] = None
    validation: Optional[ValidationResult] = None
    fired_rules: tuple[RuleFiring, ...] = ()
    error: Optional[BaseException] = None

    @classmethod
    def completed(
        cls,
        score_input: ScoreInput,
        result: InferenceResult,
        insights: InferenceInsights,
        quality: QualityResult,
        confidence: ConfidenceResult,
        validation: ValidationResult,
        fired_rules: tuple[RuleFiring, ...],
    ) -> PipelineOutcome:
        return cls(
            status=OutcomeStatus.COMPLETED,
            score_input=score_input,
            result=result,
            insights=insights,
            quality=quality,
            confidence=confidence,
            validation=validation,
            fired_rules=fired_rules,
        )

    @classmethod
    def blocked(cls, score_input: ScoreInput, guard: GuardResult, quality: QualityResult) -> PipelineOutcome:
        return cls(status=OutcomeStatus.BLOCKED, score_input=score_input, guard=guard, quality=quality)

    @classmethod
    def low_confidence(
        cls,
        score_input: ScoreInput,
        insights: InferenceInsights,
        confidence: ConfidenceResult,
    ) -> PipelineOutcome:
        return cls(
            status=OutcomeStatus.LOW_CONFIDENCE,
            score_input=score_input,
            insights=insights,
            confidence=confidence,
        )

    @classmethod
    def failed(cls, score_input: Optional[ScoreInput], error: BaseException) -> PipelineOutcome:
        return cls(status=OutcomeStatus.FAILED, score_input=score_input, error=error)
