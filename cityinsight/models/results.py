"""Immutable intermediate results passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cityinsight.models.enums import ConfidenceLevel, FallbackReason, FallbackTier
from cityinsight.models.inference_result import InferenceResult


@dataclass(frozen=True)
class QualityResult:
    """Completeness and structural issues found in a score input."""

    sufficient: bool
    completeness: float
    issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def summary(self) -> str:
        if self.sufficient:
            return "Data quality: %.1f%% complete, %d warnings" % (
                self.completeness,
                len(self.warnings),
            )
        return "Insufficient data: %.1f%% complete, %d issues, %d warnings" % (
            self.completeness,
            len(self.issues),
            len(self.warnings),
        )


@dataclass(frozen=True)
class GuardResult:
    """Pre-inference gate decision."""

    proceed: bool
    completeness: float
    blockers: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    guidance: str = ""

    def summary(self) -> str:
        return "%s - Completeness: %.1f%%, Blockers: %d, Recommendations: %d" % (
            "PASS" if self.proceed else "FAIL",
            self.completeness,
            len(self.blockers),
            len(self.recommendations),
        )


@dataclass(frozen=True)
class InferenceInsights:
    personality: str
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    best_suited_for: tuple[str, ...]

    def summary(self) -> str:
        return "Insights: %d strengths, %d weaknesses, %d audience segments" % (
            len(self.strengths),
            len(self.weaknesses),
            len(self.best_suited_for),
        )


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    @property
    def message(self) -> str:
        """Text recorded in the audit trail."""
        return "All validations passed" if self.valid else (self.error or "")


@dataclass(frozen=True)
class ConfidenceBreakdown:
    """The three 0-100 components of the confidence score."""

    data_completeness: float
    pattern_reliability: float
    inference_strength: float

    def weakest(self) -> str:
        components = self.as_dict()
        return min(components, key=components.__getitem__)

    def as_dict(self) -> dict[str, float]:
        return {
            "data_completeness": self.data_completeness,
            "pattern_reliability": self.pattern_reliability,
            "inference_strength": self.inference_strength,
        }


@dataclass(frozen=True)
class ConfidenceResult:
    overall: float
    level: ConfidenceLevel
    reasoning: str
    breakdown: ConfidenceBreakdown

    @property
    def normalized(self) -> float:
        """Overall confidence rescaled to 0-1."""
        return self.overall / 100.0

    def summary(self) -> str:
        return "Confidence: %s (%.1f%%) - Data: %.1f%%, Pattern: %.1f%%, Inference: %.1f%%" % (
            self.level.value,
            self.overall,
            self.breakdown.data_completeness,
            self.breakdown.pattern_reliability,
            self.breakdown.inference_strength,
        )


@dataclass(frozen=True)
class FallbackResponse:
    """Degraded but always well-formed response from the fallback service."""

    tier: FallbackTier
    reason: FallbackReason
    personality: str
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    best_suited_for: tuple[str, ...]
    confidence: float
    user_message: str
    entity_slug: str = ""
    entity_name: str = ""
    caveats: tuple[str, ...] = ()
    data_availability: dict[str, str] = field(default_factory=dict)

    def summary(self) -> str:
        return "Fallback Tier %d (%s): %.0f%% confidence, %d caveats" % (
            self.tier.value,
            self.reason.value,
            self.confidence,
            len(self.caveats),
        )

    def to_inference_result(self, pipeline_version: str = "fallback-1.0") -> InferenceResult:
        """Convert into the standard result shape callers consume."""
        return InferenceResult(
            entity_slug=self.entity_slug,
            entity_name=self.entity_name,
            personality=self.personality,
            strengths=self.strengths,
            weaknesses=self.weaknesses,
            best_suited_for=self.best_suited_for,
            confidence=max(0.0, min(self.confidence / 100.0, 1.0)),
            inference_time_ms=0,
            pipeline_version=pipeline_version,
            valid=True,
            validation_errors=self.user_message,
            fallback_tier=self.tier,
        )
