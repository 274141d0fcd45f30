"""Pydantic models for the immutable threshold configuration.

Every pipeline component receives an ``InsightConfig`` in its constructor.
Models are frozen so a config instance can be shared across concurrent calls.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cityinsight.models.enums import ScoreTier


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ScoreThresholds(_FrozenModel):
    """Tier cutoffs for a 0-100 dimension score."""

    excellent: float = Field(default=80.0, ge=0, le=100)
    good: float = Field(default=60.0, ge=0, le=100)
    average: float = Field(default=40.0, ge=0, le=100)
    below_average: float = Field(default=20.0, ge=0, le=100)

    @model_validator(mode="after")
    def cutoffs_descending(self) -> ScoreThresholds:
        if not (self.excellent >= self.good >= self.average >= self.below_average):
            raise ValueError(
                f"Tier cutoffs must be ordered: excellent ({self.excellent}) >= "
                f"good ({self.good}) >= average ({self.average}) >= "
                f"below_average ({self.below_average})"
            )
        return self

    def tier_for(self, score: Optional[float]) -> ScoreTier:
        if score is None:
            return ScoreTier.UNKNOWN
        if score >= self.excellent:
            return ScoreTier.EXCELLENT
        if score >= self.good:
            return ScoreTier.GOOD
        if score >= self.average:
            return ScoreTier.AVERAGE
        if score >= self.below_average:
            return ScoreTier.BELOW_AVERAGE
        return ScoreTier.POOR


class RuleThresholds(_FrozenModel):
    """Cutoffs used by the rule engine."""

    strength: float = Field(default=60.0, description="Score at or above which a strength is emitted")
    strong_strength: float = Field(default=80.0, description="Score for the stronger strength wording")
    weakness: float = Field(default=40.0, description="Score below which a weakness is emitted")
    severe_weakness: float = Field(default=20.0, description="Score for the stronger weakness wording")
    primary_trait: float = Field(default=60.0)
    supporting_trait: float = Field(default=60.0)
    supporting_economy_ceiling: float = Field(
        default=80.0, description="Economy supporting clause applies below this score"
    )
    environmental_tradeoff: float = Field(default=40.0)
    environmental_audience: float = Field(default=70.0)
    max_supporting_traits: int = Field(default=2, ge=0)
    max_audience_segments: int = Field(default=6, ge=1)

    @model_validator(mode="after")
    def strength_above_weakness(self) -> RuleThresholds:
        if self.strong_strength < self.strength:
            raise ValueError("strong_strength must be >= strength")
        if self.severe_weakness > self.weakness:
            raise ValueError("severe_weakness must be <= weakness")
        if self.weakness > self.strength:
            raise ValueError("weakness threshold must be <= strength threshold")
        return self


class EconomyThresholds(_FrozenModel):
    high_gdp_per_capita: float = Field(default=60_000.0, ge=0)
    high_cost_of_living: int = Field(default=120, ge=0)
    moderate_cost_of_living: int = Field(default=100, ge=0)


class OutputBoundaries(_FrozenModel):
    """Structural limits checked by the output validator."""

    max_personality_length: int = Field(default=500, ge=1)
    min_strengths: int = Field(default=2, ge=0)
    max_strengths: int = Field(default=6, ge=1)
    min_weaknesses: int = Field(default=1, ge=0)
    max_weaknesses: int = Field(default=5, ge=1)
    min_audience: int = Field(default=2, ge=0)
    max_audience: int = Field(default=6, ge=1)
    allow_empty_weaknesses: bool = Field(
        default=True,
        description="An empty weaknesses list passes validation (no dimension scored low)",
    )

    @model_validator(mode="after")
    def min_le_max(self) -> OutputBoundaries:
        for name in ("strengths", "weaknesses", "audience"):
            lo = getattr(self, f"min_{name}")
            hi = getattr(self, f"max_{name}")
            if lo > hi:
                raise ValueError(f"min_{name} ({lo}) must be <= max_{name} ({hi})")
        return self


class QualityThresholds(_FrozenModel):
    """Data-quality gate settings used by the checker and the guard."""

    weak_data_threshold: float = Field(default=30.0, ge=0, le=100)
    min_valid_score: float = 0.0
    max_valid_score: float = 100.0
    min_unemployment_rate: float = 0.0
    max_unemployment_rate: float = 100.0
    block_identical_scores: bool = True
    extreme_values: tuple[float, ...] = (0.0, 100.0)
    extreme_score_count: int = Field(default=3, ge=1, le=4)
    small_population: int = Field(default=10_000, ge=0)
    low_gdp_per_capita: float = Field(default=5_000.0, ge=0)


class ConfidenceSettings(_FrozenModel):
    data_weight: float = Field(default=0.4, ge=0, le=1)
    pattern_weight: float = Field(default=0.3, ge=0, le=1)
    inference_weight: float = Field(default=0.3, ge=0, le=1)
    high_threshold: float = 80.0
    medium_threshold: float = 60.0
    reliable_min: float = 10.0
    reliable_max: float = 90.0
    no_scores_reliability: float = 50.0
    missing_score_default: float = 50.0
    variance_divisor: float = Field(default=10.0, gt=0)
    max_variance_penalty: float = Field(default=20.0, ge=0)
    fit_penalty_factor: float = Field(default=50.0, ge=0)
    weak_component_threshold: float = Field(
        default=70.0, description="Components below this are called out in reasoning and caveats"
    )

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> ConfidenceSettings:
        total = self.data_weight + self.pattern_weight + self.inference_weight
        if abs(total - 1.0) > 0.01:
            raise ValueError(f"Confidence weights must sum to ~1.0, got {total:.3f}")
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must be <= high_threshold")
        return self


class FallbackSettings(_FrozenModel):
    low_confidence_threshold: float = Field(default=40.0, ge=0, le=100)
    partial_data_completeness: float = Field(default=50.0, ge=0, le=100)
    metadata_only_confidence: float = Field(default=15.0, ge=0, le=100)
    api_unavailable_confidence: float = Field(default=30.0, ge=0, le=100)


class InsightConfig(_FrozenModel):
    """Top-level threshold configuration for one pipeline instance."""

    id: str = "city-insight-rules"
    version: str = "1.0.0"
    score_thresholds: ScoreThresholds = Field(default_factory=ScoreThresholds)
    rules: RuleThresholds = Field(default_factory=RuleThresholds)
    economy: EconomyThresholds = Field(default_factory=EconomyThresholds)
    output_boundaries: OutputBoundaries = Field(default_factory=OutputBoundaries)
    quality: QualityThresholds = Field(default_factory=QualityThresholds)
    confidence: ConfidenceSettings = Field(default_factory=ConfidenceSettings)
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)
    overall_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "economy": 0.30,
            "livability": 0.35,
            "sustainability": 0.20,
            "growth": 0.15,
        },
        description="Informational only; overall scores are computed upstream",
    )

    @field_validator("overall_weights")
    @classmethod
    def overall_weights_sum_to_one(cls, v: dict[str, float]) -> dict[str, float]:
        total = sum(v.values())
        if v and abs(total - 1.0) > 0.01:
            raise ValueError(f"overall_weights must sum to ~1.0, got {total:.3f}")
        return v
