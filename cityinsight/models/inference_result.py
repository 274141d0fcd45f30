from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cityinsight.models.enums import FallbackTier


class InferenceResult(BaseModel):
    """The single output shape returned to callers, normal path or fallback."""

    model_config = ConfigDict(frozen=True)

    entity_slug: str = ""
    entity_name: str = ""
    personality: str
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    best_suited_for: tuple[str, ...] = ()
    confidence: float = Field(ge=0.0, le=1.0)
    inference_time_ms: int = Field(default=0, ge=0)
    pipeline_version: str = "1.0.0"
    valid: bool = True
    validation_errors: Optional[str] = None
    fallback_tier: Optional[FallbackTier] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_tier is not None

    def is_successful(self) -> bool:
        return self.valid and bool(self.personality) and len(self.strengths) > 0

    def quality_tier(self) -> str:
        if self.confidence >= 0.9:
            return "high"
        if self.confidence >= 0.7:
            return "medium"
        if self.confidence >= 0.5:
            return "low"
        return "very-low"
