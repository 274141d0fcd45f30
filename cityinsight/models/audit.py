"""Append-only audit records written by the decision logger."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from cityinsight.models.enums import FallbackReason, FallbackTier, RuleCategory
from cityinsight.models.results import ConfidenceResult, InferenceInsights, QualityResult


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class AppliedRule:
    """One rule that fired while generating insights."""

    rule_id: str
    category: RuleCategory
    condition: str
    output: str
    inputs_used: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "category": self.category.value,
            "condition": self.condition,
            "output": self.output,
            "inputs_used": dict(self.inputs_used),
        }


@dataclass(frozen=True)
class AuditLog:
    """Full trace of a completed (non-fallback) inference."""

    audit_id: str
    entity_name: str
    insights: InferenceInsights
    quality: QualityResult
    confidence: ConfidenceResult
    inference_time_ms: int
    applied_rules: tuple[AppliedRule, ...]
    validation_messages: str
    entity_country: Optional[str] = None
    timestamp: datetime = field(default_factory=_utc_now)

    def summary(self) -> str:
        return "Audit %s: %s, %s - Confidence: %s (%.1f%%), Rules: %d, Time: %dms" % (
            self.audit_id,
            self.entity_name,
            self.entity_country or "unknown",
            self.confidence.level.value,
            self.confidence.overall,
            len(self.applied_rules),
            self.inference_time_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_type": "inference",
            "audit_id": self.audit_id,
            "timestamp": self.timestamp.isoformat(),
            "entity": {"name": self.entity_name, "country": self.entity_country},
            "insights": {
                "personality": self.insights.personality,
                "strengths": list(self.insights.strengths),
                "weaknesses": list(self.insights.weaknesses),
                "best_suited_for": list(self.insights.best_suited_for),
            },
            "quality": {
                "sufficient": self.quality.sufficient,
                "completeness": self.quality.completeness,
                "issues": list(self.quality.issues),
                "warnings": list(self.quality.warnings),
            },
            "confidence": {
                "overall": self.confidence.overall,
                "level": self.confidence.level.value,
                "reasoning": self.confidence.reasoning,
                "breakdown": asdict(self.confidence.breakdown),
            },
            "inference_time_ms": self.inference_time_ms,
            "applied_rules": [rule.to_dict() for rule in self.applied_rules],
            "validation_messages": self.validation_messages,
        }


@dataclass(frozen=True)
class FallbackAuditEntry:
    """Compact record for a run that ended in a fallback."""

    audit_id: str
    entity_name: str
    tier: FallbackTier
    reason: FallbackReason
    confidence: float
    timestamp: datetime = field(default_factory=_utc_now)

    def summary(self) -> str:
        return "Fallback audit %s: %s - Tier %d (%s), Confidence: %.1f%%" % (
            self.audit_id,
            self.entity_name or "unknown",
            self.tier.value,
            self.reason.value,
            self.confidence,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_type": "fallback",
            "audit_id": self.audit_id,
            "timestamp": self.timestamp.isoformat(),
            "entity": {"name": self.entity_name},
            "tier": self.tier.value,
            "reason": self.reason.value,
            "confidence": self.confidence,
        }
