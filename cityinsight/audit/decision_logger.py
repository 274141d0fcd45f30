"""Builds audit records for pipeline runs and hands them to a sink."""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from cityinsight.audit.sinks import AuditRecord, AuditSink, LoggingAuditSink
from cityinsight.models.audit import AppliedRule, AuditLog, FallbackAuditEntry
from cityinsight.models.inference_result import InferenceResult
from cityinsight.models.results import (
    ConfidenceResult,
    FallbackResponse,
    InferenceInsights,
    QualityResult,
    ValidationResult,
)
from cityinsight.models.score_input import ScoreInput
from cityinsight.rules.registry import RuleFiring

logger = logging.getLogger(__name__)


class DecisionLogger:
    """Fire-and-forget audit trail.

    A failing sink is logged and otherwise ignored: auditing must never change
    or block the result returned to the caller.
    """

    def __init__(self, sink: Optional[AuditSink] = None) -> None:
        self._sink = sink or LoggingAuditSink()

    def log_inference(
        self,
        score_input: ScoreInput,
        result: InferenceResult,
        insights: InferenceInsights,
        quality: QualityResult,
        confidence: ConfidenceResult,
        fired_rules: Sequence[RuleFiring],
        validation: ValidationResult,
    ) -> AuditLog:
        audit_log = AuditLog(
            audit_id=str(uuid.uuid4()),
            entity_name=score_input.entity.name,
            entity_country=score_input.entity.country,
            insights=insights,
            quality=quality,
            confidence=confidence,
            inference_time_ms=result.inference_time_ms,
            applied_rules=tuple(self._applied_rule(firing) for firing in fired_rules),
            validation_messages=validation.message,
        )
        logger.info(
            "Inference audit [%s] - City: %s, Confidence: %s, Valid: %s",
            audit_log.audit_id,
            audit_log.entity_name,
            confidence.level.value,
            result.valid,
        )
        self._append(audit_log)
        return audit_log

    def log_fallback(self, entity_name: str, fallback: FallbackResponse) -> FallbackAuditEntry:
        entry = FallbackAuditEntry(
            audit_id=str(uuid.uuid4()),
            entity_name=entity_name,
            tier=fallback.tier,
            reason=fallback.reason,
            confidence=fallback.confidence,
        )
        logger.info("Fallback audit [%s] - %s", entry.audit_id, fallback.summary())
        self._append(entry)
        return entry

    @staticmethod
    def _applied_rule(firing: RuleFiring) -> AppliedRule:
        return AppliedRule(
            rule_id=firing.rule_id,
            category=firing.category,
            condition=firing.condition,
            output=firing.output,
            inputs_used=dict(firing.inputs_used),
        )

    def _append(self, record: AuditRecord) -> None:
        try:
            self._sink.append(record)
        except Exception:
            logger.exception("Audit sink %s failed; record dropped", type(self._sink).__name__)
