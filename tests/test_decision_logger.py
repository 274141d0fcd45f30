"""Tests for audit records, sinks and the decision logger."""

import json
import logging
import time

import pytest

from cityinsight.audit.decision_logger import DecisionLogger
from cityinsight.audit.sinks import InMemoryAuditSink, JsonlAuditSink, LoggingAuditSink
from cityinsight.models.audit import AuditLog, FallbackAuditEntry
from cityinsight.models.enums import FallbackReason, FallbackTier
from cityinsight.models.results import FallbackResponse


class BrokenSink(InMemoryAuditSink):
    def append(self, record):
        raise OSError("disk full")


@pytest.fixture
def fallback_response():
    return FallbackResponse(
        tier=FallbackTier.METADATA_ONLY,
        reason=FallbackReason.QUALITY_GUARD_BLOCKED,
        personality="Smallville is a city.",
        strengths=("a", "b"),
        weaknesses=(),
        best_suited_for=("x", "y"),
        confidence=15.0,
        user_message="Limited information available for this city. Showing general overview.",
    )


def _completed_run(orchestrator, score_input):
    return orchestrator._run_stages(score_input, time.perf_counter())


class TestDecisionLogger:
    def test_log_inference_records_every_fired_rule(self, orchestrator, austin_input):
        outcome = _completed_run(orchestrator, austin_input)
        sink = InMemoryAuditSink()
        audit_log = DecisionLogger(sink).log_inference(
            outcome.score_input,
            outcome.result,
            outcome.insights,
            outcome.quality,
            outcome.confidence,
            outcome.fired_rules,
            outcome.validation,
        )

        assert sink.records == [audit_log]
        assert audit_log.entity_name == "Austin"
        assert audit_log.entity_country == "USA"
        assert audit_log.validation_messages == "All validations passed"
        assert [r.rule_id for r in audit_log.applied_rules] == [f.rule_id for f in outcome.fired_rules]
        assert audit_log.timestamp.tzinfo is not None

    def test_audit_ids_are_unique(self, fallback_response):
        logger_ = DecisionLogger(InMemoryAuditSink())
        first = logger_.log_fallback("Smallville", fallback_response)
        second = logger_.log_fallback("Smallville", fallback_response)
        assert first.audit_id != second.audit_id

    def test_log_fallback(self, fallback_response):
        sink = InMemoryAuditSink()
        entry = DecisionLogger(sink).log_fallback("Smallville", fallback_response)
        assert isinstance(entry, FallbackAuditEntry)
        assert entry.tier is FallbackTier.METADATA_ONLY
        assert entry.to_dict()["reason"] == "quality_guard_blocked"
        assert entry.to_dict()["record_type"] == "fallback"
        assert sink.records == [entry]

    def test_failing_sink_does_not_raise(self, fallback_response, caplog):
        with caplog.at_level(logging.ERROR, logger="cityinsight.audit.decision_logger"):
            entry = DecisionLogger(BrokenSink()).log_fallback("Smallville", fallback_response)
        assert entry.entity_name == "Smallville"
        assert "BrokenSink failed" in caplog.text

    def test_default_sink_logs_json(self, fallback_response, caplog):
        with caplog.at_level(logging.INFO, logger="cityinsight.audit.records"):
            DecisionLogger().log_fallback("Smallville", fallback_response)
        records = [r for r in caplog.records if r.name == "cityinsight.audit.records"]
        assert len(records) == 1
        assert json.loads(records[0].getMessage())["entity"] == {"name": "Smallville"}


class TestAuditLogSerialization:
    def test_to_dict_is_json_ready(self, orchestrator, austin_input):
        outcome = _completed_run(orchestrator, austin_input)
        audit_log = DecisionLogger(InMemoryAuditSink()).log_inference(
            outcome.score_input,
            outcome.result,
            outcome.insights,
            outcome.quality,
            outcome.confidence,
            outcome.fired_rules,
            outcome.validation,
        )
        payload = json.loads(json.dumps(audit_log.to_dict()))
        assert payload["record_type"] == "inference"
        assert payload["confidence"]["level"] == "HIGH"
        assert payload["applied_rules"][0]["category"] == "PERSONALITY"
        assert set(payload["confidence"]["breakdown"]) == {
            "data_completeness",
            "pattern_reliability",
            "inference_strength",
        }

    def test_summary(self, orchestrator, austin_input):
        outcome = _completed_run(orchestrator, austin_input)
        audit_log = AuditLog(
            audit_id="abc",
            entity_name="Austin",
            entity_country="USA",
            insights=outcome.insights,
            quality=outcome.quality,
            confidence=outcome.confidence,
            inference_time_ms=12,
            applied_rules=(),
            validation_messages="All validations passed",
        )
        assert audit_log.summary().startswith("Audit abc: Austin, USA - Confidence: HIGH (")
        assert audit_log.summary().endswith("Rules: 0, Time: 12ms")


class TestSinks:
    def test_jsonl_sink_appends_lines(self, tmp_path, fallback_response):
        path = tmp_path / "nested" / "audit.jsonl"
        decision_logger = DecisionLogger(JsonlAuditSink(path))
        decision_logger.log_fallback("A", fallback_response)
        decision_logger.log_fallback("B", fallback_response)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["entity"]["name"] for line in lines] == ["A", "B"]

    def test_logging_sink_uses_named_logger(self, caplog, fallback_response):
        sink = LoggingAuditSink("cityinsight.audit.custom")
        entry = FallbackAuditEntry(
            audit_id="id-1",
            entity_name="X",
            tier=FallbackTier.SAFE_DEFAULT,
            reason=FallbackReason.INFERENCE_ERROR,
            confidence=0.0,
        )
        with caplog.at_level(logging.INFO, logger="cityinsight.audit.custom"):
            sink.append(entry)
        assert '"audit_id": "id-1"' in caplog.text
