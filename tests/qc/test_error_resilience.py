"""Failure injection: every stage failure degrades to a safe, audited response."""

from unittest.mock import patch

import pytest

from cityinsight.models.enums import FallbackReason, FallbackTier
from cityinsight.models.inference_result import InferenceResult


STAGES = [
    ("_guard", "validate_for_inference"),
    ("_checker", "validate"),
    ("_rule_engine", "generate"),
    ("_validator", "validate"),
    ("_confidence", "calculate"),
]


@pytest.mark.parametrize("component, method", STAGES)
def test_stage_failure_becomes_safe_default(orchestrator, audit_sink, austin_input, component, method):
    with patch.object(getattr(orchestrator, component), method, side_effect=ValueError("internal detail")):
        result = orchestrator.run_inference(austin_input)

    assert isinstance(result, InferenceResult)
    assert result.fallback_tier is FallbackTier.SAFE_DEFAULT
    assert result.confidence == 0.0
    assert "internal detail" not in result.model_dump_json()
    assert audit_sink.records[-1].reason is FallbackReason.INFERENCE_ERROR


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"entity": None},
        {"entity": {"name": "X"}, "economy": {"score": "high"}},
        {"entity": {"name": "X"}, "economy": {"score": float("nan")}},
        {"entity": {"name": "X"}, "growth": {"score": float("inf")}},
        {"unexpected": object()},
    ],
)
def test_malformed_payloads_never_raise(orchestrator, payload):
    result = orchestrator.run_inference(payload)
    assert result.is_fallback
    assert 0.0 <= result.confidence <= 1.0


def test_out_of_range_scores_are_blocked_not_raised(orchestrator, input_factory):
    result = orchestrator.run_inference(input_factory(economy=150.0))
    assert result.is_fallback
    assert result.fallback_tier is FallbackTier.PARTIAL_DATA
