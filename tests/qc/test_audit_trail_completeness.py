"""Every pipeline call leaves exactly one audit record that explains its output."""

import json

from cityinsight.models.audit import AuditLog, FallbackAuditEntry
from cityinsight.models.enums import RuleCategory


def test_one_record_per_call(orchestrator, audit_sink, austin_input, name_only_input, input_factory):
    inputs = [austin_input, name_only_input, None, input_factory(economy=150.0), {"entity": None}]
    for count, item in enumerate(inputs, start=1):
        orchestrator.run_inference(item)
        assert len(audit_sink.records) == count


def test_completed_record_explains_every_item(orchestrator, audit_sink, input_factory):
    result = orchestrator.run_inference(
        input_factory(economy=72.0, livability=35.0, sustainability=75.0, growth=15.0, cost_of_living_index=95)
    )
    assert result.fallback_tier is None

    audit_log = audit_sink.records[-1]
    assert isinstance(audit_log, AuditLog)
    outputs = {rule.output for rule in audit_log.applied_rules}
    for item in result.strengths + result.weaknesses + result.best_suited_for:
        assert item in outputs

    personality_parts = [
        rule.output for rule in audit_log.applied_rules if rule.category is RuleCategory.PERSONALITY
    ]
    assert result.personality.startswith(personality_parts[0] + ". ")
    lowered = result.personality.lower()
    assert all(part.lower() in lowered for part in personality_parts)
    assert all(rule.condition for rule in audit_log.applied_rules)


def test_fallback_record_matches_result(orchestrator, audit_sink, name_only_input):
    result = orchestrator.run_inference(name_only_input)
    entry = audit_sink.records[-1]
    assert isinstance(entry, FallbackAuditEntry)
    assert entry.tier is result.fallback_tier
    assert entry.confidence / 100 == result.confidence
    assert entry.entity_name == "Smallville"


def test_records_serialize_to_json(orchestrator, audit_sink, austin_input, name_only_input):
    orchestrator.run_inference(austin_input)
    orchestrator.run_inference(name_only_input)
    for record in audit_sink.records:
        payload = json.loads(json.dumps(record.to_dict()))
        assert payload["audit_id"]
        assert payload["timestamp"].endswith("+00:00")
