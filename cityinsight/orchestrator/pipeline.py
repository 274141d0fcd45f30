"""Inference orchestrator -- sequences the pipeline for one entity per call.

guard -> quality check -> rule engine -> validator -> confidence -> audit

Every call returns an ``InferenceResult``. Guard blocks and low confidence
come back from the staged run as tagged outcomes; anything unexpected is
caught once in ``run_inference`` and becomes a Tier 3 fallback.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from cityinsight.audit.decision_logger import DecisionLogger
from cityinsight.audit.sinks import AuditSink, JsonlAuditSink, LoggingAuditSink
from cityinsight.config.loader import get_default_config, load_insight_config
from cityinsight.config.settings import Settings
from cityinsight.config.thresholds import InsightConfig
from cityinsight.engine.confidence import ConfidenceCalculator
from cityinsight.engine.validator import OutputValidator
from cityinsight.exceptions import InferenceError
from cityinsight.fallback.service import FallbackService
from cityinsight.models.enums import FallbackReason
from cityinsight.models.inference_result import InferenceResult
from cityinsight.models.results import FallbackResponse
from cityinsight.models.score_input import EntityIdentity, ScoreInput, parse_score_input
from cityinsight.orchestrator.outcomes import OutcomeStatus, PipelineOutcome
from cityinsight.quality.checker import DataQualityChecker
from cityinsight.quality.guard import QualityGuard
from cityinsight.rules.engine import RuleEngine

logger = logging.getLogger(__name__)

InputLike = Union[ScoreInput, Mapping[str, Any], None]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class InferenceOrchestrator:
    """Runs the insight pipeline.

    Components hold only the immutable config, so one orchestrator can serve
    concurrent calls for different entities.
    """

    def __init__(
        self,
        config: Optional[InsightConfig] = None,
        settings: Optional[Settings] = None,
        audit_sink: Optional[AuditSink] = None,
    ):
        self._settings = settings or Settings()
        if config is None:
            if self._settings.thresholds_path:
                config = load_insight_config(self._settings.thresholds_path)
            else:
                config = get_default_config()
        self._config = config

        if audit_sink is None:
            if self._settings.audit_log_path:
                audit_sink = JsonlAuditSink(self._settings.audit_log_path)
            else:
                audit_sink = LoggingAuditSink()

        self._checker = DataQualityChecker(config)
        self._guard = QualityGuard(config, checker=self._checker)
        self._rule_engine = RuleEngine(config)
        self._validator = OutputValidator(config)
        self._confidence = ConfidenceCalculator(config)
        self._fallback = FallbackService(config)
        self._decision_logger = DecisionLogger(audit_sink)

    @property
    def config(self) -> InsightConfig:
        return self._config

    @property
    def fallback_service(self) -> FallbackService:
        return self._fallback

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def run_inference(self, score_input: InputLike) -> InferenceResult:
        """Run the full pipeline. Never raises."""
        start = time.perf_counter()
        parsed: Optional[ScoreInput] = score_input if isinstance(score_input, ScoreInput) else None
        try:
            parsed = self.parse_input(score_input)
            logger.info("Starting inference pipeline for %r", parsed.entity.name)
            outcome = self._run_stages(parsed, start)
            return self._dispatch(outcome)
        except Exception as exc:
            return self._dispatch(PipelineOutcome.failed(parsed, exc))

    def run_batch(self, inputs: Iterable[InputLike]) -> list[InferenceResult]:
        """One independent ``run_inference`` per input, results in input order."""
        results = [self.run_inference(item) for item in inputs]
        fallbacks = sum(1 for r in results if r.is_fallback)
        logger.info("Batch complete: %d inputs, %d fallbacks", len(results), fallbacks)
        return results

    def handle_api_unavailable(
        self,
        entity: EntityIdentity,
        unavailable_sources: Sequence[str],
    ) -> InferenceResult:
        """Convenience wrapper: upstream-unavailable fallback, audited and converted."""
        fallback = self._fallback.handle_api_unavailable(entity, unavailable_sources)
        return self._fallback_result(entity.name, fallback)

    def parse_input(self, score_input: InputLike) -> ScoreInput:
        """Coerce a mapping or ``None`` into ``ScoreInput`` using this config's tier cutoffs."""
        if score_input is None:
            return ScoreInput.empty()
        if isinstance(score_input, ScoreInput):
            return score_input
        if isinstance(score_input, Mapping):
            return parse_score_input(score_input, self._config.score_thresholds)
        raise InferenceError(
            f"Unsupported input type: {type(score_input).__name__}",
            context={"input_type": type(score_input).__name__},
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _run_stages(self, score_input: ScoreInput, start: float) -> PipelineOutcome:
        logger.debug("Stage 1: quality guard")
        guard = self._guard.validate_for_inference(score_input)
        if not guard.proceed:
            quality = self._checker.validate(score_input)
            return PipelineOutcome.blocked(score_input, guard, quality)
        if guard.recommendations:
            logger.info("Quality guard: %d recommendations", len(guard.recommendations))

        logger.debug("Stage 2: data quality check")
        quality = self._checker.validate(score_input)
        logger.info("%s", quality.summary())

        logger.debug("Stage 3: rule engine")
        generated = self._rule_engine.generate(score_input)
        insights = generated.insights

        logger.debug("Stage 4: output validation")
        validation = self._validator.validate(insights)
        if not validation.valid:
            logger.warning("Output validation failed: %s", validation.error)

        logger.debug("Stage 5: confidence")
        confidence = self._confidence.calculate(score_input, quality, insights)
        logger.info("Confidence: %s (%.1f%%)", confidence.level.value, confidence.overall)

        if confidence.overall < self._config.fallback.low_confidence_threshold:
            return PipelineOutcome.low_confidence(score_input, insights, confidence)

        result = InferenceResult(
            entity_slug=score_input.entity.slug,
            entity_name=score_input.entity.name,
            personality=insights.personality,
            strengths=insights.strengths,
            weaknesses=insights.weaknesses,
            best_suited_for=insights.best_suited_for,
            confidence=confidence.normalized,
            inference_time_ms=_elapsed_ms(start),
            pipeline_version=self._settings.pipeline_version,
            valid=validation.valid,
            validation_errors=None if validation.valid else validation.error,
        )
        return PipelineOutcome.completed(
            score_input,
            result,
            insights,
            quality,
            confidence,
            validation,
            generated.fired_rules,
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, outcome: PipelineOutcome) -> InferenceResult:
        status = outcome.status

        if status is OutcomeStatus.COMPLETED:
            audit_log = self._decision_logger.log_inference(
                outcome.score_input,
                outcome.result,
                outcome.insights,
                outcome.quality,
                outcome.confidence,
                outcome.fired_rules,
                outcome.validation,
            )
            logger.info("Complete: %s", audit_log.summary())
            return outcome.result

        if status is OutcomeStatus.BLOCKED:
            logger.warning("Quality guard blocked inference: %s", outcome.guard.summary())
            fallback = self._fallback.handle_incomplete_data(
                outcome.score_input,
                outcome.quality,
                reason=FallbackReason.QUALITY_GUARD_BLOCKED,
            )
        elif status is OutcomeStatus.LOW_CONFIDENCE:
            logger.warning("Low confidence (%.1f%%), using fallback", outcome.confidence.overall)
            fallback = self._fallback.handle_low_confidence(
                outcome.score_input,
                outcome.insights,
                outcome.confidence,
            )
        else:
            fallback = self._fallback.handle_inference_error(outcome.score_input, outcome.error)

        entity_name = outcome.score_input.entity.name if outcome.score_input is not None else ""
        return self._fallback_result(entity_name, fallback)

    def _fallback_result(self, entity_name: str, fallback: FallbackResponse) -> InferenceResult:
        logger.info("Fallback response generated: %s", fallback.summary())
        self._decision_logger.log_fallback(entity_name, fallback)
        return fallback.to_inference_result(self._settings.fallback_pipeline_version)
