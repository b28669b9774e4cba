"""
Guardrail state machine for the suggestion pipeline.

Each guard is a pure function from a stage result and thresholds to the next
state. The orchestrator only sequences them and writes the audit record at
the terminal states.

    START -> AUTHORIZED -> ROUTED -> RETRIEVED
      -> SOURCE_GUARD_PASS | SOURCE_GUARD_FAIL
      -> SYNTHESIZED
      -> CONFIDENCE_GUARD_PASS | CONFIDENCE_GUARD_FAIL
      -> SAFETY_PASS | SAFETY_FAIL
      -> SUCCESS

Any *_FAIL state, and any unhandled exception, transitions to FALLBACK.
"""

from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Optional, Sequence

from authoring.config import GuardrailThresholds
from authoring.schemas.documents import RetrievedDocument
from authoring.schemas.suggestion import FallbackReason, SafetyValidation, SynthesizedSuggestion


class PipelineState(str, Enum):
    """States of one pipeline run."""
    START = "start"
    AUTHORIZED = "authorized"
    ROUTED = "routed"
    RETRIEVED = "retrieved"
    SOURCE_GUARD_PASS = "source_guard_pass"
    SOURCE_GUARD_FAIL = "source_guard_fail"
    SYNTHESIZED = "synthesized"
    CONFIDENCE_GUARD_PASS = "confidence_guard_pass"
    CONFIDENCE_GUARD_FAIL = "confidence_guard_fail"
    SAFETY_PASS = "safety_pass"
    SAFETY_FAIL = "safety_fail"
    SUCCESS = "success"
    FALLBACK = "fallback"


TERMINAL_STATES: FrozenSet[PipelineState] = frozenset({
    PipelineState.SUCCESS,
    PipelineState.FALLBACK,
})

# Fail state -> fallback reason
FAIL_REASONS: Dict[PipelineState, FallbackReason] = {
    PipelineState.SOURCE_GUARD_FAIL: FallbackReason.INSUFFICIENT_SOURCES,
    PipelineState.CONFIDENCE_GUARD_FAIL: FallbackReason.LOW_CONFIDENCE,
    PipelineState.SAFETY_FAIL: FallbackReason.SAFETY_VALIDATION_FAILED,
}

# Allowed transitions; FALLBACK is additionally reachable from any
# non-terminal state on an unhandled exception.
TRANSITIONS: Dict[PipelineState, FrozenSet[PipelineState]] = {
    PipelineState.START: frozenset({PipelineState.AUTHORIZED}),
    PipelineState.AUTHORIZED: frozenset({PipelineState.ROUTED}),
    PipelineState.ROUTED: frozenset({PipelineState.RETRIEVED}),
    PipelineState.RETRIEVED: frozenset({
        PipelineState.SOURCE_GUARD_PASS, PipelineState.SOURCE_GUARD_FAIL,
    }),
    PipelineState.SOURCE_GUARD_PASS: frozenset({PipelineState.SYNTHESIZED}),
    PipelineState.SOURCE_GUARD_FAIL: frozenset({PipelineState.FALLBACK}),
    PipelineState.SYNTHESIZED: frozenset({
        PipelineState.CONFIDENCE_GUARD_PASS, PipelineState.CONFIDENCE_GUARD_FAIL,
    }),
    PipelineState.CONFIDENCE_GUARD_PASS: frozenset({
        PipelineState.SAFETY_PASS, PipelineState.SAFETY_FAIL,
    }),
    PipelineState.CONFIDENCE_GUARD_FAIL: frozenset({PipelineState.FALLBACK}),
    PipelineState.SAFETY_PASS: frozenset({PipelineState.SUCCESS}),
    PipelineState.SAFETY_FAIL: frozenset({PipelineState.FALLBACK}),
    PipelineState.SUCCESS: frozenset(),
    PipelineState.FALLBACK: frozenset(),
}


class GuardResult(NamedTuple):
    """Outcome of one guard: next state plus what was measured."""
    state: PipelineState
    observed: object
    threshold: object

    @property
    def passed(self) -> bool:
        return self.state not in FAIL_REASONS

    @property
    def fallback_reason(self) -> Optional[FallbackReason]:
        return FAIL_REASONS.get(self.state)


def can_transition(current: PipelineState, target: PipelineState) -> bool:
    """True if the state machine allows current -> target."""
    if target == PipelineState.FALLBACK and current not in TERMINAL_STATES:
        return True
    return target in TRANSITIONS[current]


def check_source_count(
    documents: Sequence[RetrievedDocument],
    thresholds: GuardrailThresholds,
) -> GuardResult:
    """Require a minimum number of retrieved documents, however relevant."""
    count = len(documents)
    state = (
        PipelineState.SOURCE_GUARD_PASS
        if count >= thresholds.min_source_references
        else PipelineState.SOURCE_GUARD_FAIL
    )
    return GuardResult(state, count, thresholds.min_source_references)


def check_confidence(
    suggestion: SynthesizedSuggestion,
    thresholds: GuardrailThresholds,
) -> GuardResult:
    """Require the synthesis confidence floor."""
    state = (
        PipelineState.CONFIDENCE_GUARD_PASS
        if suggestion.confidence >= thresholds.min_confidence
        else PipelineState.CONFIDENCE_GUARD_FAIL
    )
    return GuardResult(state, round(suggestion.confidence, 4), thresholds.min_confidence)


def check_safety(
    validation: SafetyValidation,
    thresholds: GuardrailThresholds,
) -> GuardResult:
    """Require safe=True and validator confidence at or above the floor."""
    passed = validation.safe and validation.confidence >= thresholds.min_safety_confidence
    state = PipelineState.SAFETY_PASS if passed else PipelineState.SAFETY_FAIL
    return GuardResult(
        state,
        {"safe": validation.safe, "confidence": validation.confidence},
        thresholds.min_safety_confidence,
    )


def requires_human_review(confidence: float, thresholds: GuardrailThresholds) -> bool:
    """Successful suggestions below the review threshold still need a human."""
    return confidence < thresholds.human_review_confidence
