"""
Suggestion Orchestrator Service.

Runs the guarded suggestion pipeline as an explicit state machine:

    role check -> prompt routing -> retrieval -> source guard -> synthesis
    -> confidence guard -> safety guard -> success | fallback

CRITICAL: Every run that passes authorization and validation writes exactly
one immutable SuggestionLogRecord before a response is returned.
Guardrail outcomes never raise; they become fallback responses.
"""

import time
from typing import Any, Dict, List, NamedTuple, Optional, Sequence
from uuid import UUID, uuid4

from pydantic import ValidationError

from authoring.config import GuardrailThresholds
from authoring.domain.guardrails import (
    GuardResult,
    TERMINAL_STATES,
    PipelineState,
    can_transition,
    check_confidence,
    check_safety,
    check_source_count,
    requires_human_review,
)
from authoring.domain.keywords import extract_keywords
from authoring.exceptions import (
    AuditWriteError,
    AuthorizationError,
    DecisionConflictError,
    DecisionUnauthorizedError,
    RequestValidationError,
    SuggestionNotFoundError,
)
from authoring.logging import get_logger
from authoring.schemas.documents import RetrievalQuery, RetrievedDocument, SourceReference, VerificationStatus
from authoring.schemas.log import (
    DecisionUpdate,
    HistoryFilters,
    SuggestionLogRecord,
    SuggestionStatus,
    TimeRange,
    UserDecision,
)
from authoring.schemas.request import RequestingUser, RoutedRequest, SuggestionRequest
from authoring.schemas.suggestion import FallbackReason, ResponseMetadata, SuggestionResponse
from authoring.services.analytics import UsageAnalytics, compute_usage_analytics
from authoring.services.fallback import FallbackHandler
from authoring.services.interfaces import (
    AuditSink,
    KnowledgeStore,
    RoleGuard,
    SafetyValidator,
    TransparencyLogger,
)
from authoring.services.prompt_orchestrator import PromptOrchestrator
from authoring.services.retriever import VerifiedRetriever
from authoring.services.synthesizer import ClauseSynthesizer

logger = get_logger(__name__)


class PipelineOutcome(NamedTuple):
    """Terminal result of one pipeline run, before it is logged."""
    response: SuggestionResponse
    status: SuggestionStatus
    error_message: Optional[str]


class _Run:
    """Mutable bookkeeping for one pipeline run."""

    def __init__(self, suggestion_id: UUID, routed: RoutedRequest):
        self.suggestion_id = suggestion_id
        self.routed = routed
        self.started = time.monotonic()
        self.states: List[PipelineState] = [
            PipelineState.START,
            PipelineState.AUTHORIZED,
            PipelineState.ROUTED,
        ]
        self.retrieved = 0

    @property
    def state(self) -> PipelineState:
        return self.states[-1]

    def advance(self, target: PipelineState) -> None:
        if not can_transition(self.state, target):
            raise RuntimeError(f"Illegal pipeline transition {self.state.value} -> {target.value}")
        self.states.append(target)

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started) * 1000


class SuggestionOrchestrator:
    """
    Guarded suggestion pipeline.

    Public operations:
    - generate_suggestion: run the pipeline for one request
    - record_user_decision: accept/modify/reject a suggestion, once
    - get_suggestion_history: a user's suggestion logs, newest first
    - get_usage_analytics: organization usage metrics over a time range
    """

    def __init__(
        self,
        knowledge_store: KnowledgeStore,
        role_guard: RoleGuard,
        audit_sink: AuditSink,
        safety_validator: SafetyValidator,
        transparency_logger: Optional[TransparencyLogger] = None,
        thresholds: Optional[GuardrailThresholds] = None,
        retriever: Optional[VerifiedRetriever] = None,
        synthesizer: Optional[ClauseSynthesizer] = None,
        prompt_orchestrator: Optional[PromptOrchestrator] = None,
        fallback_handler: Optional[FallbackHandler] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            knowledge_store: Verified knowledge store
            role_guard: Role permission check
            audit_sink: Append-only suggestion log storage
            safety_validator: Content safety validator
            transparency_logger: Best-effort decision log (optional)
            thresholds: Guardrail thresholds (defaults from settings)
            retriever: Retriever override (defaults to VerifiedRetriever over knowledge_store)
            synthesizer: Synthesizer override
            prompt_orchestrator: Routing override
            fallback_handler: Fallback override
        """
        self.role_guard = role_guard
        self.audit_sink = audit_sink
        self.safety_validator = safety_validator
        self.transparency_logger = transparency_logger
        self.thresholds = thresholds or GuardrailThresholds.from_settings()
        self.retriever = retriever or VerifiedRetriever(knowledge_store)
        self.synthesizer = synthesizer or ClauseSynthesizer()
        self.prompt_orchestrator = prompt_orchestrator or PromptOrchestrator()
        self.fallback_handler = fallback_handler or FallbackHandler()

    # ===== Suggestion generation =====

    async def generate_suggestion(
        self,
        request: SuggestionRequest,
        user: RequestingUser,
    ) -> SuggestionResponse:
        """
        Run the guarded pipeline for one request.

        Args:
            request: Raw authoring request
            user: Authenticated requester

        Returns:
            SuggestionResponse (a fallback when any guardrail trips or the
            pipeline fails)

        Raises:
            AuthorizationError: If the user's role lacks the intent
            RequestValidationError: If the request is malformed
            AuditWriteError: If the audit record could not be written
        """
        logger.suggestion_requested(user_id=user.id, role=user.role, intent=request.intent)

        # Step 1: Role check
        try:
            self.role_guard.authorize(user, request.intent)
        except AuthorizationError:
            logger.authorization_denied(user_id=user.id, role=user.role, intent=request.intent)
            raise

        # Step 2: Validation and routing
        try:
            routed = self.prompt_orchestrator.route(request)
        except RequestValidationError as e:
            logger.request_invalid(user_id=user.id, error=str(e))
            raise

        # Step 3: Guarded pipeline (never raises)
        run = _Run(uuid4(), routed)
        outcome = await self._run_pipeline(run)

        # Step 4: Canonical audit record
        record = self._build_record(run, user, request, outcome)
        try:
            self.audit_sink.append(record)
        except Exception as e:
            raise AuditWriteError(f"Failed to write suggestion log {run.suggestion_id}: {e}") from e

        # Step 5: Transparency (best-effort)
        self._log_transparency(run, user, outcome)

        if outcome.status == SuggestionStatus.SUCCESS:
            logger.suggestion_generated(
                suggestion_id=run.suggestion_id,
                confidence=outcome.response.confidence,
                source_count=len(outcome.response.source_references),
                duration_ms=outcome.response.metadata.processing_time_ms
            )
        return outcome.response

    async def _run_pipeline(self, run: _Run) -> PipelineOutcome:
        """Sequence retrieval, synthesis and guards; convert failures to fallbacks."""
        routed = run.routed
        try:
            documents = await self.retriever.retrieve(self._build_query(routed))
            run.retrieved = len(documents)
            run.advance(PipelineState.RETRIEVED)

            # Guard: minimum source count
            guard = check_source_count(documents, self.thresholds)
            run.advance(guard.state)
            if not guard.passed:
                return self._guard_fallback(run, guard)

            suggestion = self.synthesizer.synthesize(documents, routed)
            run.advance(PipelineState.SYNTHESIZED)

            # Guard: confidence floor
            guard = check_confidence(suggestion, self.thresholds)
            run.advance(guard.state)
            if not guard.passed:
                return self._guard_fallback(run, guard)

            # Guard: content safety
            validation = await self.safety_validator.validate(
                suggestion.content,
                self._safety_context(routed, suggestion.document_ids, documents),
            )
            guard = check_safety(validation, self.thresholds)
            run.advance(guard.state)
            if not guard.passed:
                return self._guard_fallback(run, guard)

            response = SuggestionResponse(
                id=run.suggestion_id,
                suggestion=suggestion.content,
                source_references=[SourceReference.from_document(d) for d in documents],
                confidence=suggestion.confidence,
                requires_human_review=requires_human_review(suggestion.confidence, self.thresholds),
                fallback_used=False,
                warnings=list(suggestion.warnings),
                metadata=self._metadata(run),
            )
            run.advance(PipelineState.SUCCESS)
            return PipelineOutcome(response, SuggestionStatus.SUCCESS, None)

        except Exception as e:
            logger.pipeline_error(suggestion_id=run.suggestion_id, error=str(e))
            if run.state not in TERMINAL_STATES:
                run.advance(PipelineState.FALLBACK)
            response = self._fallback_response(run, FallbackReason.SYSTEM_ERROR)
            return PipelineOutcome(response, SuggestionStatus.ERROR, str(e) or type(e).__name__)

    def _guard_fallback(self, run: _Run, guard: GuardResult) -> PipelineOutcome:
        """Record a tripped guard and build its fallback outcome."""
        reason = guard.fallback_reason
        logger.guardrail_tripped(
            suggestion_id=run.suggestion_id,
            guardrail=guard.state.value,
            observed=guard.observed,
            threshold=guard.threshold
        )
        run.advance(PipelineState.FALLBACK)
        response = self._fallback_response(run, reason)
        return PipelineOutcome(response, SuggestionStatus.FALLBACK, reason.value)

    def _fallback_response(self, run: _Run, reason: FallbackReason) -> SuggestionResponse:
        """Fallback responses carry no suggestion and no sources."""
        logger.fallback_triggered(suggestion_id=run.suggestion_id, reason=reason.value)
        fallback = self.fallback_handler.generate_fallback(run.routed, reason)
        return SuggestionResponse(
            id=run.suggestion_id,
            suggestion=None,
            source_references=[],
            confidence=0.0,
            requires_human_review=True,
            fallback_used=True,
            fallback_message=fallback.message,
            fallback_reason=reason,
            suggested_actions=list(fallback.suggested_actions),
            metadata=self._metadata(run),
        )

    def _build_query(self, routed: RoutedRequest) -> RetrievalQuery:
        return RetrievalQuery(
            keywords=extract_keywords(routed.context),
            jurisdictions=[j.value for j in routed.jurisdictions],
            standards=list(routed.standards),
            min_relevance_score=self.thresholds.min_relevance_score,
            max_results=self.thresholds.max_retrieval_results,
            include_deprecated=self.thresholds.include_deprecated,
        )

    @staticmethod
    def _safety_context(
        routed: RoutedRequest,
        used_ids: Sequence[str],
        documents: Sequence[RetrievedDocument],
    ) -> Dict[str, Any]:
        return {
            "intent": routed.intent.value,
            "jurisdictions": [j.value for j in routed.jurisdictions],
            "category": routed.standards[0] if routed.standards else "general",
            "critical_compliance": True,
            "document_ids": list(used_ids),
            "retrieved_document_ids": [d.id for d in documents],
        }

    @staticmethod
    def _metadata(run: _Run) -> ResponseMetadata:
        return ResponseMetadata(
            processing_time_ms=run.elapsed_ms(),
            retrieved_documents=run.retrieved,
            jurisdiction_context=list(run.routed.jurisdictions),
        )

    def _build_record(
        self,
        run: _Run,
        user: RequestingUser,
        request: SuggestionRequest,
        outcome: PipelineOutcome,
    ) -> SuggestionLogRecord:
        routed = run.routed
        return SuggestionLogRecord(
            id=run.suggestion_id,
            user_id=user.id,
            organization_id=user.organization_id,
            intent=routed.intent,
            jurisdictions=[j.value for j in routed.jurisdictions],
            prompt=request.model_dump(mode="json"),
            response=outcome.response.model_dump(mode="json"),
            source_references=list(outcome.response.source_references),
            status=outcome.status,
            error_message=outcome.error_message,
            regulatory_context={
                "jurisdictions": [j.value for j in routed.jurisdictions],
                "standards": list(routed.standards),
                "output_format": routed.output_format.value,
            },
            verification_status=(
                VerificationStatus.VERIFIED
                if outcome.status == SuggestionStatus.SUCCESS
                else VerificationStatus.PENDING
            ),
            pipeline_states=[state.value for state in run.states],
        )

    def _log_transparency(self, run: _Run, user: RequestingUser, outcome: PipelineOutcome) -> None:
        """Report the outcome to the transparency logger; failures are logged only."""
        if self.transparency_logger is None:
            return

        response = outcome.response
        event = {
            "suggestion_id": str(run.suggestion_id),
            "action": f"policy_suggestion_{run.routed.intent.value}",
            "user_id": user.id,
            "organization_id": user.organization_id,
            "decision_type": run.routed.intent.value,
            "status": outcome.status.value,
            "success": outcome.status == SuggestionStatus.SUCCESS,
            "confidence_score": response.confidence,
            "fallback_reason": response.fallback_reason.value if response.fallback_reason else None,
            "source_reference_ids": [ref.id for ref in response.source_references],
            "jurisdiction_context": [j.value for j in run.routed.jurisdictions],
            "processing_time_ms": response.metadata.processing_time_ms,
        }
        try:
            self.transparency_logger.log_decision(event)
        except Exception as e:
            logger.transparency_failed(suggestion_id=run.suggestion_id, error=str(e))

    # ===== User decisions =====

    def record_user_decision(
        self,
        suggestion_id,
        user_id: str,
        decision,
        modified_content: Optional[Any] = None,
        rejection_reason: Optional[str] = None,
    ) -> None:
        """
        Record whether the requester accepted, modified or rejected a suggestion.

        Validates:
        1. The suggestion exists
        2. The caller is the original requester
        3. The decision is accepted, modified or rejected
        4. No decision has been recorded yet

        Args:
            suggestion_id: Suggestion id (UUID or string)
            user_id: Caller's user id
            decision: UserDecision or its string value
            modified_content: Edited content (for 'modified')
            rejection_reason: Why the suggestion was rejected (for 'rejected')

        Raises:
            SuggestionNotFoundError: If no suggestion log exists
            DecisionUnauthorizedError: If the caller is not the requester
            RequestValidationError: If the decision value is not allowed
            DecisionConflictError: If a decision was already recorded

        Example:
            >>> orchestrator.record_user_decision(
            ...     suggestion_id=response.id,
            ...     user_id="user-1",
            ...     decision="rejected",
            ...     rejection_reason="Does not reflect our staffing model"
            ... )
        """
        # Step 1: Record exists
        key = self._coerce_id(suggestion_id)
        record = self.audit_sink.get(key) if key is not None else None
        if record is None:
            logger.decision_rejected(suggestion_id=suggestion_id, user_id=user_id, error="not found")
            raise SuggestionNotFoundError(suggestion_id)

        # Step 2: Requester only
        if record.user_id != user_id:
            logger.decision_rejected(suggestion_id=key, user_id=user_id, error="not the requester")
            raise DecisionUnauthorizedError(key, user_id)

        # Step 3: Decision value
        try:
            update = DecisionUpdate(
                override_decision=decision,
                modified_content=modified_content,
                rejection_reason=rejection_reason,
            )
        except ValidationError:
            logger.decision_rejected(suggestion_id=key, user_id=user_id, error=f"invalid decision {decision}")
            raise RequestValidationError(
                f"Invalid decision: {decision}. Expected one of: "
                f"{', '.join(d.value for d in UserDecision if d != UserDecision.PENDING)}",
                invalid_values=[str(decision)],
            )

        # Step 4: Write-once update
        try:
            self.audit_sink.update_decision(key, update)
        except DecisionConflictError as e:
            logger.decision_rejected(suggestion_id=key, user_id=user_id, error=str(e))
            raise

        logger.decision_recorded(
            suggestion_id=key,
            user_id=user_id,
            decision=update.override_decision.value
        )

    @staticmethod
    def _coerce_id(value) -> Optional[UUID]:
        if isinstance(value, UUID):
            return value
        try:
            return UUID(str(value))
        except ValueError:
            return None

    # ===== Reporting =====

    def get_suggestion_history(
        self,
        user_id: str,
        filters: Optional[HistoryFilters] = None,
    ) -> List[SuggestionLogRecord]:
        """
        A user's suggestion logs, newest first.

        Args:
            user_id: Requester id
            filters: Optional intent, jurisdiction, date range and status filters

        Returns:
            Matching SuggestionLogRecords
        """
        return self.audit_sink.list_for_user(user_id, filters)

    def get_usage_analytics(
        self,
        organization_id: str,
        time_range: TimeRange,
    ) -> UsageAnalytics:
        """
        Usage metrics for an organization over an inclusive time range.

        Args:
            organization_id: Organization id
            time_range: Reporting window

        Returns:
            UsageAnalytics with counts, percentage rates and breakdowns
        """
        records = self.audit_sink.list_for_organization(
            organization_id,
            start=time_range.start,
            end=time_range.end,
        )
        return compute_usage_analytics(organization_id, time_range, records)
