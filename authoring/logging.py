"""
Structured Logging Module for the Policy Authoring Assistant.

Provides JSON-formatted structured logging for observability.
Key events: suggestion requested, retrieval, guardrail trips,
fallbacks, successful suggestions, user decisions.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, List, Optional
from uuid import UUID

from authoring.config import settings


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    All logs are emitted as single-line JSON objects for easy parsing
    by log aggregation tools.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class StructuredLogger:
    """
    Structured logger wrapper with domain-specific methods.

    One method per pipeline event so every log line carries the same keys.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(
        self,
        level: int,
        message: str,
        exc_info: bool = False,
        **kwargs: Any
    ) -> None:
        """Internal log method with extra fields."""
        extra = {"extra_fields": kwargs}
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    # ===== Request Events =====

    def suggestion_requested(
        self,
        user_id: str,
        role: str,
        intent: str
    ) -> None:
        """Log an incoming suggestion request."""
        self._log(
            logging.INFO,
            f"Suggestion requested by user {user_id} ({role})",
            event="suggestion.requested",
            user_id=user_id,
            role=role,
            intent=intent
        )

    def authorization_denied(
        self,
        user_id: str,
        role: str,
        intent: str
    ) -> None:
        """Log a role guard denial."""
        self._log(
            logging.WARNING,
            f"Authorization denied: role '{role}' cannot invoke '{intent}'",
            event="authorization.denied",
            user_id=user_id,
            role=role,
            intent=intent
        )

    def request_invalid(
        self,
        user_id: str,
        error: str
    ) -> None:
        """Log a request that failed validation."""
        self._log(
            logging.WARNING,
            f"Request validation failed: {error}",
            event="request.invalid",
            user_id=user_id,
            error=error
        )

    def prompt_routed(
        self,
        intent: str,
        output_format: str
    ) -> None:
        """Log intent routing."""
        self._log(
            logging.DEBUG,
            f"Prompt routed: {intent} -> {output_format}",
            event="prompt.routed",
            intent=intent,
            output_format=output_format
        )

    # ===== Retrieval Events =====

    def retrieval_completed(
        self,
        candidates: int,
        returned: int,
        keywords: List[str],
        duration_ms: Optional[float] = None
    ) -> None:
        """Log retrieval merge result."""
        self._log(
            logging.INFO,
            f"Retrieved {returned} verified documents ({candidates} candidates)",
            event="retrieval.completed",
            candidates=candidates,
            returned=returned,
            keywords=keywords,
            duration_ms=duration_ms
        )

    def retrieval_failed(
        self,
        error: str,
        timed_out: bool = False
    ) -> None:
        """Log a retrieval failure."""
        self._log(
            logging.ERROR,
            f"Retrieval failed: {error}",
            event="retrieval.failed",
            error=error,
            timed_out=timed_out
        )

    # ===== Pipeline Events =====

    def guardrail_tripped(
        self,
        suggestion_id: UUID,
        guardrail: str,
        observed: Any,
        threshold: Any
    ) -> None:
        """Log a guardrail failure."""
        self._log(
            logging.WARNING,
            f"Guardrail tripped: {guardrail} (observed={observed}, threshold={threshold})",
            event="guardrail.tripped",
            suggestion_id=str(suggestion_id),
            guardrail=guardrail,
            observed=observed,
            threshold=threshold
        )

    def fallback_triggered(
        self,
        suggestion_id: UUID,
        reason: str
    ) -> None:
        """Log a fallback response."""
        self._log(
            logging.WARNING,
            f"Fallback triggered: {reason}",
            event="fallback.triggered",
            suggestion_id=str(suggestion_id),
            reason=reason
        )

    def suggestion_generated(
        self,
        suggestion_id: UUID,
        confidence: float,
        source_count: int,
        duration_ms: float
    ) -> None:
        """Log a successful suggestion."""
        self._log(
            logging.INFO,
            f"Suggestion generated in {duration_ms:.0f}ms (confidence={confidence:.2f})",
            event="suggestion.generated",
            suggestion_id=str(suggestion_id),
            confidence=confidence,
            source_count=source_count,
            duration_ms=duration_ms
        )

    def pipeline_error(
        self,
        suggestion_id: UUID,
        error: str
    ) -> None:
        """Log an unexpected pipeline error (converted to fallback)."""
        self._log(
            logging.ERROR,
            f"Suggestion generation failed: {error}",
            exc_info=True,
            event="pipeline.error",
            suggestion_id=str(suggestion_id),
            error=error
        )

    def transparency_failed(
        self,
        suggestion_id: UUID,
        error: str
    ) -> None:
        """Log a failed best-effort transparency write."""
        self._log(
            logging.WARNING,
            f"Transparency logging failed: {error}",
            event="transparency.failed",
            suggestion_id=str(suggestion_id),
            error=error
        )

    def transparency_decision(
        self,
        suggestion_id: str,
        action: str,
        payload: dict
    ) -> None:
        """Log an explainability record for an AI-assisted decision."""
        self._log(
            logging.INFO,
            f"AI decision logged: {action}",
            event="transparency.decision",
            suggestion_id=suggestion_id,
            action=action,
            **payload
        )

    # ===== Decision Events =====

    def decision_recorded(
        self,
        suggestion_id: UUID,
        user_id: str,
        decision: str
    ) -> None:
        """Log a user accept/modify/reject decision."""
        self._log(
            logging.INFO,
            f"User decision recorded: {decision}",
            event="decision.recorded",
            suggestion_id=str(suggestion_id),
            user_id=user_id,
            decision=decision
        )

    def decision_rejected(
        self,
        suggestion_id: UUID,
        user_id: str,
        error: str
    ) -> None:
        """Log a refused decision update."""
        self._log(
            logging.WARNING,
            f"Decision update refused: {error}",
            event="decision.rejected",
            suggestion_id=str(suggestion_id),
            user_id=user_id,
            error=error
        )


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Should be called once at application startup.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))

    # Remove existing handlers
    root_logger.handlers = []

    # Add JSON handler for stderr (stdout is reserved for CLI output)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    # Set levels for noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        StructuredLogger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.fallback_triggered(suggestion_id, "low_confidence")
    """
    return StructuredLogger(name)
