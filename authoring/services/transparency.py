"""
Transparency Logger Service.

Explainability side channel for AI-assisted decisions. Each terminal
pipeline outcome is reported with the same decision metadata as its audit
record. Writes are best-effort; the orchestrator ignores failures here.
"""

from typing import Any, Dict

from authoring.logging import get_logger

logger = get_logger(__name__)

# Keys consumed by the log call itself
RESERVED_KEYS = ("event", "action", "suggestion_id", "level", "message", "exc_info")


class StructuredTransparencyLogger:
    """Transparency logger that emits `transparency.decision` log events."""

    def log_decision(self, event: Dict[str, Any]) -> None:
        """
        Record a decision event.

        Args:
            event: Must contain suggestion_id and action; remaining keys are
                emitted as log fields
        """
        payload = {k: v for k, v in event.items() if k not in RESERVED_KEYS}
        logger.transparency_decision(
            suggestion_id=str(event["suggestion_id"]),
            action=event["action"],
            payload=payload
        )
