"""
Fallback Handler Service.

Builds the safe, non-authoritative response returned when a guardrail trips
or the pipeline fails. Messages are fixed strings; a fallback never carries
policy content.
"""

from typing import Dict, List

from authoring.schemas.request import REGULATORS, RoutedRequest
from authoring.schemas.suggestion import FallbackReason, FallbackResponse

FALLBACK_MESSAGES: Dict[FallbackReason, str] = {
    FallbackReason.INSUFFICIENT_SOURCES: (
        "Not enough verified source material was found to support a suggestion. "
        "No policy content has been produced."
    ),
    FallbackReason.LOW_CONFIDENCE: (
        "A suggestion could not be produced with sufficient confidence from the "
        "verified sources available. No policy content has been produced."
    ),
    FallbackReason.SAFETY_VALIDATION_FAILED: (
        "The assembled suggestion did not pass content safety validation and has "
        "been withheld. No policy content has been produced."
    ),
    FallbackReason.SYSTEM_ERROR: (
        "The assistant was unable to complete this request due to a system error. "
        "No policy content has been produced."
    ),
}

# Reason-specific next steps, listed before the general ones
REASON_ACTIONS: Dict[FallbackReason, List[str]] = {
    FallbackReason.INSUFFICIENT_SOURCES: [
        "Add more detail to the request context",
        "Broaden the selected jurisdictions or standards",
    ],
    FallbackReason.LOW_CONFIDENCE: [
        "Rephrase the request using terminology from the relevant standards",
        "Draft the clause manually from the current policy template",
    ],
    FallbackReason.SAFETY_VALIDATION_FAILED: [
        "Escalate to your compliance officer for manual drafting",
    ],
    FallbackReason.SYSTEM_ERROR: [
        "Try the request again later",
        "Report the problem to your system administrator if it persists",
    ],
}

ESCALATING_REASONS = frozenset({
    FallbackReason.SAFETY_VALIDATION_FAILED,
    FallbackReason.SYSTEM_ERROR,
})


class FallbackHandler:
    """Fixed fallback responses keyed by reason."""

    def generate_fallback(
        self,
        request: RoutedRequest,
        reason: FallbackReason,
    ) -> FallbackResponse:
        """
        Build a fallback response.

        Args:
            request: The validated request that could not be served
            reason: Why the pipeline fell back

        Returns:
            FallbackResponse with message, next actions and escalation flags
        """
        actions = list(REASON_ACTIONS[reason])
        actions.append("Consult your compliance officer before drafting this policy section")

        # Point at the regulators for the requested jurisdictions
        for jurisdiction in request.jurisdictions:
            actions.append(f"Refer to current guidance from {REGULATORS[jurisdiction]}")

        return FallbackResponse(
            reason=reason,
            message=FALLBACK_MESSAGES[reason],
            suggested_actions=actions,
            escalation_required=reason in ESCALATING_REASONS,
            contact_compliance_officer=True,
        )
