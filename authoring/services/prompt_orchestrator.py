"""
Prompt Orchestrator Service.

Validates an incoming request and binds it to exactly one output format
based on its declared intent.
"""

from typing import List

from authoring.domain.routing import FIELD_LABELS, INTENT_ROUTES
from authoring.exceptions import RequestValidationError
from authoring.logging import get_logger
from authoring.schemas.request import Intent, Jurisdiction, RoutedRequest, SuggestionRequest

logger = get_logger(__name__)

VALID_JURISDICTIONS = {j.value: j for j in Jurisdiction}


class PromptOrchestrator:
    """
    Request validation and intent routing.

    Validation order:
    1. intent, jurisdictions and context are present
    2. every jurisdiction belongs to the fixed set
    3. intent is known
    4. intent-specific companion fields are present
    """

    def route(self, request: SuggestionRequest) -> RoutedRequest:
        """
        Validate and route a request.

        Args:
            request: Raw suggestion request

        Returns:
            RoutedRequest with typed values and stamped output format

        Raises:
            RequestValidationError: If any check fails
        """
        # Step 1: Required fields
        missing = []
        if not request.intent:
            missing.append("intent")
        if not request.jurisdictions:
            missing.append("jurisdictions")
        if not request.context or not request.context.strip():
            missing.append("context")
        if missing:
            raise RequestValidationError(
                f"Invalid prompt: missing required fields: {', '.join(missing)}"
            )

        # Step 2: Jurisdictions
        jurisdictions = self._validate_jurisdictions(request.jurisdictions)

        # Step 3: Intent lookup
        try:
            intent = Intent(request.intent)
        except ValueError:
            raise RequestValidationError(
                f"Unknown intent: {request.intent}",
                invalid_values=[request.intent],
            )
        route = INTENT_ROUTES[intent]

        # Step 4: Companion fields
        standards = [s.strip() for s in (request.standards or []) if s and s.strip()]
        provided = {
            "template_id": bool(request.template_id),
            "policy_id": bool(request.policy_id),
            "standards": bool(standards),
        }
        absent = [field for field in route.required_fields if not provided[field]]
        if absent:
            labels = " and ".join(FIELD_LABELS[field] for field in absent)
            raise RequestValidationError(f"{labels} required for {intent.value}")

        routed = RoutedRequest(
            intent=intent,
            output_format=route.output_format,
            jurisdictions=jurisdictions,
            context=request.context.strip(),
            template_id=request.template_id,
            policy_id=request.policy_id,
            standards=standards,
            user_role=request.user_role,
            user_id=request.user_id,
        )

        logger.prompt_routed(intent=intent.value, output_format=route.output_format.value)
        return routed

    def _validate_jurisdictions(self, values: List[str]) -> List[Jurisdiction]:
        """Map names to Jurisdiction, reporting every invalid entry."""
        invalid = [value for value in values if value not in VALID_JURISDICTIONS]
        if invalid:
            raise RequestValidationError(
                f"Invalid jurisdictions: {', '.join(str(v) for v in invalid)}",
                invalid_values=invalid,
            )

        # De-duplicate, keep caller order
        seen = []
        for value in values:
            jurisdiction = VALID_JURISDICTIONS[value]
            if jurisdiction not in seen:
                seen.append(jurisdiction)
        return seen
