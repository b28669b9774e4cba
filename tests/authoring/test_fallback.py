"""
Tests for fallback responses.
"""

import pytest

from authoring.schemas.request import Intent, Jurisdiction, OutputFormat, RoutedRequest
from authoring.schemas.suggestion import FallbackReason
from authoring.services.fallback import FALLBACK_MESSAGES, FallbackHandler


@pytest.fixture
def handler():
    return FallbackHandler()


@pytest.fixture
def request_for_two_jurisdictions():
    return RoutedRequest(
        intent=Intent.SUGGEST_CLAUSE,
        output_format=OutputFormat.STRUCTURED_CLAUSE,
        jurisdictions=[Jurisdiction.ENGLAND, Jurisdiction.JERSEY],
        context="Medication errors",
        template_id="tmpl-1",
    )


class TestFallbackHandler:
    """Tests for FallbackHandler.generate_fallback."""

    @pytest.mark.parametrize("reason", list(FallbackReason))
    def test_fixed_message_per_reason(self, handler, request_for_two_jurisdictions, reason):
        fallback = handler.generate_fallback(request_for_two_jurisdictions, reason)
        assert fallback.reason == reason
        assert fallback.message == FALLBACK_MESSAGES[reason]
        assert fallback.message.endswith("No policy content has been produced.")
        assert fallback.contact_compliance_officer is True

    def test_regulator_guidance_per_jurisdiction(self, handler, request_for_two_jurisdictions):
        fallback = handler.generate_fallback(
            request_for_two_jurisdictions, FallbackReason.INSUFFICIENT_SOURCES,
        )
        assert fallback.suggested_actions[-2:] == [
            "Refer to current guidance from Care Quality Commission (CQC)",
            "Refer to current guidance from Jersey Care Commission",
        ]
        assert "Consult your compliance officer before drafting this policy section" in fallback.suggested_actions

    def test_reason_actions_come_first(self, handler, request_for_two_jurisdictions):
        fallback = handler.generate_fallback(request_for_two_jurisdictions, FallbackReason.SYSTEM_ERROR)
        assert fallback.suggested_actions[0] == "Try the request again later"

    @pytest.mark.parametrize("reason,escalate", [
        (FallbackReason.INSUFFICIENT_SOURCES, False),
        (FallbackReason.LOW_CONFIDENCE, False),
        (FallbackReason.SAFETY_VALIDATION_FAILED, True),
        (FallbackReason.SYSTEM_ERROR, True),
    ])
    def test_escalation(self, handler, request_for_two_jurisdictions, reason, escalate):
        fallback = handler.generate_fallback(request_for_two_jurisdictions, reason)
        assert fallback.escalation_required is escalate
