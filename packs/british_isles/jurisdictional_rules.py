"""
British Isles Pack - Jurisdictional Rules.

Rules that apply in one jurisdiction only: notification duties, record
retention and regulator-specific reporting routes.
"""

from datetime import datetime, timezone

from authoring.schemas.documents import KnowledgeDocument

JURISDICTIONAL_RULES = [
    KnowledgeDocument(
        id="rule-england-medication-notification",
        title="England: Notifying the CQC of medication errors",
        version="1.3",
        section="Statutory notifications",
        jurisdictions=["England"],
        last_updated=datetime(2026, 2, 18, tzinfo=timezone.utc),
        content=(
            "Medication errors that cause harm are reported to the CQC as a "
            "statutory notification. "
            "The medication administration record and the recorded medication "
            "errors are kept for inspection. "
            "Medication errors are reported to the local safeguarding team when "
            "they amount to neglect."
        ),
        metadata={"regulator": "CQC"},
    ),
    KnowledgeDocument(
        id="rule-scotland-notifications",
        title="Scotland: Care Inspectorate notifications",
        version="1.1",
        section="Notifications",
        jurisdictions=["Scotland"],
        last_updated=datetime(2025, 11, 12, tzinfo=timezone.utc),
        content=(
            "Medication errors resulting in harm are recorded and reported to "
            "the Care Inspectorate through the eForms notification system. "
            "Medication administration records are retained for inspection."
        ),
        metadata={"regulator": "Care Inspectorate"},
    ),
    KnowledgeDocument(
        id="rule-wales-notifications",
        title="Wales: CIW notification of incidents",
        version="1.0",
        section="Notifications",
        jurisdictions=["Wales"],
        last_updated=datetime(2025, 9, 1, tzinfo=timezone.utc),
        content=(
            "Serious medication errors are reported to Care Inspectorate Wales "
            "and recorded in the service's incident log. "
            "Medication administration records are available in Welsh on request."
        ),
        metadata={"regulator": "CIW"},
    ),
    KnowledgeDocument(
        id="rule-northern-ireland-notifications",
        title="Northern Ireland: RQIA notifiable events",
        version="1.2",
        section="Notifiable events",
        jurisdictions=["Northern Ireland"],
        last_updated=datetime(2025, 10, 2, tzinfo=timezone.utc),
        content=(
            "Medication errors are notifiable events and are reported to RQIA "
            "within 24 hours. "
            "Recorded medication errors are reviewed by the registered manager."
        ),
        metadata={"regulator": "RQIA"},
    ),
    KnowledgeDocument(
        id="rule-isle-of-man-registration",
        title="Isle of Man: Regulation of Care Act reporting",
        version="1.0",
        section="Reporting duties",
        jurisdictions=["Isle of Man"],
        last_updated=datetime(2025, 6, 19, tzinfo=timezone.utc),
        content=(
            "Medication errors are recorded and reported to the Registration "
            "and Inspection Team of the Department of Health and Social Care."
        ),
        metadata={"regulator": "Isle of Man DHSC"},
    ),
    KnowledgeDocument(
        id="rule-jersey-notifications",
        title="Jersey: Care Commission notifications",
        version="1.0",
        section="Notifications",
        jurisdictions=["Jersey"],
        last_updated=datetime(2025, 12, 9, tzinfo=timezone.utc),
        content=(
            "Medication errors are recorded and reported to the Jersey Care "
            "Commission where a person has been harmed."
        ),
        metadata={"regulator": "Jersey Care Commission"},
    ),
    KnowledgeDocument(
        id="rule-guernsey-notifications",
        title="Guernsey: Committee for Health & Social Care reporting",
        version="1.0",
        section="Notifications",
        jurisdictions=["Guernsey"],
        last_updated=datetime(2025, 12, 9, tzinfo=timezone.utc),
        content=(
            "Medication errors are recorded and reported to the Committee for "
            "Health & Social Care in line with the Regulation of Health and Care "
            "Law."
        ),
        metadata={"regulator": "Guernsey HSC"},
    ),
]
