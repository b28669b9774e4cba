"""
British Isles Pack - Policy Templates.

Verified policy templates for care providers. Each template is written to
be jurisdiction-neutral and lists the jurisdictions it has been reviewed for.
"""

from datetime import datetime, timezone

from authoring.schemas.documents import KnowledgeDocument

ALL_JURISDICTIONS = [
    "England",
    "Scotland",
    "Wales",
    "Northern Ireland",
    "Isle of Man",
    "Jersey",
    "Guernsey",
]

POLICY_TEMPLATES = [
    KnowledgeDocument(
        id="tmpl-medication-management",
        title="Medication Management Policy Template",
        version="3.2",
        section="Medication administration and errors",
        jurisdictions=ALL_JURISDICTIONS,
        standard_codes=["NICE-SC1"],
        last_updated=datetime(2026, 3, 2, tzinfo=timezone.utc),
        content=(
            "Only staff who have completed medication training and a competency "
            "assessment may carry out medication administration. "
            "Every medication administration is recorded on the medication "
            "administration record at the time it is given. "
            "All medication errors, near misses and refused doses are recorded "
            "and reported to the registered manager on the same shift to ensure "
            "that the person receiving care is kept safe. "
            "Medication errors are reported to the prescriber and, where required "
            "by the regulator, notified without delay. "
            "The registered manager reviews recorded medication errors monthly so "
            "that learning is shared with the team."
        ),
        metadata={"category": "medication", "owner": "clinical_governance"},
    ),
    KnowledgeDocument(
        id="tmpl-medication-management-2019",
        title="Medication Management Policy Template (2019)",
        version="2.0",
        section="Medication administration",
        jurisdictions=ALL_JURISDICTIONS,
        standard_codes=["NICE-SC1"],
        is_deprecated=True,
        last_updated=datetime(2019, 5, 14, tzinfo=timezone.utc),
        content=(
            "Medication administration is recorded on paper charts. "
            "Medication errors are recorded in the incident book and reported "
            "to the nurse in charge."
        ),
        metadata={"category": "medication", "superseded_by": "tmpl-medication-management"},
    ),
    KnowledgeDocument(
        id="tmpl-safeguarding-adults",
        title="Safeguarding Adults Policy Template",
        version="4.0",
        section="Raising a safeguarding concern",
        jurisdictions=ALL_JURISDICTIONS,
        standard_codes=["CQC-REG13"],
        last_updated=datetime(2026, 1, 20, tzinfo=timezone.utc),
        content=(
            "Any member of staff who suspects abuse or neglect raises a "
            "safeguarding concern with the safeguarding lead immediately. "
            "The safeguarding concern is recorded factually, including what was "
            "seen or heard, the date and the names of those present. "
            "The safeguarding lead refers the concern to the local authority "
            "safeguarding team in order to protect the person from further harm. "
            "Staff complete safeguarding training at induction and refresh it "
            "every year."
        ),
        metadata={"category": "safeguarding", "owner": "registered_manager"},
    ),
    KnowledgeDocument(
        id="tmpl-infection-prevention",
        title="Infection Prevention and Control Policy Template",
        version="2.5",
        section="Standard infection control precautions",
        jurisdictions=ALL_JURISDICTIONS,
        standard_codes=["CQC-REG12"],
        last_updated=datetime(2025, 11, 3, tzinfo=timezone.utc),
        content=(
            "Staff follow standard infection control precautions for every "
            "person, every time. "
            "Hand hygiene is carried out before and after each episode of care "
            "to ensure that infection is not passed between people. "
            "Personal protective equipment is available at the point of care. "
            "Outbreaks of infection are reported to the local health protection "
            "team and recorded in the infection control log."
        ),
        metadata={"category": "infection_control", "owner": "ipc_lead"},
    ),
    KnowledgeDocument(
        id="tmpl-complaints-handling",
        title="Complaints Handling Policy Template",
        version="1.4",
        section="Responding to complaints",
        jurisdictions=ALL_JURISDICTIONS,
        last_updated=datetime(2025, 9, 8, tzinfo=timezone.utc),
        content=(
            "Complaints are acknowledged in writing within three working days. "
            "Each complaint is recorded, investigated by a manager who was not "
            "involved, and answered with a full written response. "
            "The complainant is told how to escalate the complaint to the "
            "regulator or ombudsman because they are entitled to an independent "
            "review."
        ),
        metadata={"category": "complaints", "owner": "registered_manager"},
    ),
]
