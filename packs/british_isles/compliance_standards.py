"""
British Isles Pack - Compliance Standards.

Regulator standards summarised as itemised requirements. Item lists are the
unit the mapping table is built from, so every standard keeps its
requirements as a numbered or bulleted list.
"""

from datetime import datetime, timezone

from authoring.schemas.documents import KnowledgeDocument

COMPLIANCE_STANDARDS = [
    KnowledgeDocument(
        id="std-cqc-reg12",
        title="CQC Regulation 12: Safe care and treatment",
        version="2024.1",
        section="Proper and safe management of medicines",
        jurisdictions=["England"],
        standard_codes=["CQC-REG12"],
        last_updated=datetime(2026, 2, 10, tzinfo=timezone.utc),
        content=(
            "Providers must make sure that medication administration is safe and "
            "that medication errors are recorded and reported.\n"
            "1. Medication administration is carried out by trained and competent staff.\n"
            "2. Medication administration records are accurate and complete.\n"
            "3. Medication errors are recorded, reported and investigated.\n"
            "4. Learning from medication errors is shared to prevent recurrence.\n"
            "5. Medicines are stored securely at the correct temperature.\n"
            "6. Controlled drugs are recorded in a controlled drugs register."
        ),
        metadata={"regulator": "CQC"},
    ),
    KnowledgeDocument(
        id="std-cqc-reg13",
        title="CQC Regulation 13: Safeguarding service users from abuse",
        version="2024.1",
        section="Safeguarding systems and processes",
        jurisdictions=["England"],
        standard_codes=["CQC-REG13"],
        last_updated=datetime(2026, 2, 10, tzinfo=timezone.utc),
        content=(
            "Providers must protect people from abuse and improper treatment.\n"
            "1. A safeguarding concern is raised and recorded without delay.\n"
            "2. Safeguarding concerns are referred to the local authority.\n"
            "3. Staff receive safeguarding training appropriate to their role.\n"
            "4. Safeguarding records are kept securely."
        ),
        metadata={"regulator": "CQC"},
    ),
    KnowledgeDocument(
        id="std-nice-sc1",
        title="NICE SC1: Managing medicines in care homes",
        version="2014.3",
        section="Medication errors and incidents",
        jurisdictions=["England", "Wales"],
        standard_codes=["NICE-SC1"],
        last_updated=datetime(2025, 12, 1, tzinfo=timezone.utc),
        content=(
            "Care home providers should have a process for medication errors.\n"
            "- Medication errors and near misses are recorded and reported.\n"
            "- Medication administration records are checked after each round.\n"
            "- Reported medication errors are reviewed for trends.\n"
            "- Staff involved in medication errors receive support and retraining."
        ),
        metadata={"publisher": "NICE"},
    ),
    KnowledgeDocument(
        id="std-hscs-medication",
        title="Health and Social Care Standards: Medication support",
        version="2017.2",
        section="Standard 1.24",
        jurisdictions=["Scotland"],
        standard_codes=["HSCS-1.24"],
        last_updated=datetime(2025, 10, 15, tzinfo=timezone.utc),
        content=(
            "People get the right medication at the right time.\n"
            "1. Medication administration is recorded for every dose.\n"
            "2. Medication errors are recorded and reported to the Care Inspectorate where required.\n"
            "3. People are involved in decisions about their medication."
        ),
        metadata={"regulator": "Care Inspectorate"},
    ),
    KnowledgeDocument(
        id="std-ciw-reg58",
        title="CIW Regulation 58: Arrangements for medicines",
        version="2019.1",
        section="Medicines administration",
        jurisdictions=["Wales"],
        standard_codes=["CIW-REG58"],
        last_updated=datetime(2025, 8, 22, tzinfo=timezone.utc),
        content=(
            "The service provider must have arrangements for the safe administration of medication.\n"
            "1. Medication administration is recorded accurately.\n"
            "2. Medication errors are recorded, reported and reviewed.\n"
            "3. Medication is administered by staff who are competent to do so."
        ),
        metadata={"regulator": "CIW"},
    ),
    KnowledgeDocument(
        id="std-rqia-std28",
        title="RQIA Care Standards: Standard 28 Management of medicines",
        version="2015.1",
        section="Medicines records",
        jurisdictions=["Northern Ireland"],
        standard_codes=["RQIA-STD28"],
        last_updated=datetime(2025, 7, 30, tzinfo=timezone.utc),
        content=(
            "Medicines are handled safely and securely.\n"
            "1. Medication administration records are maintained for each resident.\n"
            "2. Medication errors are recorded and reported to RQIA.\n"
            "3. Medicines audits are carried out and recorded."
        ),
        metadata={"regulator": "RQIA"},
    ),
    KnowledgeDocument(
        id="std-crown-dependencies-medication",
        title="Crown Dependencies Care Standards: Medication",
        version="2023.1",
        section="Medication management",
        jurisdictions=["Isle of Man", "Jersey", "Guernsey"],
        standard_codes=["JCC-STD7", "IOM-MED1", "GSY-MED1"],
        last_updated=datetime(2026, 1, 5, tzinfo=timezone.utc),
        content=(
            "Registered providers manage medication safely.\n"
            "* Medication administration is recorded at the time of administration.\n"
            "* Medication errors are recorded and reported to the regulator.\n"
            "* Medication policies are reviewed at least every two years."
        ),
        metadata={"regulator": "Crown Dependencies"},
    ),
]
