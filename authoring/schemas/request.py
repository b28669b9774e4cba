"""
Request schemas - what callers send into the suggestion pipeline.

SuggestionRequest carries raw caller values; the PromptOrchestrator turns it
into a RoutedRequest with typed intent, jurisdictions and output format.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Jurisdiction(str, Enum):
    """The seven British Isles regulatory jurisdictions."""
    ENGLAND = "England"
    SCOTLAND = "Scotland"
    WALES = "Wales"
    NORTHERN_IRELAND = "Northern Ireland"
    ISLE_OF_MAN = "Isle of Man"
    JERSEY = "Jersey"
    GUERNSEY = "Guernsey"


# Regulator per jurisdiction, used in fallback guidance
REGULATORS = {
    Jurisdiction.ENGLAND: "Care Quality Commission (CQC)",
    Jurisdiction.SCOTLAND: "Care Inspectorate",
    Jurisdiction.WALES: "Care Inspectorate Wales (CIW)",
    Jurisdiction.NORTHERN_IRELAND: "Regulation and Quality Improvement Authority (RQIA)",
    Jurisdiction.ISLE_OF_MAN: "Isle of Man Department of Health and Social Care",
    Jurisdiction.JERSEY: "Jersey Care Commission",
    Jurisdiction.GUERNSEY: "Guernsey Committee for Health & Social Care",
}


class Intent(str, Enum):
    """What the user is asking the assistant to do."""
    SUGGEST_CLAUSE = "suggest_clause"
    MAP_POLICY = "map_policy"
    REVIEW_POLICY = "review_policy"
    SUGGEST_IMPROVEMENT = "suggest_improvement"
    VALIDATE_COMPLIANCE = "validate_compliance"


class OutputFormat(str, Enum):
    """Shape of the synthesized suggestion."""
    STRUCTURED_CLAUSE = "structured_clause"
    MAPPING_TABLE = "mapping_table"
    REVIEW_REPORT = "review_report"
    IMPROVEMENT_LIST = "improvement_list"


class RequestingUser(BaseModel):
    """The authenticated caller, as resolved by the user directory."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    organization_id: str = Field(..., min_length=1)


class SuggestionRequest(BaseModel):
    """
    Raw authoring request.

    Values are deliberately untyped strings: the PromptOrchestrator validates
    them so that invalid entries are reported by name.
    """

    intent: str = Field(default="", description="One of the Intent values")
    template_id: Optional[str] = Field(default=None, description="Policy template reference")
    policy_id: Optional[str] = Field(default=None, description="Policy under review/mapping")
    jurisdictions: List[str] = Field(default_factory=list, description="Jurisdiction names")
    context: str = Field(default="", description="Free-text authoring context")
    standards: Optional[List[str]] = Field(default=None, description="Target standard codes")
    user_role: str = Field(default="")
    user_id: str = Field(default="")


class RoutedRequest(BaseModel):
    """A validated request bound to exactly one output format."""

    model_config = ConfigDict(frozen=True)

    intent: Intent
    output_format: OutputFormat
    jurisdictions: List[Jurisdiction]
    context: str
    template_id: Optional[str] = None
    policy_id: Optional[str] = None
    standards: List[str] = Field(default_factory=list)
    user_role: str = ""
    user_id: str = ""
