"""
Intent routing table.

Every intent maps to exactly one output format and a set of companion
fields it cannot run without. Adding an intent is a new table entry.
"""

from typing import Dict, NamedTuple, Tuple

from authoring.schemas.request import Intent, OutputFormat


class IntentRoute(NamedTuple):
    """Output format and required request fields for one intent."""
    output_format: OutputFormat
    required_fields: Tuple[str, ...]


INTENT_ROUTES: Dict[Intent, IntentRoute] = {
    Intent.SUGGEST_CLAUSE: IntentRoute(OutputFormat.STRUCTURED_CLAUSE, ("template_id",)),
    Intent.MAP_POLICY: IntentRoute(OutputFormat.MAPPING_TABLE, ("policy_id", "standards")),
    Intent.REVIEW_POLICY: IntentRoute(OutputFormat.REVIEW_REPORT, ("policy_id",)),
    Intent.SUGGEST_IMPROVEMENT: IntentRoute(OutputFormat.IMPROVEMENT_LIST, ()),
    Intent.VALIDATE_COMPLIANCE: IntentRoute(OutputFormat.MAPPING_TABLE, ("standards",)),
}

# Human-readable names for validation messages
FIELD_LABELS = {
    "template_id": "Template ID",
    "policy_id": "Policy ID",
    "standards": "standards",
}
