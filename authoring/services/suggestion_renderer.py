"""
Suggestion Renderer Service.

Renders suggestion responses as Markdown review sheets for the human
reviewer: the suggestion body, its source citations and any warnings.
"""

from typing import Any, Dict

from jinja2 import DictLoader, Environment, StrictUndefined

from authoring.domain.scoring import relevance_band
from authoring.schemas.suggestion import SuggestionResponse

REVIEW_SHEET = """\
# Policy suggestion {{ response.id }}

- **Generated:** {{ response.metadata.generated_at.strftime("%Y-%m-%d %H:%M:%S UTC") }}
- **Jurisdictions:** {{ jurisdictions | join(", ") or "n/a" }}
- **Documents retrieved:** {{ response.metadata.retrieved_documents }}
- **Confidence:** {{ "%.2f" | format(response.confidence) }}
- **Human review required:** {{ "yes" if response.requires_human_review else "no" }}

{% if response.fallback_used -%}
## No suggestion produced

> {{ response.fallback_message }}

Reason: `{{ response.fallback_reason.value if response.fallback_reason else "unknown" }}`

### Suggested next steps
{% for action in response.suggested_actions %}
- {{ action }}
{%- endfor %}
{%- else -%}
{% include "body_" ~ body ~ ".md" %}

## Sources
| # | Type | Title | Version | Relevance | Status |
|---|------|-------|---------|-----------|--------|
{% for ref in response.source_references -%}
| {{ loop.index }} | {{ ref.type.value }} | {{ ref.title }} | {{ ref.version }} | {{ "%.2f" | format(ref.relevance_score) }} ({{ band(ref.relevance_score) }}) | {{ ref.verification_status.value }} |
{% endfor %}
{%- if response.warnings %}
## Warnings
{% for warning in response.warnings %}
- {{ warning }}
{%- endfor %}
{% endif %}
{%- endif %}
"""

BODY_CLAUSE = """\
## {{ suggestion.clause.title }}

{{ suggestion.clause.text }}

**Rationale:** {{ suggestion.clause.rationale }}
"""

BODY_MAPPING = """\
## Standards mapping

Coverage: {{ "%.0f" | format(suggestion.coverage * 100) }}%{% if suggestion.gaps %} (gaps: {{ suggestion.gaps | join(", ") }}){% endif %}

{% for row in suggestion.rows -%}
### {{ row.title }} ({{ row.standard_codes | join(", ") }})
{% for clause in row.clauses %}
- {{ clause }}
{%- endfor %}

{% endfor -%}
"""

BODY_REVIEW = """\
## Review report

Compliance status: **{{ suggestion.compliance_status }}**

### Findings
{% for finding in suggestion.findings %}
- [{{ finding.severity }}] {{ finding.title }}: {{ finding.excerpt }}
{%- endfor %}

### Recommendations
{% for item in suggestion.recommendations %}
{{ item.rank }}. {{ item.recommendation }}
{%- endfor %}
"""

BODY_IMPROVEMENTS = """\
## Suggested improvements
{% for item in suggestion.improvements %}
{{ item.priority }}. **{{ item.title }}** (impact: {{ item.estimated_impact }}): {{ item.suggestion }}
{%- endfor %}
"""

TEMPLATES = {
    "review_sheet.md": REVIEW_SHEET,
    "body_clause.md": BODY_CLAUSE,
    "body_mapping.md": BODY_MAPPING,
    "body_review.md": BODY_REVIEW,
    "body_improvements.md": BODY_IMPROVEMENTS,
}


class SuggestionRenderer:
    """
    Render suggestion responses to Markdown.

    Templates are held in memory; the body template is chosen from the
    shape of the suggestion content.
    """

    def __init__(self):
        self.env = Environment(
            loader=DictLoader(TEMPLATES),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render_markdown(self, response: SuggestionResponse) -> str:
        """
        Render a response as a Markdown review sheet.

        Args:
            response: Suggestion or fallback response

        Returns:
            Markdown string
        """
        template = self.env.get_template("review_sheet.md")
        return template.render(**self._prepare_context(response))

    def _prepare_context(self, response: SuggestionResponse) -> Dict[str, Any]:
        suggestion = response.suggestion or {}
        return {
            "response": response,
            "suggestion": suggestion,
            "body": self._body_kind(suggestion),
            "jurisdictions": [j.value for j in response.metadata.jurisdiction_context],
            "band": relevance_band,
        }

    @staticmethod
    def _body_kind(suggestion: Dict[str, Any]) -> str:
        if "clause" in suggestion:
            return "clause"
        if "rows" in suggestion:
            return "mapping"
        if "findings" in suggestion:
            return "review"
        return "improvements"
