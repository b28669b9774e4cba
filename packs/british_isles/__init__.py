"""
British Isles Pack - Verified knowledge for care policy authoring.

Seed policy templates, compliance standards and jurisdictional rules for the
seven British Isles jurisdictions.
"""

from .compliance_standards import COMPLIANCE_STANDARDS
from .jurisdictional_rules import JURISDICTIONAL_RULES
from .policy_templates import ALL_JURISDICTIONS, POLICY_TEMPLATES

__all__ = [
    "ALL_JURISDICTIONS",
    "POLICY_TEMPLATES",
    "COMPLIANCE_STANDARDS",
    "JURISDICTIONAL_RULES",
]
