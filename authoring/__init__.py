"""
Policy Authoring Assistant - verified-source suggestion pipeline.

Suggestions are assembled exclusively from retrieved, pre-verified
knowledge documents. Nothing is generated free-form.

Pipeline:
    role check -> prompt routing -> retrieval -> synthesis
    -> confidence/safety guardrails -> success or fallback -> audit log
"""

__version__ = "0.1.0"
