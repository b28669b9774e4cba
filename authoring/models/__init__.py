"""
SQLAlchemy ORM models for the Policy Authoring Assistant.

Import all models here to ensure they're registered with Base.metadata.
"""

from authoring.models.suggestion_log import SuggestionDecision, SuggestionLog

__all__ = [
    "SuggestionLog",
    "SuggestionDecision",
]
