"""
Configuration management for the Policy Authoring Assistant.
Uses pydantic-settings for environment-based configuration.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Database (audit trail)
    database_url: str = "sqlite:///./policy_assistant.db"

    # Logging
    log_level: str = "INFO"

    # Application
    app_name: str = "Policy Authoring Assistant"

    # Guardrails
    min_source_references: int = 2
    min_confidence: float = 0.75
    min_safety_confidence: float = 0.7
    human_review_confidence: float = 0.9
    low_confidence_warning: float = 0.7

    # Retrieval
    min_relevance_score: float = 0.7
    max_retrieval_results: int = 10
    retrieval_timeout_seconds: float = 10.0
    include_deprecated: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()


class GuardrailThresholds(BaseModel):
    """
    Guardrail thresholds for one orchestrator instance.

    These are policy decisions that vary by deployment, so they are
    configuration rather than literals. Defaults come from Settings.
    """

    model_config = ConfigDict(frozen=True)

    min_source_references: int = Field(default=2, ge=0)
    min_confidence: float = Field(default=0.75, ge=0.0, le=1.0)
    min_safety_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    human_review_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    min_relevance_score: float = Field(default=0.7, ge=0.0, le=1.0)
    max_retrieval_results: int = Field(default=10, ge=1)
    include_deprecated: bool = False

    @classmethod
    def from_settings(cls, source: Settings = settings) -> "GuardrailThresholds":
        """Build thresholds from application settings."""
        return cls(
            min_source_references=source.min_source_references,
            min_confidence=source.min_confidence,
            min_safety_confidence=source.min_safety_confidence,
            human_review_confidence=source.human_review_confidence,
            min_relevance_score=source.min_relevance_score,
            max_retrieval_results=source.max_retrieval_results,
            include_deprecated=source.include_deprecated,
        )
