"""
Services for the Policy Authoring Assistant.

These services implement the suggestion pipeline:
- RolePermissionGuard: Role -> intent permission check
- PromptOrchestrator: Request validation and intent routing
- VerifiedRetriever: Concurrent multi-source retrieval and scoring (CRITICAL)
- ClauseSynthesizer: Template-bound suggestion assembly
- FallbackHandler: Safe responses when a guardrail trips
- SuggestionOrchestrator: The guarded pipeline and its public operations
- InMemoryAuditSink / SqlAuditSink: Append-only suggestion logs
"""

from authoring.services.audit_sink import InMemoryAuditSink, SqlAuditSink
from authoring.services.fallback import FallbackHandler
from authoring.services.knowledge_store import InMemoryKnowledgeStore
from authoring.services.prompt_orchestrator import PromptOrchestrator
from authoring.services.retriever import VerifiedRetriever
from authoring.services.role_guard import RolePermissionGuard, UserRole
from authoring.services.suggestion_orchestrator import SuggestionOrchestrator
from authoring.services.suggestion_renderer import SuggestionRenderer
from authoring.services.synthesizer import ClauseSynthesizer
from authoring.services.transparency import StructuredTransparencyLogger

__all__ = [
    "InMemoryAuditSink",
    "SqlAuditSink",
    "FallbackHandler",
    "InMemoryKnowledgeStore",
    "PromptOrchestrator",
    "VerifiedRetriever",
    "RolePermissionGuard",
    "UserRole",
    "SuggestionOrchestrator",
    "SuggestionRenderer",
    "ClauseSynthesizer",
    "StructuredTransparencyLogger",
]
