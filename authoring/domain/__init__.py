"""
Pure domain logic for the suggestion pipeline (no I/O).

- keywords: deterministic keyword extraction
- scoring: relevance and confidence formulas
- extraction: verbatim sentence and list extraction
- routing: intent -> output format table
- guardrails: pipeline state machine and guard functions
"""
