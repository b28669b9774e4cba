"""
Policy Authoring Assistant CLI.

Runs the suggestion pipeline against the British Isles seed pack.

Usage:
    python -m authoring.cli suggest --intent suggest_clause --template-id tmpl-medication-management \\
        --jurisdiction England --context "Medication administration errors must be recorded and reported"
    python -m authoring.cli --format markdown suggest ... --db
    python -m authoring.cli decide --suggestion-id <uuid> --user-id cli-user --decision accepted
    python -m authoring.cli history --user-id cli-user --status success
    python -m authoring.cli analytics --organization cli-org --from 2026-01-01 --to 2026-12-31
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from authoring.config import settings
from authoring.database import init_db
from authoring.exceptions import PolicyAssistantError
from authoring.logging import setup_logging
from authoring.schemas.log import HistoryFilters, SuggestionStatus, TimeRange
from authoring.schemas.request import Intent, RequestingUser, SuggestionRequest
from authoring.services.audit_sink import InMemoryAuditSink, SqlAuditSink
from authoring.services.knowledge_store import InMemoryKnowledgeStore
from authoring.services.role_guard import RolePermissionGuard
from authoring.services.suggestion_orchestrator import SuggestionOrchestrator
from authoring.services.suggestion_renderer import SuggestionRenderer
from authoring.services.transparency import StructuredTransparencyLogger
from evals.validators import ContentSafetyValidator
import packs.british_isles as british_isles


def parse_date(date_str: str) -> datetime:
    """Parse date string in YYYY-MM-DD format (UTC)."""
    return datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def sql_sink(database_url: str) -> SqlAuditSink:
    """Audit sink on the given database, creating tables if needed."""
    engine = create_engine(database_url)
    init_db(engine)
    return SqlAuditSink(sessionmaker(autocommit=False, autoflush=False, bind=engine))


def build_orchestrator(audit_sink) -> SuggestionOrchestrator:
    """Orchestrator over the seed pack with the reference collaborators."""
    return SuggestionOrchestrator(
        knowledge_store=InMemoryKnowledgeStore.from_pack(british_isles),
        role_guard=RolePermissionGuard(),
        audit_sink=audit_sink,
        safety_validator=ContentSafetyValidator(),
        transparency_logger=StructuredTransparencyLogger(),
    )


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_suggest(args) -> int:
    """Generate a suggestion."""
    audit_sink = sql_sink(args.database_url) if args.db else InMemoryAuditSink()
    orchestrator = build_orchestrator(audit_sink)

    request = SuggestionRequest(
        intent=args.intent,
        template_id=args.template_id,
        policy_id=args.policy_id,
        jurisdictions=args.jurisdiction or [],
        context=args.context,
        standards=args.standard,
        user_role=args.role,
        user_id=args.user_id,
    )
    try:
        user = RequestingUser(id=args.user_id, role=args.role, organization_id=args.organization)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        print(f"Error: Invalid requesting user: {fields}", file=sys.stderr)
        return 1

    try:
        response = asyncio.run(orchestrator.generate_suggestion(request, user))
    except PolicyAssistantError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == "markdown":
        print(SuggestionRenderer().render_markdown(response))
    else:
        _print_json(response.model_dump(mode="json"))

    return 0


def cmd_decide(args) -> int:
    """Record a user decision on a stored suggestion."""
    orchestrator = build_orchestrator(sql_sink(args.database_url))

    try:
        orchestrator.record_user_decision(
            suggestion_id=args.suggestion_id,
            user_id=args.user_id,
            decision=args.decision,
            modified_content=args.modified_content,
            rejection_reason=args.reason,
        )
    except PolicyAssistantError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Decision recorded: {args.decision}")
    return 0


def cmd_history(args) -> int:
    """List a user's suggestion history."""
    orchestrator = build_orchestrator(sql_sink(args.database_url))

    filters = HistoryFilters(
        intent=Intent(args.intent) if args.intent else None,
        jurisdiction=args.jurisdiction,
        start_date=parse_date(args.from_date) if args.from_date else None,
        end_date=parse_date(args.to_date) if args.to_date else None,
        status=SuggestionStatus(args.status) if args.status else None,
    )
    records = orchestrator.get_suggestion_history(args.user_id, filters)

    if args.format == "markdown":
        print(f"# Suggestion history for {args.user_id}\n")
        for record in records:
            print(
                f"- {record.created_at:%Y-%m-%d %H:%M} `{record.id}` {record.intent.value} "
                f"({record.status.value}, decision: {record.decision.override_decision.value})"
            )
    else:
        _print_json([record.model_dump(mode="json") for record in records])

    return 0


def cmd_analytics(args) -> int:
    """Show usage analytics for an organization."""
    orchestrator = build_orchestrator(sql_sink(args.database_url))

    end = parse_date(args.to_date) + timedelta(days=1) if args.to_date else datetime.now(timezone.utc)
    start = parse_date(args.from_date) if args.from_date else end - timedelta(days=30)

    try:
        time_range = TimeRange(start=start, end=end)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    analytics = orchestrator.get_usage_analytics(args.organization, time_range)

    if args.format == "markdown":
        print(f"# Usage analytics for {analytics.organization_id}\n")
        print(f"- Total suggestions: {analytics.total_suggestions}")
        print(f"- Success rate: {analytics.success_rate:.1f}%")
        print(f"- Acceptance rate: {analytics.acceptance_rate:.1f}%")
        print(f"- Modification rate: {analytics.modification_rate:.1f}%")
        print(f"- Rejection rate: {analytics.rejection_rate:.1f}%")
        print(f"- Average confidence: {analytics.average_confidence:.2f}")
    else:
        _print_json(analytics.model_dump(mode="json"))

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="authoring",
        description="Verified-source policy authoring assistant",
    )
    parser.add_argument("--database-url", default=settings.database_url, help="Audit database URL")
    parser.add_argument("--format", choices=["json", "markdown"], default="json", help="Output format")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Suggest command
    suggest_parser = subparsers.add_parser("suggest", help="Generate a policy suggestion")
    suggest_parser.add_argument("--intent", required=True, help="Intent (suggest_clause, map_policy, ...)")
    suggest_parser.add_argument("--jurisdiction", action="append", help="Jurisdiction (repeatable)")
    suggest_parser.add_argument("--context", required=True, help="Free-text authoring context")
    suggest_parser.add_argument("--template-id", help="Policy template reference")
    suggest_parser.add_argument("--policy-id", help="Policy under review or mapping")
    suggest_parser.add_argument("--standard", action="append", help="Target standard code (repeatable)")
    suggest_parser.add_argument("--user-id", default="cli-user", help="Requesting user id")
    suggest_parser.add_argument("--role", default="compliance_officer", help="Requesting user role")
    suggest_parser.add_argument("--organization", default="cli-org", help="Requesting organization id")
    suggest_parser.add_argument("--db", action="store_true", help="Write the audit record to the database")

    # Decide command
    decide_parser = subparsers.add_parser("decide", help="Accept, modify or reject a suggestion")
    decide_parser.add_argument("--suggestion-id", required=True, help="Suggestion id")
    decide_parser.add_argument("--user-id", required=True, help="Original requester id")
    decide_parser.add_argument("--decision", required=True, help="accepted, modified or rejected")
    decide_parser.add_argument("--modified-content", help="Edited content (for 'modified')")
    decide_parser.add_argument("--reason", help="Rejection reason (for 'rejected')")

    # History command
    history_parser = subparsers.add_parser("history", help="List a user's suggestion history")
    history_parser.add_argument("--user-id", required=True, help="Requester id")
    history_parser.add_argument("--intent", choices=[i.value for i in Intent], help="Filter by intent")
    history_parser.add_argument("--jurisdiction", help="Filter by jurisdiction")
    history_parser.add_argument("--status", choices=[s.value for s in SuggestionStatus], help="Filter by status")
    history_parser.add_argument("--from", dest="from_date", help="Start date (YYYY-MM-DD)")
    history_parser.add_argument("--to", dest="to_date", help="End date (YYYY-MM-DD)")

    # Analytics command
    analytics_parser = subparsers.add_parser("analytics", help="Organization usage analytics")
    analytics_parser.add_argument("--organization", required=True, help="Organization id")
    analytics_parser.add_argument("--from", dest="from_date", help="Start date (YYYY-MM-DD)")
    analytics_parser.add_argument("--to", dest="to_date", help="End date (YYYY-MM-DD, inclusive)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging()

    if args.command == "suggest":
        return cmd_suggest(args)
    elif args.command == "decide":
        return cmd_decide(args)
    elif args.command == "history":
        return cmd_history(args)
    elif args.command == "analytics":
        return cmd_analytics(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
