"""CLI tool for contact matching and duplicate detection."""

import argparse
import json
import sys

import pandas as pd
import structlog

from contactmatch.config import MatchConfig
from contactmatch.io import read_candidates, result_row, write_rows
from contactmatch.logging import configure_logging
from contactmatch.matcher import ContactMatcher
from contactmatch.query import InvalidCriteriaError, build_search_query
from contactmatch.types import MatchCriteria

_CRITERIA_ARGS = [
    ("first_name", "--first-name"),
    ("last_name", "--last-name"),
    ("email", "--email"),
    ("secondary_email", "--secondary-email"),
    ("phone", "--phone"),
    ("street", "--street"),
    ("city", "--city"),
    ("state", "--state"),
    ("zip", "--zip"),
]


def _add_criteria_args(parser: argparse.ArgumentParser) -> None:
    for dest, flag in _CRITERIA_ARGS:
        parser.add_argument(flag, dest=dest, help=f"Criteria {dest.replace('_', ' ')}")


def _criteria_from_args(args: argparse.Namespace) -> MatchCriteria:
    return MatchCriteria(**{dest: getattr(args, dest) for dest, _ in _CRITERIA_ARGS})


def _build_config(args: argparse.Namespace) -> MatchConfig:
    config = MatchConfig()
    if getattr(args, "min_confidence", None) is not None:
        config.thresholds.min_confidence = args.min_confidence
    if getattr(args, "secondary_email_field", None):
        config.query.secondary_email_field = args.secondary_email_field
    return config


def cmd_match(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    config = _build_config(args)
    criteria = _criteria_from_args(args)

    candidates = read_candidates(args.candidates, config.query)
    log.info("candidates_loaded", path=args.candidates, count=len(candidates))

    matcher = ContactMatcher(config)
    result = matcher.find_best_match(criteria, candidates)

    if args.json:
        print(json.dumps({"match": result.to_dict() if result else None}, indent=2))
        return

    if result is None:
        print(f"No match at confidence >= {config.thresholds.min_confidence}")
        return

    print(f"Match: {result.contact_name} ({result.contact_id})")
    print(f"Confidence: {result.confidence_score}")
    print(f"Matched fields: {', '.join(result.matched_fields)}")
    if result.fields_to_update:
        print("Fields to update:")
        for name, value in result.fields_to_update.items():
            print(f"  {name}: {value}")


def cmd_query(args: argparse.Namespace) -> None:
    config = _build_config(args)
    try:
        print(build_search_query(_criteria_from_args(args), config.query))
    except InvalidCriteriaError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


def cmd_dupes(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    config = _build_config(args)

    candidates = read_candidates(args.candidates, config.query)
    log.info("candidates_loaded", path=args.candidates, count=len(candidates))

    matcher = ContactMatcher(config)
    pairs = matcher.find_duplicates(candidates)

    rows = [
        result_row(result, source_id=contact.id, source_name=contact.display_name)
        for contact, result in pairs
    ]
    print(f"=== Probable duplicates ({len(rows)}) ===")
    if not rows:
        print("  No duplicates found.")
        return

    df = pd.DataFrame(rows)
    print(df[["source_id", "source_name", "contact_id", "contact_name", "confidence_score"]].to_string(index=False))

    if args.output:
        write_rows(rows, args.output)
        print(f"\nSaved to: {args.output}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the HTTP API."""
    import uvicorn

    from contactmatch.server import create_app

    log = structlog.get_logger()
    log.info("server_start", host=args.host, port=args.port)
    app = create_app(_build_config(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


def main(argv: list[str] | None = None) -> None:
    # Parent parser with global options (inherited by all subcommands)
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )
    parent_parser.add_argument(
        "--secondary-email-field",
        help="CRM field holding the secondary email (default: Secondary_Email__c)",
    )

    # Subcommand copies of the global options must not override values given
    # before the subcommand name
    sub_parent_parser = argparse.ArgumentParser(add_help=False)
    sub_parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=argparse.SUPPRESS,
        help="Set logging level (default: INFO)",
    )
    sub_parent_parser.add_argument(
        "--secondary-email-field",
        default=argparse.SUPPRESS,
        help="CRM field holding the secondary email (default: Secondary_Email__c)",
    )

    parser = argparse.ArgumentParser(
        description="Contact matching CLI",
        parents=[parent_parser],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", parents=[sub_parent_parser], help="Match criteria against a contact export")
    match_parser.add_argument("--candidates", required=True, help="Contact export (.csv, .jsonl or .xlsx)")
    match_parser.add_argument("--min-confidence", type=int, help="Minimum confidence (default: 70)")
    match_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_criteria_args(match_parser)
    match_parser.set_defaults(func=cmd_match)

    query_parser = subparsers.add_parser("query", parents=[sub_parent_parser], help="Print the SOQL search query")
    _add_criteria_args(query_parser)
    query_parser.set_defaults(func=cmd_query)

    dupes_parser = subparsers.add_parser("dupes", parents=[sub_parent_parser], help="Find duplicate contacts in an export")
    dupes_parser.add_argument("--candidates", required=True, help="Contact export (.csv, .jsonl or .xlsx)")
    dupes_parser.add_argument("--min-confidence", type=int, help="Minimum confidence (default: 70)")
    dupes_parser.add_argument("--output", help="Write duplicate pairs to this file")
    dupes_parser.set_defaults(func=cmd_dupes)

    serve_parser = subparsers.add_parser("serve", parents=[sub_parent_parser], help="Run the HTTP API")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8765, help="Server port (default: 8765)")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_output=args.command == "serve")
    args.func(args)


if __name__ == "__main__":
    main()
