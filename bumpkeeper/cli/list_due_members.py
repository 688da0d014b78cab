"""Report per-member and salary-cycle bump decisions without submitting.

Purpose:
  - Show why each member is or is not due, for operators auditing a body.
Inputs:
  - Snapshot DB path (opened read-only) and governance body.
Outputs:
  - One line per member, a cycle line, and totals on stdout.
  - With --show-outbox, the pending outbox rows for the body.
Example:
  - PYTHONPATH=. python3 bumpkeeper/cli/list_due_members.py --db chain.db --due-only
"""

from __future__ import annotations

import argparse
import sqlite3
import sys
from collections import Counter
from typing import List, Optional

from bumpkeeper.app_api.factories import build_bump_scheduler, default_body_factory
from bumpkeeper.cli._logging import configure_logging
from bumpkeeper.core.domain.enums import REASON_METADATA
from bumpkeeper.core.domain.errors import BumpError
from bumpkeeper.core.engine.result import MemberEvaluation
from bumpkeeper.infra.sqlite.db import get_readonly_connection
from bumpkeeper.infra.sqlite.repos.bump_outbox_repo import BumpOutboxRepo


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List bump decisions for a governance body")
    parser.add_argument("--db", required=True, help="Chain snapshot SQLite path")
    parser.add_argument("--body", default="fellowship", choices=default_body_factory.known_ids())
    parser.add_argument("--due-only", action="store_true", help="Only print members that are due")
    parser.add_argument("--explain", action="store_true", help="Append reason messages")
    parser.add_argument(
        "--show-outbox", action="store_true", help="List requests still pending in the outbox"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def format_member(evaluation: MemberEvaluation, explain: bool = False) -> str:
    period = "-" if evaluation.demotion_period is None else str(evaluation.demotion_period)
    line = (
        f"{evaluation.account_id} rank={evaluation.rank} period={period} "
        f"elapsed={evaluation.elapsed} due={'yes' if evaluation.due else 'no'} "
        f"reason={evaluation.reason.value}"
    )
    if explain:
        line += f" ({REASON_METADATA[evaluation.reason]['message']})"
    return line


def print_outbox(conn: sqlite3.Connection, body_id: str) -> None:
    try:
        pending = BumpOutboxRepo(conn).list_pending(body_id)
    except sqlite3.Error as exc:
        print(f"ERROR: outbox: {exc}", file=sys.stderr)
        raise SystemExit(1)
    print(f"OUTBOX PENDING: {len(pending)}")
    for tx_id, sender, request_json in pending:
        print(f"  {tx_id} sender={sender} {request_json}")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(debug=args.debug, quiet=not args.debug)

    try:
        conn = get_readonly_connection(args.db)
    except sqlite3.Error as exc:
        print(f"ERROR: cannot open {args.db}: {exc}", file=sys.stderr)
        raise SystemExit(1)
    try:
        scheduler = build_bump_scheduler(conn, body_id=args.body, submitter="dry_run")
        try:
            evaluations = scheduler.evaluate_members()
        except BumpError as exc:
            print(f"ERROR: members: {exc}", file=sys.stderr)
            raise SystemExit(1)

        reasons: Counter = Counter()
        for evaluation in evaluations:
            reasons[evaluation.reason.value] += 1
            if args.due_only and not evaluation.due:
                continue
            print(format_member(evaluation, explain=args.explain))

        due_count = sum(1 for evaluation in evaluations if evaluation.due)
        print(f"MEMBERS: {len(evaluations)} DUE: {due_count}")
        for reason, count in sorted(reasons.items(), key=lambda x: (-x[1], x[0])):
            print(f"  {reason}: {count}")

        try:
            cycle = scheduler.evaluate_cycle()
        except BumpError as exc:
            print(f"ERROR: cycle: {exc}", file=sys.stderr)
            raise SystemExit(1)
        print(
            f"CYCLE {cycle.cycle_index}: ends_after={cycle.cycle_end} now={cycle.current_block} "
            f"due={'yes' if cycle.due else 'no'}"
        )

        if args.show_outbox:
            print_outbox(conn, args.body)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
