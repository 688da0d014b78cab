"""Run member and salary-cycle bump passes against a chain snapshot.

Purpose:
  - Evaluate staleness for one governance body and queue bump transactions.
Inputs:
  - Snapshot DB path, body, sender, pass selection; optional JSON config file.
Outputs:
  - Rows in bump_outbox (or dry-run log lines) and a per-pass summary on stdout.
  - Exit code 1 when any pass failed.
Example:
  - PYTHONPATH=. python3 bumpkeeper/cli/run_bump_pass.py --db chain.db --sender 5Grw... --pass all
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from bumpkeeper.app_api.config import (
    SUBMITTER_CHOICES,
    BumperConfig,
    apply_overrides,
    load_bumper_config,
    parse_passes,
)
from bumpkeeper.app_api.dto import PassOutcome
from bumpkeeper.app_api.factories import build_bump_scheduler, default_body_factory
from bumpkeeper.cli._logging import configure_logging
from bumpkeeper.core.domain.models import CycleBump, MemberBump
from bumpkeeper.core.engine.period_cache import CACHE_POLICIES
from bumpkeeper.infra.sqlite.db import get_connection
from bumpkeeper.infra.sqlite.migrator import apply_migrations

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run governance bump passes")
    parser.add_argument("--config", help="JSON config file (flags override its values)")
    parser.add_argument("--db", help="Chain snapshot SQLite path")
    parser.add_argument("--sender", help="Account that signs queued transactions")
    parser.add_argument("--body", choices=default_body_factory.known_ids(), help="Governance body")
    parser.add_argument("--pass", dest="passes", help="members, cycle, or all (comma-separated)")
    parser.add_argument("--submitter", choices=SUBMITTER_CHOICES, help="Where requests are sent")
    parser.add_argument("--dry-run", action="store_true", help="Shortcut for --submitter dry_run")
    parser.add_argument("--cache-policy", choices=CACHE_POLICIES, help="Rank period table reload policy")
    parser.add_argument("--max-workers", type=int, help="Run passes concurrently when > 1")
    parser.add_argument("--repeat", type=int, help="Number of rounds (0 = run until interrupted)")
    parser.add_argument("--interval", type=float, help="Seconds between rounds")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BumperConfig:
    submitter = "dry_run" if args.dry_run else args.submitter
    passes = parse_passes(args.passes) if args.passes else None
    overrides = dict(
        body=args.body,
        passes=passes,
        submitter=submitter,
        cache_policy=args.cache_policy,
        max_workers=args.max_workers,
        repeat=args.repeat,
        interval_seconds=args.interval,
    )

    if args.config:
        config = load_bumper_config(args.config)
        return apply_overrides(config, db_path=args.db, sender=args.sender, **overrides)

    if not args.db or not args.sender:
        raise ValueError("--db and --sender are required without --config")
    config = BumperConfig(db_path=args.db, sender=args.sender)
    return apply_overrides(config, **overrides)


def format_outcome(outcome: PassOutcome) -> str:
    if not outcome.ok:
        return f"PASS {outcome.pass_name.value}: FAILED {outcome.error}"
    if not outcome.bumps:
        return f"PASS {outcome.pass_name.value}: OK nothing due"
    labels = []
    for bump in outcome.bumps:
        if isinstance(bump, MemberBump):
            labels.append(bump.account_id)
        elif isinstance(bump, CycleBump):
            labels.append(f"cycle#{bump.cycle_index}")
    return (
        f"PASS {outcome.pass_name.value}: OK bumped={len(outcome.bumps)} "
        f"tx={outcome.submitted} [{','.join(labels)}]"
    )


def run(config: BumperConfig) -> bool:
    conn = get_connection(config.db_path, check_same_thread=config.max_workers == 1)
    try:
        apply_migrations(conn)
        scheduler = build_bump_scheduler(
            conn,
            body_id=config.body,
            submitter=config.submitter,
            cache_policy=config.cache_policy,
        )

        all_ok = True
        round_no = 0
        while config.repeat == 0 or round_no < config.repeat:
            if round_no > 0 and config.interval_seconds > 0:
                time.sleep(config.interval_seconds)
            round_no += 1
            outcomes = scheduler.run_all(
                config.sender, passes=config.passes, max_workers=config.max_workers
            )
            print(f"ROUND {round_no} BODY {config.body}")
            for outcome in outcomes:
                print(format_outcome(outcome))
                all_ok = all_ok and outcome.ok
        return all_ok
    finally:
        conn.close()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(debug=args.debug, quiet=args.quiet)
    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(2)

    try:
        ok = run(config)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        raise SystemExit(130)
    raise SystemExit(0 if ok else 1)


if __name__ == "__main__":
    main()
