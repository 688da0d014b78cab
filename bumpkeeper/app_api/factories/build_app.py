"""Construct a fully wired bump scheduler for one governance body.

Responsibilities:
  - Assemble the chain reader, submitter, and period cache based on config.
Must not:
  - Implement eligibility logic; composition only.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from bumpkeeper.app_api.config import SUBMITTER_CHOICES
from bumpkeeper.app_api.factories.body_factory import GovernanceBodyFactory, default_body_factory
from bumpkeeper.app_api.ports import ChainStateReader, GovernanceBumper, TransactionSubmitter
from bumpkeeper.app_api.scheduler import BumpScheduler
from bumpkeeper.core.engine.period_cache import CachePolicy
from bumpkeeper.infra.sqlite.repos.chain_snapshot_reader import SQLiteChainStateReader
from bumpkeeper.infra.submit.dry_run import DryRunSubmitter
from bumpkeeper.infra.submit.outbox import SQLiteOutboxSubmitter


def build_submitter(conn: sqlite3.Connection, body_id: str, submitter: str) -> TransactionSubmitter:
    if submitter == "outbox":
        return SQLiteOutboxSubmitter(conn, body_id=body_id)
    if submitter == "dry_run":
        return DryRunSubmitter()
    raise ValueError(f"Unknown submitter: {submitter} (expected {', '.join(SUBMITTER_CHOICES)})")


def build_bump_scheduler(
    conn: sqlite3.Connection,
    body_id: str = "fellowship",
    submitter: str = "outbox",
    cache_policy: CachePolicy = "per_pass",
    reader: Optional[ChainStateReader] = None,
    bodies: Optional[GovernanceBodyFactory] = None,
) -> BumpScheduler:
    """
    Composition root: resolve the governance body, wire the snapshot reader and
    submitter, and return the scheduler.
    """
    body = (bodies or default_body_factory).create(body_id)
    if reader is None:
        reader = SQLiteChainStateReader(conn, body_id=body.body_id)
    return BumpScheduler(
        body=body,
        reader=reader,
        submitter=build_submitter(conn, body.body_id, submitter),
        cache_policy=cache_policy,
    )


def build_governance_bumper(
    conn: sqlite3.Connection,
    body_id: str = "fellowship",
    submitter: str = "outbox",
    cache_policy: CachePolicy = "per_pass",
) -> GovernanceBumper:
    return build_bump_scheduler(conn, body_id=body_id, submitter=submitter, cache_policy=cache_policy)
