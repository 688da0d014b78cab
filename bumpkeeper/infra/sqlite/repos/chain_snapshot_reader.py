"""SQLite-backed ChainStateReader over an indexed chain snapshot.

Responsibilities:
  - Query member, rank, params, and salary rows for one governance body.
  - Decode rows into typed records once, at this boundary.
Must not:
  - Decide eligibility; data access only.

Malformed member rows are skipped with a warning. Missing or malformed
params/salary rows raise, since no decision can be made without them.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List

from bumpkeeper.app_api.ports import ChainStateReader
from bumpkeeper.core.domain.errors import DataUnavailable, MalformedRecord
from bumpkeeper.core.domain.models import (
    CyclePeriods,
    CycleStatus,
    MemberRecord,
    RankPeriodTable,
    RankRecord,
)
from bumpkeeper.infra.chain.decode import (
    decode_cycle_periods,
    decode_cycle_status,
    decode_member_record,
    decode_rank_period_table,
    decode_rank_record,
    parse_chain_int,
)

logger = logging.getLogger(__name__)


class SQLiteChainStateReader(ChainStateReader):
    def __init__(self, conn: sqlite3.Connection, body_id: str) -> None:
        self._conn = conn
        self._body = body_id

    def _fetchall(self, sql: str, params: tuple = ()) -> list:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise DataUnavailable(f"snapshot query failed: {exc}") from exc

    def _fetchone(self, sql: str, what: str) -> tuple:
        rows = self._fetchall(sql, (self._body,))
        if not rows:
            raise DataUnavailable(f"{what} not available for body '{self._body}'")
        return rows[0]

    def get_current_block(self) -> int:
        rows = self._fetchall("SELECT block_number FROM chain_head WHERE id = 1")
        if not rows:
            raise DataUnavailable("chain head not available")
        return parse_chain_int(rows[0][0], "block_number")

    def list_members(self) -> List[MemberRecord]:
        rows = self._fetchall(
            "SELECT account_id, info_json FROM collective_member WHERE body=? ORDER BY rowid",
            (self._body,),
        )
        members: List[MemberRecord] = []
        for account_id, info_json in rows:
            try:
                members.append(decode_member_record(account_id, info_json))
            except MalformedRecord as exc:
                logger.warning("Skipping malformed member record: %s", exc)
        return members

    def list_ranks(self) -> List[RankRecord]:
        rows = self._fetchall(
            "SELECT account_id, rank FROM collective_rank WHERE body=? ORDER BY rowid",
            (self._body,),
        )
        ranks: List[RankRecord] = []
        for account_id, rank in rows:
            try:
                ranks.append(decode_rank_record(account_id, rank))
            except MalformedRecord as exc:
                logger.warning("Ignoring malformed rank record: %s", exc)
        return ranks

    def get_rank_period_table(self) -> RankPeriodTable:
        row = self._fetchone("SELECT params_json FROM core_params WHERE body=?", "core params")
        return decode_rank_period_table(row[0])

    def get_cycle_status(self) -> CycleStatus:
        row = self._fetchone("SELECT status_json FROM salary_status WHERE body=?", "salary status")
        return decode_cycle_status(row[0])

    def get_cycle_periods(self) -> CyclePeriods:
        row = self._fetchone(
            "SELECT registration_period, payout_period FROM salary_consts WHERE body=?",
            "salary constants",
        )
        return decode_cycle_periods(row[0], row[1])
