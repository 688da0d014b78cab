"""Port definitions for app-level dependencies.

Responsibilities:
  - Define interface contracts for chain reads, submission, and bumpers.
Must not:
  - Implement logic; interfaces only.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from bumpkeeper.core.domain.models import (
    CyclePeriods,
    CycleStatus,
    MemberRecord,
    RankPeriodTable,
    RankRecord,
    SubmissionOutcome,
    TransactionRequest,
)


class ChainStateReader(Protocol):
    def get_current_block(self) -> int:
        ...

    def list_members(self) -> Sequence[MemberRecord]:
        ...

    def list_ranks(self) -> Sequence[RankRecord]:
        ...

    def get_rank_period_table(self) -> RankPeriodTable:
        ...

    def get_cycle_status(self) -> CycleStatus:
        ...

    def get_cycle_periods(self) -> CyclePeriods:
        ...


class TransactionSubmitter(Protocol):
    def submit(self, request: TransactionRequest, sender: str) -> SubmissionOutcome:
        ...


class GovernanceBumper(Protocol):
    def bump_members(self, sender: str) -> None:
        ...

    def bump_salary_cycle(self, sender: str) -> None:
        ...
