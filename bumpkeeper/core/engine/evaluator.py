"""Eligibility decisions for member and salary-cycle bumps.

Responsibilities:
  - Decide per member whether a bump is due.
  - Decide whether the salary cycle must be advanced.
  - Resolve a rank's demotion period without raising on gaps.

Inputs/Outputs:
  - Inputs: typed records, a resolved demotion period, the pass block height.
  - Outputs: bool decisions, or Member/CycleEvaluation for audit.

Invariants:
  - Pure: no I/O, no chain reads, no clock.
  - Comparisons are strict; equality with the threshold is never due.
  - Active members are never due.
"""

from __future__ import annotations

from typing import Optional

from ..domain.enums import ReasonCode
from ..domain.models import CyclePeriods, CycleStatus, MemberRecord, RankPeriodTable
from .result import CycleEvaluation, MemberEvaluation


def demotion_period_for_rank(table: RankPeriodTable, rank: int) -> Optional[int]:
    return table.period_for(rank)


def evaluate_member(
    member: MemberRecord,
    rank: int,
    demotion_period: Optional[int],
    current_block: int,
) -> MemberEvaluation:
    elapsed = current_block - member.last_proof_block

    if member.is_active:
        reason = ReasonCode.MEMBER_ACTIVE
        due = False
    elif demotion_period is None or demotion_period <= 0:
        reason = ReasonCode.NO_DEMOTION_PERIOD
        due = False
    elif elapsed > demotion_period:
        reason = ReasonCode.DEMOTION_PERIOD_ELAPSED
        due = True
    else:
        reason = ReasonCode.PROOF_FRESH
        due = False

    return MemberEvaluation(
        account_id=member.account_id,
        rank=rank,
        demotion_period=demotion_period,
        elapsed=elapsed,
        due=due,
        reason=reason,
    )


def is_member_due(
    member: MemberRecord,
    rank: int,
    demotion_period: Optional[int],
    current_block: int,
) -> bool:
    return evaluate_member(member, rank, demotion_period, current_block).due


def evaluate_cycle(status: CycleStatus, periods: CyclePeriods, current_block: int) -> CycleEvaluation:
    cycle_end = status.cycle_start + periods.total
    due = cycle_end < current_block
    return CycleEvaluation(
        cycle_index=status.cycle_index,
        cycle_end=cycle_end,
        current_block=current_block,
        due=due,
        reason=ReasonCode.CYCLE_ELAPSED if due else ReasonCode.CYCLE_IN_PROGRESS,
    )


def is_cycle_due(status: CycleStatus, periods: CyclePeriods, current_block: int) -> bool:
    return evaluate_cycle(status, periods, current_block).due
