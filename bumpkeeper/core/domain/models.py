"""Domain models for membership and salary-cycle bump decisions.

Responsibilities:
  - Define immutable records decoded from chain state.
  - Define bump decisions and the transaction requests built from them.

Invariants:
  - Models are plain value carriers; decision logic lives in core.engine.
  - Records are never mutated after decoding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class MemberRecord:
    account_id: str
    is_active: bool
    last_proof_block: int


@dataclass(frozen=True)
class RankRecord:
    account_id: str
    rank: int


@dataclass(frozen=True)
class RankPeriodTable:
    # Indexed by rank - 1.
    demotion_periods: tuple[int, ...]

    def period_for(self, rank: int) -> Optional[int]:
        if rank < 1 or rank > len(self.demotion_periods):
            return None
        return self.demotion_periods[rank - 1]


@dataclass(frozen=True)
class CycleStatus:
    cycle_index: int
    cycle_start: int


@dataclass(frozen=True)
class CyclePeriods:
    registration_period: int
    payout_period: int

    @property
    def total(self) -> int:
        return self.registration_period + self.payout_period


@dataclass(frozen=True)
class MemberBump:
    account_id: str


@dataclass(frozen=True)
class CycleBump:
    cycle_index: int


@dataclass(frozen=True)
class Call:
    pallet: str
    function: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class BatchAll:
    """All-or-nothing batch; maps to the chain's utility.batch_all."""

    calls: tuple[Call, ...]


TransactionRequest = Union[Call, BatchAll]


@dataclass(frozen=True)
class SubmissionOutcome:
    ok: bool
    reference: Optional[str] = None
    error: Optional[str] = None
