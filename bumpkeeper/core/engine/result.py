"""Evaluation result payloads for member and cycle decisions.

Responsibilities:
  - Capture the decision, its reason code, and the inputs it was made from.

Inputs/Outputs:
  - Inputs: produced by evaluator.evaluate_member / evaluate_cycle.
  - Outputs: immutable dataclasses consumed by the scheduler and CLI reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.enums import ReasonCode


@dataclass(frozen=True)
class MemberEvaluation:
    account_id: str
    rank: int
    demotion_period: Optional[int]
    elapsed: int
    due: bool
    reason: ReasonCode


@dataclass(frozen=True)
class CycleEvaluation:
    cycle_index: int
    cycle_end: int
    current_block: int
    due: bool
    reason: ReasonCode
