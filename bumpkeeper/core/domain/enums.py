"""Domain enums for bump decisions.

Responsibilities:
  - Define ReasonCode identifiers attached to member and cycle evaluations.
  - Provide stable reason categories and operator-facing messages.

Invariants:
  - Enum values must remain stable; they appear in logs and reports.
  - ReasonCode metadata must be complete and deterministic.
"""

from __future__ import annotations

from enum import Enum


class PassName(Enum):
    MEMBERS = "members"
    CYCLE = "cycle"


class ReasonCategory(Enum):
    BUMP = "BUMP"
    SKIP = "SKIP"
    CONFIG = "CONFIG"


class ReasonCode(Enum):
    MEMBER_ACTIVE = "MEMBER_ACTIVE"
    NO_DEMOTION_PERIOD = "NO_DEMOTION_PERIOD"
    PROOF_FRESH = "PROOF_FRESH"
    DEMOTION_PERIOD_ELAPSED = "DEMOTION_PERIOD_ELAPSED"
    CYCLE_IN_PROGRESS = "CYCLE_IN_PROGRESS"
    CYCLE_ELAPSED = "CYCLE_ELAPSED"


REASON_METADATA: dict[ReasonCode, dict[str, object]] = {
    ReasonCode.MEMBER_ACTIVE: {
        "category": ReasonCategory.SKIP,
        "message": "Member is active; activity resets bump eligibility.",
    },
    ReasonCode.NO_DEMOTION_PERIOD: {
        "category": ReasonCategory.CONFIG,
        "message": "Rank has no configured demotion period.",
    },
    ReasonCode.PROOF_FRESH: {
        "category": ReasonCategory.SKIP,
        "message": "Last proof is within the rank's demotion period.",
    },
    ReasonCode.DEMOTION_PERIOD_ELAPSED: {
        "category": ReasonCategory.BUMP,
        "message": "Demotion period elapsed since the last proof.",
    },
    ReasonCode.CYCLE_IN_PROGRESS: {
        "category": ReasonCategory.SKIP,
        "message": "Registration and payout periods have not both elapsed.",
    },
    ReasonCode.CYCLE_ELAPSED: {
        "category": ReasonCategory.BUMP,
        "message": "Salary cycle has run past registration and payout.",
    },
}


def is_bump_reason(reason: ReasonCode) -> bool:
    return REASON_METADATA[reason]["category"] == ReasonCategory.BUMP


_missing = [rc for rc in ReasonCode if rc not in REASON_METADATA]
if _missing:
    raise RuntimeError(f"Missing REASON_METADATA for: {[m.value for m in _missing]}")

_extra = [k for k in REASON_METADATA.keys() if k not in set(ReasonCode)]
if _extra:
    raise RuntimeError(f"Extra REASON_METADATA keys: {[e.value for e in _extra]}")
