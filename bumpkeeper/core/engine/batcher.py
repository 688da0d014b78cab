"""Build the minimal transaction request for a set of bumps.

Responsibilities:
  - One due member -> a single bump call.
  - Several due members -> one all-or-nothing batch, in due-set order.
  - Salary cycle -> a single salary bump call.
Must not:
  - Sign, submit, or reorder accounts.
"""

from __future__ import annotations

from typing import Sequence

from ..domain.models import BatchAll, Call, TransactionRequest

BUMP_FUNCTION = "bump"


def build_member_bump_request(core_pallet: str, due: Sequence[str]) -> TransactionRequest:
    if not due:
        raise ValueError("due-set must not be empty")
    calls = tuple(Call(pallet=core_pallet, function=BUMP_FUNCTION, args=(account,)) for account in due)
    if len(calls) == 1:
        return calls[0]
    return BatchAll(calls=calls)


def build_cycle_bump_request(salary_pallet: str) -> Call:
    return Call(pallet=salary_pallet, function=BUMP_FUNCTION)


def describe_request(request: TransactionRequest) -> str:
    if isinstance(request, BatchAll):
        inner = ", ".join(describe_request(call) for call in request.calls)
        return f"utility.batch_all[{inner}]"
    args = ",".join(request.args)
    return f"{request.pallet}.{request.function}({args})"
