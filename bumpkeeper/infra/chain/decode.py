"""Decode JSON-shaped chain query results into typed records.

Responsibilities:
  - Parse member info, rank, core params, and salary status payloads.
  - Normalize chain integers (numbers, decimal or comma-grouped strings, hex).
Must not:
  - Decide eligibility; decoding only.

Raises MalformedRecord for any payload that does not fit its shape.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from bumpkeeper.core.domain.errors import MalformedRecord
from bumpkeeper.core.domain.models import (
    CyclePeriods,
    CycleStatus,
    MemberRecord,
    RankPeriodTable,
    RankRecord,
)


def parse_chain_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise MalformedRecord(f"Field '{field}' must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            return int(text)
        except ValueError:
            raise MalformedRecord(f"Field '{field}' is not an integer: {value!r}") from None
    raise MalformedRecord(f"Field '{field}' must be an integer, got {type(value).__name__}")


def _as_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            raise MalformedRecord(f"{what} is not valid JSON") from None
    if not isinstance(payload, Mapping):
        raise MalformedRecord(f"{what} must be a JSON object")
    return payload


def _field(payload: Mapping[str, Any], key: str, what: str) -> Any:
    if key not in payload:
        raise MalformedRecord(f"{what} is missing '{key}'")
    return payload[key]


def decode_member_record(account_id: str, payload: Any) -> MemberRecord:
    what = f"member {account_id}"
    info = _as_mapping(payload, what)
    is_active = _field(info, "isActive", what)
    if not isinstance(is_active, bool):
        raise MalformedRecord(f"{what} has non-boolean 'isActive'")
    return MemberRecord(
        account_id=account_id,
        is_active=is_active,
        last_proof_block=parse_chain_int(_field(info, "lastProof", what), "lastProof"),
    )


def decode_rank_record(account_id: str, rank: Any) -> RankRecord:
    if isinstance(rank, str) and rank.lstrip().startswith("{"):
        rank = _field(_as_mapping(rank, f"rank {account_id}"), "rank", f"rank {account_id}")
    value = parse_chain_int(rank, "rank")
    if value < 0:
        raise MalformedRecord(f"rank {account_id} must be >= 0")
    return RankRecord(account_id=account_id, rank=value)


def decode_rank_period_table(payload: Any) -> RankPeriodTable:
    params = _as_mapping(payload, "core params")
    periods = _field(params, "demotionPeriod", "core params")
    if not isinstance(periods, list):
        raise MalformedRecord("core params 'demotionPeriod' must be a list")
    return RankPeriodTable(
        demotion_periods=tuple(parse_chain_int(p, "demotionPeriod") for p in periods)
    )


def decode_cycle_status(payload: Any) -> CycleStatus:
    status = _as_mapping(payload, "salary status")
    return CycleStatus(
        cycle_index=parse_chain_int(_field(status, "cycleIndex", "salary status"), "cycleIndex"),
        cycle_start=parse_chain_int(_field(status, "cycleStart", "salary status"), "cycleStart"),
    )


def decode_cycle_periods(registration_period: Any, payout_period: Any) -> CyclePeriods:
    return CyclePeriods(
        registration_period=parse_chain_int(registration_period, "registrationPeriod"),
        payout_period=parse_chain_int(payout_period, "payoutPeriod"),
    )
