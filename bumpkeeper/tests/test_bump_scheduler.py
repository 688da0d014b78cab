"""Tests for member and cycle passes orchestrated by BumpScheduler."""

from __future__ import annotations

import sqlite3

import pytest

from bumpkeeper.app_api.factories import FELLOWSHIP, build_governance_bumper
from bumpkeeper.app_api.ports import GovernanceBumper
from bumpkeeper.app_api.scheduler import BumpScheduler
from bumpkeeper.core.domain.enums import PassName
from bumpkeeper.core.domain.errors import DataUnavailable, MalformedRecord, SubmissionFailure
from bumpkeeper.core.domain.models import (
    BatchAll,
    Call,
    CycleBump,
    CyclePeriods,
    CycleStatus,
    MemberBump,
    MemberRecord,
    RankPeriodTable,
    RankRecord,
    SubmissionOutcome,
)


class _FakeReader:
    def __init__(
        self,
        block: int = 151,
        members=None,
        ranks=None,
        periods=(10, 20, 100),
        cycle_start: int = 1000,
    ) -> None:
        self.block = block
        self.members = list(members or [])
        self.ranks = list(ranks or [])
        self.periods = tuple(periods)
        self.cycle_start = cycle_start
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise DataUnavailable(f"{name} unavailable")

    def get_current_block(self) -> int:
        self._record("block")
        return self.block

    def list_members(self):
        self._record("members")
        return list(self.members)

    def list_ranks(self):
        self._record("ranks")
        return list(self.ranks)

    def get_rank_period_table(self) -> RankPeriodTable:
        self._record("params")
        return RankPeriodTable(demotion_periods=self.periods)

    def get_cycle_status(self) -> CycleStatus:
        self._record("status")
        if "status_malformed" in self.fail_on:
            raise MalformedRecord("salary status is missing 'cycleStart'")
        return CycleStatus(cycle_index=4, cycle_start=self.cycle_start)

    def get_cycle_periods(self) -> CyclePeriods:
        self._record("consts")
        return CyclePeriods(registration_period=50, payout_period=50)


class _RecordingSubmitter:
    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.submitted: list[tuple[object, str]] = []

    def submit(self, request, sender: str) -> SubmissionOutcome:
        self.submitted.append((request, sender))
        if not self.ok:
            return SubmissionOutcome(ok=False, error="bad origin")
        return SubmissionOutcome(ok=True, reference=f"tx-{len(self.submitted)}")


def _stale(account: str, last_proof: int = 0) -> MemberRecord:
    return MemberRecord(account_id=account, is_active=False, last_proof_block=last_proof)


def _scheduler(reader, submitter=None, **kwargs) -> BumpScheduler:
    return BumpScheduler(FELLOWSHIP, reader, submitter or _RecordingSubmitter(), **kwargs)


def test_member_pass_batches_due_members_in_discovery_order():
    reader = _FakeReader(
        block=1000,
        members=[_stale("C"), _stale("A"), _stale("B")],
        ranks=[RankRecord("A", 1), RankRecord("B", 2), RankRecord("C", 3)],
    )
    submitter = _RecordingSubmitter()

    due = _scheduler(reader, submitter).run_member_pass("alice")

    assert due == ["C", "A", "B"]
    assert len(submitter.submitted) == 1
    request, sender = submitter.submitted[0]
    assert sender == "alice"
    assert isinstance(request, BatchAll)
    assert [c.args[0] for c in request.calls] == ["C", "A", "B"]


def test_scenario_a_single_member_single_call():
    reader = _FakeReader(block=151, members=[_stale("X", 50)], ranks=[RankRecord("X", 3)])
    submitter = _RecordingSubmitter()

    assert _scheduler(reader, submitter).run_member_pass("alice") == ["X"]
    assert submitter.submitted[0][0] == Call("fellowshipCore", "bump", ("X",))


def test_scenario_b_nothing_due_submits_nothing():
    reader = _FakeReader(block=150, members=[_stale("X", 50)], ranks=[RankRecord("X", 3)])
    submitter = _RecordingSubmitter()

    assert _scheduler(reader, submitter).run_member_pass("alice") == []
    assert submitter.submitted == []


def test_member_without_rank_defaults_to_rank_zero():
    reader = _FakeReader(block=10_000, members=[_stale("NORANK")], ranks=[])
    evaluations = _scheduler(reader).evaluate_members()

    assert evaluations[0].rank == 0
    assert evaluations[0].demotion_period is None
    assert evaluations[0].due is False


def test_active_members_skip_period_lookup():
    reader = _FakeReader(
        block=10_000,
        members=[MemberRecord("A", True, 0)],
        ranks=[RankRecord("A", 1)],
    )
    assert _scheduler(reader).collect_due_members() == []
    assert "params" not in reader.calls


def test_block_height_read_once_before_members_and_ranks():
    reader = _FakeReader(members=[_stale("A"), _stale("B")], ranks=[RankRecord("A", 1)])
    _scheduler(reader).collect_due_members()

    assert reader.calls.count("block") == 1
    assert reader.calls.index("block") < reader.calls.index("members")
    assert reader.calls.index("block") < reader.calls.index("ranks")


def test_member_pass_is_idempotent():
    reader = _FakeReader(
        block=1000,
        members=[_stale("A"), _stale("B"), MemberRecord("C", True, 0)],
        ranks=[RankRecord("A", 1), RankRecord("B", 3)],
    )
    scheduler = _scheduler(reader)
    assert scheduler.collect_due_members() == scheduler.collect_due_members() == ["A", "B"]


def test_per_pass_cache_reloads_each_pass():
    reader = _FakeReader(block=1000, members=[_stale("A")], ranks=[RankRecord("A", 1)])
    scheduler = _scheduler(reader)
    scheduler.collect_due_members()
    scheduler.collect_due_members()
    assert reader.calls.count("params") == 2


def test_lifetime_cache_loads_once_until_invalidated():
    reader = _FakeReader(block=1000, members=[_stale("A")], ranks=[RankRecord("A", 1)])
    scheduler = _scheduler(reader, cache_policy="lifetime")
    scheduler.collect_due_members()
    reader.periods = (5000,)
    assert scheduler.collect_due_members() == ["A"]
    assert reader.calls.count("params") == 1

    scheduler.period_cache.invalidate()
    assert scheduler.collect_due_members() == []
    assert reader.calls.count("params") == 2


def test_scenario_c_cycle_pass():
    reader = _FakeReader(block=1100)
    submitter = _RecordingSubmitter()
    scheduler = _scheduler(reader, submitter)

    assert scheduler.run_cycle_pass("alice") is None
    assert submitter.submitted == []

    reader.block = 1101
    assert scheduler.run_cycle_pass("alice") == CycleBump(cycle_index=4)
    assert submitter.submitted == [(Call("fellowshipSalary", "bump", ()), "alice")]


def test_rejected_submission_raises():
    reader = _FakeReader(block=1000, members=[_stale("A")], ranks=[RankRecord("A", 1)])
    with pytest.raises(SubmissionFailure):
        _scheduler(reader, _RecordingSubmitter(ok=False)).run_member_pass("alice")


def test_run_all_isolates_failing_pass():
    reader = _FakeReader(block=2000, members=[_stale("A")], ranks=[RankRecord("A", 1)])
    reader.fail_on.add("members")
    submitter = _RecordingSubmitter()

    outcomes = _scheduler(reader, submitter).run_all("alice")

    members, cycle = outcomes
    assert members.pass_name == PassName.MEMBERS
    assert members.ok is False
    assert "members pass failed" in members.error
    assert cycle.ok is True
    assert cycle.bumps == (CycleBump(cycle_index=4),)
    assert len(submitter.submitted) == 1


def test_run_all_malformed_cycle_status_fails_cycle_only():
    reader = _FakeReader(block=2000, members=[_stale("A")], ranks=[RankRecord("A", 1)])
    reader.fail_on.add("status_malformed")

    members, cycle = _scheduler(reader).run_all("alice")

    assert members.ok is True
    assert members.bumps == (MemberBump("A"),)
    assert members.submitted == 1
    assert cycle.ok is False
    assert "cycle pass failed" in cycle.error


def test_run_all_concurrent_matches_sequential():
    reader = _FakeReader(block=2000, members=[_stale("A"), _stale("B")], ranks=[RankRecord("A", 1)])
    outcomes = _scheduler(reader).run_all("alice", max_workers=2)

    assert [o.pass_name for o in outcomes] == [PassName.MEMBERS, PassName.CYCLE]
    assert outcomes[0].bumps == (MemberBump("A"),)
    assert outcomes[1].submitted == 1


def test_run_all_selected_pass_only():
    reader = _FakeReader(block=2000)
    outcomes = _scheduler(reader).run_all("alice", passes=[PassName.CYCLE])
    assert [o.pass_name for o in outcomes] == [PassName.CYCLE]
    assert "members" not in reader.calls


def test_run_all_rejects_bad_worker_count():
    with pytest.raises(ValueError):
        _scheduler(_FakeReader()).run_all("alice", max_workers=0)


def test_governance_bumper_capabilities_submit_member_and_cycle_requests():
    reader = _FakeReader(
        block=1200,
        members=[_stale("A"), _stale("B")],
        ranks=[RankRecord("A", 1), RankRecord("B", 1)],
    )
    submitter = _RecordingSubmitter()
    bumper: GovernanceBumper = _scheduler(reader, submitter)

    bumper.bump_members("alice")
    bumper.bump_salary_cycle("alice")

    assert isinstance(submitter.submitted[0][0], BatchAll)
    assert submitter.submitted[1] == (Call("fellowshipSalary", "bump", ()), "alice")


def test_build_governance_bumper_wires_requested_body():
    bumper = build_governance_bumper(sqlite3.connect(":memory:"), body_id="ambassador", submitter="dry_run")
    assert isinstance(bumper, BumpScheduler)
    assert bumper.body.salary_pallet == "ambassadorSalary"
