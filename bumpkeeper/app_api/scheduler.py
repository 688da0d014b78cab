"""Orchestrate member and salary-cycle bump passes for one governance body.

Responsibilities:
  - Read a consistent snapshot through the ChainStateReader port.
  - Apply the evaluator per member and to the salary cycle.
  - Batch due members and dispatch requests through the submitter.
Must not:
  - Retry submissions; retries belong to the submitter.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

from bumpkeeper.core.domain.enums import PassName, ReasonCode
from bumpkeeper.core.domain.errors import BumpError, PassFailed, SubmissionFailure
from bumpkeeper.core.domain.models import CycleBump, MemberBump, TransactionRequest
from bumpkeeper.core.engine.batcher import (
    build_cycle_bump_request,
    build_member_bump_request,
    describe_request,
)
from bumpkeeper.core.engine.evaluator import evaluate_cycle, evaluate_member
from bumpkeeper.core.engine.period_cache import CachePolicy, RankPeriodCache
from bumpkeeper.core.engine.result import CycleEvaluation, MemberEvaluation
from .dto import GovernanceBody, PassOutcome
from .ports import ChainStateReader, GovernanceBumper, TransactionSubmitter

logger = logging.getLogger(__name__)

ALL_PASSES: tuple[PassName, ...] = (PassName.MEMBERS, PassName.CYCLE)


class BumpScheduler(GovernanceBumper):
    def __init__(
        self,
        body: GovernanceBody,
        reader: ChainStateReader,
        submitter: TransactionSubmitter,
        period_cache: Optional[RankPeriodCache] = None,
        cache_policy: CachePolicy = "per_pass",
    ) -> None:
        body.validate()
        self._body = body
        self._reader = reader
        self._submitter = submitter
        if period_cache is None:
            period_cache = RankPeriodCache(reader.get_rank_period_table, policy=cache_policy)
        self._period_cache = period_cache

    @property
    def body(self) -> GovernanceBody:
        return self._body

    @property
    def period_cache(self) -> RankPeriodCache:
        return self._period_cache

    def evaluate_members(self) -> list[MemberEvaluation]:
        """Classify every member against a single block-height snapshot."""
        self._period_cache.begin_pass()
        current_block = self._reader.get_current_block()
        members = self._reader.list_members()
        ranks = self._reader.list_ranks()

        rank_by_account = {record.account_id: record.rank for record in ranks}

        evaluations: list[MemberEvaluation] = []
        for member in members:
            rank = rank_by_account.get(member.account_id, 0)
            period = None
            if not member.is_active:
                period = self._period_cache.period_for(rank)
            evaluation = evaluate_member(member, rank, period, current_block)
            if evaluation.reason == ReasonCode.NO_DEMOTION_PERIOD:
                logger.info(
                    "No demotion period for rank %d; skipping %s", rank, member.account_id
                )
            evaluations.append(evaluation)
        return evaluations

    def collect_due_members(self) -> list[str]:
        return [evaluation.account_id for evaluation in self.evaluate_members() if evaluation.due]

    def run_member_pass(self, sender: str) -> list[str]:
        due = self.collect_due_members()
        if not due:
            logger.info("%s: no members due for bump", self._body.body_id)
            return []

        logger.info("%s: bumping accounts %s", self._body.body_id, ",".join(due))
        request = build_member_bump_request(self._body.core_pallet, due)
        self._submit(request, sender)
        return due

    def evaluate_cycle(self) -> CycleEvaluation:
        status = self._reader.get_cycle_status()
        periods = self._reader.get_cycle_periods()
        current_block = self._reader.get_current_block()
        return evaluate_cycle(status, periods, current_block)

    def run_cycle_pass(self, sender: str) -> Optional[CycleBump]:
        evaluation = self.evaluate_cycle()
        if not evaluation.due:
            logger.debug(
                "%s: salary cycle %d runs until block %d (now %d)",
                self._body.body_id,
                evaluation.cycle_index,
                evaluation.cycle_end,
                evaluation.current_block,
            )
            return None

        logger.info("%s: bumping salary cycle %d", self._body.body_id, evaluation.cycle_index)
        self._submit(build_cycle_bump_request(self._body.salary_pallet), sender)
        return CycleBump(cycle_index=evaluation.cycle_index)

    def bump_members(self, sender: str) -> None:
        self.run_member_pass(sender)

    def bump_salary_cycle(self, sender: str) -> None:
        self.run_cycle_pass(sender)

    def run_all(
        self,
        sender: str,
        passes: Sequence[PassName] = ALL_PASSES,
        max_workers: int = 1,
    ) -> list[PassOutcome]:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")

        runners: dict[PassName, Callable[[str], PassOutcome]] = {
            PassName.MEMBERS: self._member_outcome,
            PassName.CYCLE: self._cycle_outcome,
        }
        selected = [runners[name] for name in passes]

        if max_workers == 1 or len(selected) < 2:
            return [runner(sender) for runner in selected]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(runner, sender) for runner in selected]
            return [future.result() for future in futures]

    def _member_outcome(self, sender: str) -> PassOutcome:
        try:
            due = self.run_member_pass(sender)
        except BumpError as exc:
            return self._failed(PassName.MEMBERS, exc)
        return PassOutcome(
            pass_name=PassName.MEMBERS,
            ok=True,
            bumps=tuple(MemberBump(account_id=account) for account in due),
            submitted=1 if due else 0,
        )

    def _cycle_outcome(self, sender: str) -> PassOutcome:
        try:
            bump = self.run_cycle_pass(sender)
        except BumpError as exc:
            return self._failed(PassName.CYCLE, exc)
        if bump is None:
            return PassOutcome(pass_name=PassName.CYCLE, ok=True)
        return PassOutcome(pass_name=PassName.CYCLE, ok=True, bumps=(bump,), submitted=1)

    def _failed(self, pass_name: PassName, exc: BumpError) -> PassOutcome:
        failure = PassFailed(pass_name, exc)
        logger.error("%s: %s", self._body.body_id, failure)
        return PassOutcome(pass_name=pass_name, ok=False, error=str(failure))

    def _submit(self, request: TransactionRequest, sender: str) -> None:
        outcome = self._submitter.submit(request, sender)
        if not outcome.ok:
            raise SubmissionFailure(
                f"{describe_request(request)} rejected: {outcome.error or 'unknown error'}"
            )
        logger.info("Submitted %s as %s", describe_request(request), outcome.reference)
