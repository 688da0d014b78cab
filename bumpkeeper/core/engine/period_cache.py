"""Cached rank period table with an explicit reload policy.

Policies:
  - "per_pass": dropped at the start of every member pass, so parameter
    changes on chain are seen by the next pass.
  - "lifetime": loaded once and kept until invalidate() is called.

Concurrent loads are tolerated without locking; every load yields the same
table for the same chain state.
"""

from __future__ import annotations

import logging
from typing import Callable, Literal, Optional

from ..domain.models import RankPeriodTable

CachePolicy = Literal["per_pass", "lifetime"]
CACHE_POLICIES: tuple[str, ...] = ("per_pass", "lifetime")

logger = logging.getLogger(__name__)


class RankPeriodCache:
    def __init__(
        self,
        loader: Callable[[], RankPeriodTable],
        policy: CachePolicy = "per_pass",
    ) -> None:
        if policy not in CACHE_POLICIES:
            raise ValueError(f"Unknown cache policy: {policy}")
        self._loader = loader
        self._policy = policy
        self._table: Optional[RankPeriodTable] = None

    @property
    def policy(self) -> str:
        return self._policy

    @property
    def loaded(self) -> bool:
        return self._table is not None

    def begin_pass(self) -> None:
        if self._policy == "per_pass":
            self.invalidate()

    def invalidate(self) -> None:
        self._table = None

    def get(self) -> RankPeriodTable:
        table = self._table
        if table is None:
            table = self._loader()
            logger.debug("Loaded rank period table with %d ranks", len(table.demotion_periods))
            self._table = table
        return table

    def period_for(self, rank: int) -> Optional[int]:
        return self.get().period_for(rank)
