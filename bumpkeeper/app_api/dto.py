"""DTO definitions for app-level data exchange.

Responsibilities:
  - Define stable, typed structures for governance bodies and pass outcomes.
Must not:
  - Implement business logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from bumpkeeper.core.domain.enums import PassName
from bumpkeeper.core.domain.models import CycleBump, MemberBump


@dataclass(frozen=True)
class GovernanceBody:
    body_id: str
    core_pallet: str
    salary_pallet: str

    def validate(self) -> None:
        if not self.body_id.strip():
            raise ValueError("body_id must be non-empty")
        for name in (self.core_pallet, self.salary_pallet):
            if not name or not name.strip():
                raise ValueError(f"pallet names must be non-empty for body '{self.body_id}'")


Bump = Union[MemberBump, CycleBump]


@dataclass(frozen=True)
class PassOutcome:
    pass_name: PassName
    ok: bool
    bumps: tuple[Bump, ...] = ()
    submitted: int = 0
    error: Optional[str] = None
