from __future__ import annotations

from typing import Dict

from bumpkeeper.app_api.dto import GovernanceBody

FELLOWSHIP = GovernanceBody(
    body_id="fellowship",
    core_pallet="fellowshipCore",
    salary_pallet="fellowshipSalary",
)

AMBASSADOR = GovernanceBody(
    body_id="ambassador",
    core_pallet="ambassadorCore",
    salary_pallet="ambassadorSalary",
)


class GovernanceBodyFactory:
    def __init__(self) -> None:
        self._registry: Dict[str, GovernanceBody] = {}

    def register(self, body: GovernanceBody) -> None:
        body.validate()
        self._registry[body.body_id] = body

    def create(self, body_id: str) -> GovernanceBody:
        if body_id not in self._registry:
            raise ValueError(f"Unknown governance body: {body_id}")
        return self._registry[body_id]

    def known_ids(self) -> list[str]:
        return sorted(self._registry)


default_body_factory = GovernanceBodyFactory()
default_body_factory.register(FELLOWSHIP)
default_body_factory.register(AMBASSADOR)

__all__ = ["AMBASSADOR", "FELLOWSHIP", "GovernanceBodyFactory", "default_body_factory"]
