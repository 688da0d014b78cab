from .body_factory import AMBASSADOR, FELLOWSHIP, GovernanceBodyFactory, default_body_factory
from .build_app import build_bump_scheduler, build_governance_bumper, build_submitter

__all__ = [
    "AMBASSADOR",
    "FELLOWSHIP",
    "GovernanceBodyFactory",
    "default_body_factory",
    "build_bump_scheduler",
    "build_governance_bumper",
    "build_submitter",
]
"""Factory helpers for building bodies and schedulers."""
