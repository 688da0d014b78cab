"""Submitter that only logs what would be sent."""

from __future__ import annotations

import logging

from bumpkeeper.app_api.ports import TransactionSubmitter
from bumpkeeper.core.domain.models import SubmissionOutcome, TransactionRequest
from bumpkeeper.core.engine.batcher import describe_request

logger = logging.getLogger(__name__)


class DryRunSubmitter(TransactionSubmitter):
    def __init__(self) -> None:
        self.requests: list[tuple[TransactionRequest, str]] = []

    def submit(self, request: TransactionRequest, sender: str) -> SubmissionOutcome:
        self.requests.append((request, sender))
        logger.info("[dry-run] %s from %s", describe_request(request), sender)
        return SubmissionOutcome(ok=True, reference=f"dry-run-{len(self.requests)}")
