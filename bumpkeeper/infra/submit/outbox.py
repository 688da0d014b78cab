"""Submitter that persists constructed requests for an external signer.

Responsibilities:
  - Serialize a transaction request to JSON and append it to bump_outbox.
  - Report the outbox row id as the submission reference.
Must not:
  - Sign or broadcast; an external signer drains the outbox.
"""

from __future__ import annotations

import datetime
import json
import sqlite3
import threading
import uuid
from typing import Any, Optional

from bumpkeeper.app_api.ports import TransactionSubmitter
from bumpkeeper.core.domain.errors import SubmissionFailure
from bumpkeeper.core.domain.models import BatchAll, Call, SubmissionOutcome, TransactionRequest
from bumpkeeper.infra.sqlite.repos.bump_outbox_repo import BumpOutboxRepo


def request_to_payload(request: TransactionRequest) -> dict[str, Any]:
    if isinstance(request, BatchAll):
        return {
            "pallet": "utility",
            "function": "batch_all",
            "calls": [request_to_payload(call) for call in request.calls],
        }
    if isinstance(request, Call):
        return {"pallet": request.pallet, "function": request.function, "args": list(request.args)}
    raise TypeError(f"Unsupported request type: {type(request).__name__}")


def request_to_json(request: TransactionRequest) -> str:
    return json.dumps(request_to_payload(request), separators=(",", ":"), ensure_ascii=False)


class SQLiteOutboxSubmitter(TransactionSubmitter):
    def __init__(
        self,
        conn: sqlite3.Connection,
        body_id: str,
        repo: Optional[BumpOutboxRepo] = None,
    ) -> None:
        self._conn = conn
        self._body = body_id
        self._repo = repo or BumpOutboxRepo(conn)
        # Passes may share the connection; a rollback must never discard
        # another pass's uncommitted row.
        self._write_lock = threading.Lock()

    def submit(self, request: TransactionRequest, sender: str) -> SubmissionOutcome:
        tx_id = str(uuid.uuid4())
        created_at = datetime.datetime.now(datetime.timezone.utc).isoformat()
        request_json = request_to_json(request)
        with self._write_lock:
            try:
                self._repo.insert_request(tx_id, self._body, sender, request_json, created_at)
                self._conn.commit()
            except sqlite3.Error as exc:
                self._conn.rollback()
                raise SubmissionFailure(f"outbox write failed: {exc}") from exc
        return SubmissionOutcome(ok=True, reference=tx_id)
