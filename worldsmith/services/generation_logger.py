"""Per-request generation step log.

Entries are buffered in memory while a generation request runs, echoed through
the structured logger, and written to ``generation_log`` in one batch by
``flush()``. Step timing is attached to the last entry of the step when it
ends.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from worldsmith import db
from worldsmith.logging_utils import get_logger
from worldsmith.models import GenerationLog

log = get_logger("worldsmith.generation")

LOG_TYPES = ("info", "warning", "error", "debug")
_ECHO = {"info": log.info, "warning": log.warn, "error": log.error, "debug": log.debug}


class GenerationLogger:
    def __init__(self, request_id: str, world_id: Optional[str] = None, persist: bool = True):
        self.request_id = request_id
        self.world_id = world_id
        self.persist = persist
        self._entries: List[Dict[str, Any]] = []
        self._step_started: Dict[str, float] = {}
        self._flushed = 0

    def start_step(self, step: str) -> None:
        self._step_started[step] = time.perf_counter()

    def end_step(self, step: str) -> Optional[int]:
        started = self._step_started.pop(step, None)
        if started is None:
            return None
        duration_ms = int((time.perf_counter() - started) * 1000)
        for entry in reversed(self._entries):
            if entry["step"] == step:
                entry["duration_ms"] = duration_ms
                break
        return duration_ms

    def log(self, step: str, message: str, log_type: str = "info", data: Optional[Dict[str, Any]] = None) -> None:
        if log_type not in LOG_TYPES:
            raise ValueError(f"unknown log_type {log_type!r}")
        self._entries.append(
            {
                "request_id": self.request_id,
                "world_id": self.world_id,
                "step": step,
                "log_type": log_type,
                "message": message,
                "data": data,
                "duration_ms": None,
            }
        )
        _ECHO[log_type](event="generation_step", step=step, message=message, request_id=self.request_id)

    def flush(self) -> int:
        """Insert buffered entries; returns how many were written."""
        pending = self._entries[self._flushed:]
        if not self.persist or not pending:
            return 0
        db.session.add_all([GenerationLog(**entry) for entry in pending])
        db.session.commit()
        self._flushed = len(self._entries)
        return len(pending)

    def get_logs(self) -> List[Dict[str, Any]]:
        return [dict(e) for e in self._entries]

    def get_logs_by_step(self, step: str) -> List[Dict[str, Any]]:
        return [dict(e) for e in self._entries if e["step"] == step]
