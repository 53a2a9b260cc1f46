"""Minimal structured logging helper.

Provides a lightweight wrapper around print() to emit key=value pairs with a
timestamp and level. Generation code logs through this so a run can be
grepped or parsed line by line without configuring stdlib logging.

Usage:
    from ..logging_utils import get_logger
    get_logger("worldsmith.dungeon").info(event="level_generated", rooms=11)

Values containing spaces have them replaced with underscores in key=value
mode. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("WORLDSMITH_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("WORLDSMITH_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def configure(level: str | None = None, json_mode: bool | None = None) -> None:
    """Override the env-derived level / output mode (CLI flags)."""
    global CURRENT_LEVEL, JSON_MODE
    if level is not None:
        CURRENT_LEVEL = LEVELS.get(level.lower(), CURRENT_LEVEL)
    if json_mode is not None:
        JSON_MODE = bool(json_mode)


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": int(time.time()), "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "worldsmith"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("worldsmith")
