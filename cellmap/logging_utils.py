"""Request event log for the map service.

One line per event, either ``key=value`` pairs or a compact JSON object when
``CELLMAP_LOG_JSON`` is set. ``CELLMAP_LOG_LEVEL`` (``info`` or ``warn``)
filters events and is read on every call so tests can flip it.

    log = get_logger("maps")
    log.info("map_served", template="crypt", seed=42)
"""

from __future__ import annotations

import json
import os
import sys
import time

_THRESHOLDS = {"info": 20, "warn": 30}
_TRUTHY = ("1", "true", "yes", "on")


def _render(record: dict) -> str:
    if os.getenv("CELLMAP_LOG_JSON", "0").lower() in _TRUTHY:
        return json.dumps(record, separators=(",", ":"), default=repr)
    pairs = []
    for key, value in record.items():
        text = value if isinstance(value, (int, float)) else str(value).replace(" ", "_")
        pairs.append(f"{key}={text}")
    return " ".join(pairs)


class EventLogger:
    def __init__(self, name: str):
        self.name = name

    def enabled(self, level: str) -> bool:
        floor = _THRESHOLDS.get(os.getenv("CELLMAP_LOG_LEVEL", "info").lower(), 20)
        return _THRESHOLDS[level] >= floor

    def emit(self, level: str, event: str, **fields):
        if not self.enabled(level):
            return
        record = {"level": level, "ts": int(time.time()), "logger": self.name, "event": event}
        record.update((k, v) for k, v in fields.items() if v is not None)
        # warnings go to stderr
        print(_render(record), file=sys.stderr if level == "warn" else sys.stdout)

    def info(self, event: str, **fields):
        self.emit("info", event, **fields)

    def warn(self, event: str, **fields):
        self.emit("warn", event, **fields)


_loggers: dict[str, EventLogger] = {}


def get_logger(name: str) -> EventLogger:
    return _loggers.setdefault(name, EventLogger(name))
