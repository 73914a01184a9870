from __future__ import annotations

import time
from collections import deque
from typing import Callable

LEVELS = {"ALL": 0, "DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}


def level_num(level: str | None, default: int = 20) -> int:
    return LEVELS.get((level or "").strip().upper(), default)


class AppLog:
    """
    Journal applicatif : lignes horodatées "[HH:MM:SS] LEVEL message", tampon borné,
    filtrage par niveau. Les composants reçoivent `log=app_log.logln`.
    """

    def __init__(self, level: str = "INFO", maxlen: int = 3000, sink: Callable[[str], None] | None = None):
        self._buffer: deque[tuple[int, str]] = deque(maxlen=maxlen)  # (level_num, rendered_line)
        self._level_min = level_num(level)
        self.sink = sink

    def logln(self, msg: str, level: str = "INFO"):
        if msg is None:
            return
        level = (level or "INFO").strip().upper()
        num = level_num(level)
        ts = time.strftime("%H:%M:%S")
        for raw_line in str(msg).splitlines() or [""]:
            line = f"[{ts}] {level:<5} {raw_line.rstrip()}"
            self._buffer.append((num, line))
            if self.sink and num >= self._level_min:
                self.sink(line)

    def logexc(self, context: str, exc: Exception):
        ctx = (context or "").strip()
        prefix = f"{ctx}: " if ctx else ""
        self.logln(f"{prefix}{type(exc).__name__}: {exc}", level="ERROR")

    def set_level(self, level: str):
        self._level_min = level_num(level)

    def lines(self, min_level: str | None = None) -> list[str]:
        floor = self._level_min if min_level is None else level_num(min_level)
        return [line for num, line in self._buffer if num >= floor]

    def clear(self):
        self._buffer.clear()
