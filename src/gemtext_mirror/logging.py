from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from rich.console import Console


def printable(message: str) -> str:
    """Render undecodable filename bytes (surrogate escapes) as \\xNN."""

    return message.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


class ProgressSink:
    """Line-atomic output shared by all workers.

    Progress lines go to ``console`` and only when verbose; error lines go to
    ``error_console`` unconditionally.
    """

    def __init__(
        self,
        *,
        verbose: bool = False,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        self.verbose = verbose
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)
        self._lock = threading.Lock()

    def emit(self, message: str) -> None:
        if not self.verbose:
            return
        self._write(self._console, message)

    def error(self, message: str) -> None:
        self._write(self._error_console, message)

    def _write(self, console: Console, message: str) -> None:
        with self._lock:
            console.print(printable(message), markup=False, highlight=False, emoji=False, soft_wrap=True)


@dataclass(slots=True)
class RunLogEntry:
    run_id: str
    action: str
    source: str
    destination: str
    error_code: str | None
    message: str | None
    elapsed_ms: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class RunLogger:
    def __init__(self, log_file: Path) -> None:
        self._log_file = log_file
        self._lock = threading.Lock()

    @property
    def log_file(self) -> Path:
        return self._log_file

    def append(self, entry: RunLogEntry) -> None:
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._lock:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            with self._log_file.open("a", encoding="utf-8", errors="backslashreplace") as handle:
                handle.write(line + "\n")


__all__ = ["ProgressSink", "printable", "RunLogEntry", "RunLogger"]
