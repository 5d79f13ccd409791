from __future__ import annotations

import shutil
import threading
import time
from pathlib import Path

from .config import AppConfig
from .detection import EntryKind, html_destination, is_gemtext
from .logging import ProgressSink, RunLogEntry, RunLogger
from .models import Entry, MirrorAction, MirrorError, MirrorSummary
from .parser import convert_stream
from .pool import WorkerPool
from .utils import generate_run_id, iter_children


class MirrorService:
    """Mirror an input tree onto an output tree, rendering Gemtext as HTML."""

    def __init__(
        self,
        config: AppConfig,
        sink: ProgressSink,
        *,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._config = config
        self._sink = sink
        if run_logger is None and config.runtime.log_file is not None:
            run_logger = RunLogger(config.runtime.log_file)
        self._run_logger = run_logger
        self._run_id = generate_run_id()
        self._summary = MirrorSummary()
        self._summary_lock = threading.Lock()
        self._pool: WorkerPool | None = None

    @property
    def run_id(self) -> str:
        return self._run_id

    def run(self, seed: Entry) -> MirrorSummary:
        if seed.kind is EntryKind.OTHER:
            raise MirrorError(
                "SEED_UNSUPPORTED",
                f"Input path is neither a directory nor a regular file: {seed.input_path}",
            )
        self._run_id = generate_run_id()
        self._summary = MirrorSummary()
        start = time.perf_counter()
        with WorkerPool(self._config.runtime.parallelism) as pool:
            self._pool = pool
            try:
                pool.submit(self.handle_entry, seed)
                pool.wait()
            finally:
                self._pool = None
        self._summary.elapsed_s = time.perf_counter() - start
        return self._summary

    def handle_entry(self, entry: Entry) -> None:
        start = time.perf_counter()
        try:
            kind = entry.kind
            if kind is EntryKind.DIRECTORY:
                self._handle_directory(entry, start)
            elif kind is EntryKind.FILE:
                self._handle_file(entry, start)
        except OSError as exc:
            self._record_failure(entry, exc, start)

    def _handle_directory(self, entry: Entry, start: float) -> None:
        if not entry.output_path.exists():
            entry.output_path.mkdir()
            self._record(
                MirrorAction.CREATED_DIRECTORY,
                entry,
                entry.output_path,
                f"created directory {entry.output_path}",
                start,
            )
        else:
            self._record(
                MirrorAction.EXISTING_DIRECTORY,
                entry,
                entry.output_path,
                f"directory {entry.output_path} already exists, skipping",
                start,
            )
        for name in iter_children(entry.input_path):
            self._enqueue(entry.child(name))

    def _handle_file(self, entry: Entry, start: float) -> None:
        if is_gemtext(entry.input_path):
            destination = html_destination(entry.output_path)
            with entry.input_path.open("rb") as source, destination.open("wb") as sink:
                convert_stream(
                    source,
                    sink,
                    close_unterminated_preformat=self._config.parser.close_unterminated_preformat,
                )
            self._record(
                MirrorAction.PARSED,
                entry,
                destination,
                f"parsed {entry.input_path} -> {destination}",
                start,
            )
        elif not entry.output_path.exists():
            shutil.copy(entry.input_path, entry.output_path)
            self._record(
                MirrorAction.COPIED,
                entry,
                entry.output_path,
                f"copied {entry.input_path} -> {entry.output_path}",
                start,
            )
        else:
            self._record(
                MirrorAction.SKIPPED,
                entry,
                entry.output_path,
                f"{entry.output_path} already exists, skipping",
                start,
            )

    def _enqueue(self, entry: Entry) -> None:
        if self._pool is None:
            self.handle_entry(entry)
        else:
            self._pool.submit(self.handle_entry, entry)

    def _record(
        self,
        action: MirrorAction,
        entry: Entry,
        destination: Path,
        message: str,
        start: float,
    ) -> None:
        with self._summary_lock:
            self._summary.record(action)
        self._sink.emit(message)
        self._log(action, entry, destination, start)

    def _record_failure(self, entry: Entry, exc: OSError, start: float) -> None:
        with self._summary_lock:
            self._summary.record(MirrorAction.FAILED)
        self._sink.error(str(exc))
        self._log(
            MirrorAction.FAILED,
            entry,
            entry.output_path,
            start,
            error_code=type(exc).__name__,
            message=str(exc),
        )

    def _log(
        self,
        action: MirrorAction,
        entry: Entry,
        destination: Path,
        start: float,
        *,
        error_code: str | None = None,
        message: str | None = None,
    ) -> None:
        if self._run_logger is None:
            return
        self._run_logger.append(
            RunLogEntry(
                run_id=self._run_id,
                action=action.value,
                source=str(entry.input_path),
                destination=str(destination),
                error_code=error_code,
                message=message,
                elapsed_ms=(time.perf_counter() - start) * 1000,
            )
        )


__all__ = ["MirrorService"]
