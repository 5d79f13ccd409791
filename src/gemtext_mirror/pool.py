"""Fixed-size worker pool whose tasks may enqueue further tasks."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable


def default_parallelism() -> int:
    return max(1, os.cpu_count() or 1)


class WorkerPool:
    def __init__(self, workers: int | None = None, *, thread_name_prefix: str = "mirror-worker") -> None:
        if not workers or workers <= 0:
            workers = default_parallelism()
        self.workers = workers
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=thread_name_prefix)
        self._idle = threading.Condition()
        self._pending = 0
        self._errors: list[BaseException] = []

    def submit(self, func: Callable[..., Any], *args: Any) -> None:
        # counted before the task can start, so the count never dips to zero
        # while a parent still has children to enqueue
        with self._idle:
            self._pending += 1
        try:
            self._executor.submit(self._run, func, args)
        except RuntimeError:
            self._task_done()
            raise

    def _run(self, func: Callable[..., Any], args: tuple[Any, ...]) -> None:
        try:
            func(*args)
        except Exception as exc:
            with self._idle:
                self._errors.append(exc)
        finally:
            self._task_done()

    def _task_done(self) -> None:
        with self._idle:
            self._pending -= 1
            if self._pending == 0:
                self._idle.notify_all()

    @property
    def pending(self) -> int:
        with self._idle:
            return self._pending

    def wait(self) -> None:
        """Block until every submitted task, including nested ones, has finished."""

        with self._idle:
            self._idle.wait_for(lambda: self._pending == 0)
            errors = list(self._errors)
            self._errors.clear()
        if errors:
            raise errors[0]

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


__all__ = ["WorkerPool", "default_parallelism"]
