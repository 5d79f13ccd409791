from __future__ import annotations

import json
import os
import threading
from io import BytesIO, StringIO, TextIOWrapper
from pathlib import Path

import pytest
from rich.console import Console

from gemtext_mirror.config import AppConfig, RuntimeConfig
from gemtext_mirror.core import MirrorService
from gemtext_mirror.logging import ProgressSink, printable
from gemtext_mirror.models import Entry, MirrorAction


def strict_console() -> tuple[Console, BytesIO]:
    raw = BytesIO()
    stream = TextIOWrapper(raw, encoding="utf-8", errors="strict", write_through=True)
    return Console(file=stream, width=400), raw


def make_latin1_tree(tmp_path: Path) -> Path:
    source = tmp_path / "in"
    source.mkdir()
    try:
        (source / os.fsdecode(b"caf\xe9.txt")).write_bytes(b"latte")
    except (OSError, UnicodeError):
        pytest.skip("filesystem rejects non-UTF-8 names")
    (source / "plain.txt").write_bytes(b"p")
    return source


def test_printable_escapes_undecodable_bytes() -> None:
    assert printable(os.fsdecode(b"caf\xe9.txt")) == "caf\\xe9.txt"
    assert printable("café.txt") == "café.txt"


def test_non_utf8_filename_with_strict_console(tmp_path: Path) -> None:
    source = make_latin1_tree(tmp_path)
    console, raw = strict_console()
    sink = ProgressSink(verbose=True, console=console, error_console=Console(file=StringIO()))
    output = tmp_path / "out"

    summary = MirrorService(AppConfig(), sink).run(Entry.seed(source, output))

    assert summary.failures == 0
    assert summary.count(MirrorAction.COPIED) == 2
    assert (output / os.fsdecode(b"caf\xe9.txt")).read_bytes() == b"latte"
    assert "caf\\xe9.txt" in raw.getvalue().decode("utf-8")


def test_non_utf8_filename_in_run_log(tmp_path: Path) -> None:
    source = make_latin1_tree(tmp_path)
    log_file = tmp_path / "run.jsonl"
    sink = ProgressSink(console=Console(file=StringIO()), error_console=Console(file=StringIO()))
    config = AppConfig(runtime=RuntimeConfig(log_file=log_file))

    summary = MirrorService(config, sink).run(Entry.seed(source, tmp_path / "out"))

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert summary.failures == 0
    assert len(records) == summary.total


def test_concurrent_emits_never_interleave() -> None:
    buffer = StringIO()
    sink = ProgressSink(verbose=True, console=Console(file=buffer, width=400))
    messages = {f"worker {n} line {i} " + "x" * 200 for n in range(8) for i in range(50)}
    barrier = threading.Barrier(8)

    def writer(n: int) -> None:
        barrier.wait()
        for i in range(50):
            sink.emit(f"worker {n} line {i} " + "x" * 200)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = buffer.getvalue().splitlines()
    assert len(lines) == len(messages)
    assert set(lines) == messages
