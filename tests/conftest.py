from __future__ import annotations

from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from gemtext_mirror.logging import ProgressSink


class CapturedSink(ProgressSink):
    def __init__(self, *, verbose: bool = True) -> None:
        self.stdout = StringIO()
        self.stderr = StringIO()
        super().__init__(
            verbose=verbose,
            console=Console(file=self.stdout, width=400),
            error_console=Console(file=self.stderr, width=400),
        )

    @property
    def lines(self) -> list[str]:
        return self.stdout.getvalue().splitlines()

    @property
    def errors(self) -> list[str]:
        return self.stderr.getvalue().splitlines()


@pytest.fixture
def sink() -> CapturedSink:
    return CapturedSink()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    root = tmp_path / "capsule"
    (root / "a").mkdir(parents=True)
    (root / "a" / "b.txt").write_bytes(b"X")
    (root / "index.gmi").write_bytes(b"# Home\n=> a/b.txt notes\n")
    (root / "a" / "deep").mkdir()
    (root / "a" / "deep" / "page.gmi").write_bytes(b"* one\n* two\n")
    (root / "a" / "deep" / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return root


@pytest.fixture
def quiet_sink() -> CapturedSink:
    return CapturedSink(verbose=False)
