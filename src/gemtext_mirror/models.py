"""Domain models for the mirror dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .detection import EntryKind, classify_path


class MirrorError(RuntimeError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True, slots=True)
class Entry:
    """One unit of dispatcher work: an input path and its mirrored output path."""

    input_path: Path
    output_path: Path

    @classmethod
    def seed(cls, input_dir: Path | str, output_dir: Path | str) -> Entry:
        try:
            input_path = Path(input_dir).resolve(strict=True)
        except OSError as exc:
            raise MirrorError("SEED_NOT_FOUND", f"Input path does not exist: {input_dir}") from exc
        return cls(input_path=input_path, output_path=Path(output_dir).absolute())

    def child(self, name: str) -> Entry:
        return Entry(input_path=self.input_path / name, output_path=self.output_path / name)

    @property
    def kind(self) -> EntryKind:
        return classify_path(self.input_path)


class MirrorAction(str, Enum):
    CREATED_DIRECTORY = "created_directory"
    EXISTING_DIRECTORY = "existing_directory"
    PARSED = "parsed"
    COPIED = "copied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class MirrorSummary:
    """Per-action counters for a single mirror run."""

    counts: dict[MirrorAction, int] = field(
        default_factory=lambda: {action: 0 for action in MirrorAction}
    )
    elapsed_s: float = 0.0

    def record(self, action: MirrorAction) -> None:
        self.counts[action] += 1

    def count(self, action: MirrorAction) -> int:
        return self.counts[action]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def failures(self) -> int:
        return self.counts[MirrorAction.FAILED]


__all__ = [
    "Entry",
    "MirrorAction",
    "MirrorError",
    "MirrorSummary",
]
