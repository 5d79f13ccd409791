from __future__ import annotations

from enum import Enum
from pathlib import Path


GEMTEXT_EXTENSION = ".gmi"
HTML_EXTENSION = ".html"


class EntryKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


def classify_path(path: Path) -> EntryKind:
    # is_dir/is_file follow symlinks and report False on stat errors
    if path.is_dir():
        return EntryKind.DIRECTORY
    if path.is_file():
        return EntryKind.FILE
    return EntryKind.OTHER


def is_gemtext(path: Path) -> bool:
    return path.suffix == GEMTEXT_EXTENSION


def html_destination(path: Path) -> Path:
    return path.with_suffix(HTML_EXTENSION)


__all__ = [
    "EntryKind",
    "GEMTEXT_EXTENSION",
    "HTML_EXTENSION",
    "classify_path",
    "html_destination",
    "is_gemtext",
]
