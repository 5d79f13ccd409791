from __future__ import annotations

import hashlib
import os
import time
from pathlib import Path
from typing import Iterator


def generate_run_id(prefix: str = "mirror") -> str:
    epoch_ms = int(time.time() * 1000)
    random_bits = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
    return f"{prefix}-{epoch_ms}-{random_bits}"


def iter_children(directory: Path) -> Iterator[str]:
    """Yield names of directories and regular files directly under *directory*.

    Symlinks are followed; dangling links, sockets and devices are left out.
    """

    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_dir() or entry.is_file():
                yield entry.name


__all__ = ["generate_run_id", "iter_children"]
