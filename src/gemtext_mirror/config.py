from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CONFIG_FILE = Path("gemtext-mirror.toml")


@dataclass(slots=True)
class ParserConfig:
    close_unterminated_preformat: bool = False


@dataclass(slots=True)
class RuntimeConfig:
    parallelism: int = 0
    verbose: bool = False
    log_file: Path | None = None


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    log_file = data.get("log_file")
    return RuntimeConfig(
        parallelism=int(data.get("parallelism", 0)),
        verbose=bool(data.get("verbose", False)),
        log_file=Path(str(log_file)) if log_file else None,
    )


def _build_parser(data: Mapping[str, object] | None) -> ParserConfig:
    if not data:
        return ParserConfig()
    return ParserConfig(
        close_unterminated_preformat=bool(data.get("close_unterminated_preformat", False)),
    )


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    runtime_data = raw.get("runtime") if isinstance(raw, Mapping) else None
    parser_data = raw.get("parser") if isinstance(raw, Mapping) else None
    runtime = _build_runtime(runtime_data if isinstance(runtime_data, Mapping) else None)
    parser = _build_parser(parser_data if isinstance(parser_data, Mapping) else None)
    return AppConfig(runtime=runtime, parser=parser)
