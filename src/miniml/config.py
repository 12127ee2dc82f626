"""TOML config loading for miniml.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "miniml.toml"


@dataclass
class ParseConfig:
    require_eof: bool = True


@dataclass
class OutputConfig:
    show_positions: bool = False


@dataclass
class MinimlConfig:
    parse: ParseConfig = field(default_factory=ParseConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path | None:
    """Walk up directories to find miniml.toml. Returns None if there is none."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            return None
        path = parent


def load_config(path: Path | None) -> MinimlConfig:
    """Parse a miniml.toml file into a MinimlConfig; None gives the defaults."""
    config = MinimlConfig()
    if path is None:
        return config

    with open(path, "rb") as f:
        data = tomllib.load(f)

    if "parse" in data:
        prs = data["parse"]
        config.parse = ParseConfig(
            require_eof=prs.get("require_eof", True),
        )

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            show_positions=out.get("show_positions", False),
        )

    return config
