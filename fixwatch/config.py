import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict


@dataclass(frozen=True)
class WatchConfig:
    dir: Path


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    message: str


class ConfigError(ValueError):
    pass


def load_config(path: Path) -> WatchConfig:
    """Read a JSON config file holding at least a non-empty "dir" string."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object.")
    return config_from_mapping(raw)


def config_from_mapping(data: Dict[str, Any]) -> WatchConfig:
    value = data.get("dir")
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("Config 'dir' must be a non-empty string.")
    return WatchConfig(dir=Path(value.strip()).expanduser())


def validate_directory(path: Path) -> CheckResult:
    if not path.exists():
        return CheckResult(False, f"Directory does not exist: {path}")
    if not path.is_dir():
        return CheckResult(False, f"Not a directory: {path}")
    if not os.access(path, os.R_OK | os.X_OK):
        return CheckResult(False, f"Directory is not readable: {path}")
    return CheckResult(True, f"Watching {path}")
