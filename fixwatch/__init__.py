"""fixwatch package: watch a directory tree and run PHP/CSS/JS fixers on changed files.

Exports:
- app, main: Typer CLI entrypoints (from fixwatch.cli)
- LintFixHandler, ChangeEvent, ChangeKind: watchdog dispatch (from fixwatch.handlers)
- DependencyChecker: external tool preflight (from fixwatch.deps)
- command_for, run_tool: fixer commands (from fixwatch.commands)
- WatchConfig, load_config, validate_directory: configuration (from fixwatch.config)
"""

from .cli import app, main  # noqa: F401
from .commands import ToolInvocation, command_for, run_tool  # noqa: F401
from .config import (  # noqa: F401
    CheckResult,
    ConfigError,
    WatchConfig,
    load_config,
    validate_directory,
)
from .deps import DependencyChecker  # noqa: F401
from .handlers import ChangeEvent, ChangeKind, LintFixHandler  # noqa: F401

__all__ = [
    "app",
    "main",
    "ToolInvocation",
    "command_for",
    "run_tool",
    "CheckResult",
    "ConfigError",
    "WatchConfig",
    "load_config",
    "validate_directory",
    "DependencyChecker",
    "ChangeEvent",
    "ChangeKind",
    "LintFixHandler",
]
