import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

PHP_STANDARD = "PSR2"


@dataclass(frozen=True)
class ToolInvocation:
    argv: List[str]
    returncode: int


def command_for(path: Path) -> Optional[List[str]]:
    """Return the fixer argv for a changed file, or None if its type is not handled.

    - .php -> phpcbf --standard=PSR2 <path>
    - .css -> stylelint "<path>" --fix
    - .js  -> eslint "<path>" --fix
    """
    name = str(path)
    ext = path.suffix
    if ext == ".php":
        return ["phpcbf", f"--standard={PHP_STANDARD}", name]
    if ext == ".css":
        return ["stylelint", name, "--fix"]
    if ext == ".js":
        return ["eslint", name, "--fix"]
    return None


def render(argv: List[str]) -> str:
    """Render argv the way it reads on a shell line; linter paths are double-quoted."""
    if argv and argv[0] in ("stylelint", "eslint"):
        return f'{argv[0]} "{argv[1]}" ' + " ".join(argv[2:])
    return " ".join(argv)


def run_tool(
    argv: List[str], runner: Callable[..., subprocess.CompletedProcess] = subprocess.run
) -> ToolInvocation:
    # Output goes straight to the console; the exit code is only recorded.
    logging.debug(f"Running: {render(argv)}")
    proc = runner(argv, check=False)
    logging.debug(f"{argv[0]} exited with {proc.returncode}")
    return ToolInvocation(argv=list(argv), returncode=proc.returncode)
