import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import typer
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .config import ConfigError, WatchConfig, load_config, validate_directory
from .deps import DependencyChecker
from .handlers import DEFAULT_DELAY, LintFixHandler


app = typer.Typer(add_completion=False, no_args_is_help=True)


def welcome(root: Path) -> None:
    typer.secho("fixwatch: PHP / CSS / JS fixers on save", fg=typer.colors.CYAN, bold=True)
    typer.secho(f"Watching {root}", fg=typer.colors.CYAN)


def resolve_config(config_file: Optional[Path], watch_dir: Optional[Path]) -> WatchConfig:
    """Command line --dir wins over the config file's "dir"."""
    if watch_dir is not None:
        return WatchConfig(dir=watch_dir.expanduser())
    if config_file is not None:
        return load_config(config_file)
    raise ConfigError("No directory to watch: pass --dir or --config")


@app.command()
def main(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        help='JSON config file with a "dir" entry',
        envvar="FIXWATCH_CONFIG",
    ),
    watch_dir: Optional[Path] = typer.Option(
        None,
        "--dir",
        help="Directory tree to watch; overrides the config file",
        envvar="FIXWATCH_DIR",
    ),
    delay: float = typer.Option(
        DEFAULT_DELAY,
        "--delay",
        help="Seconds to wait for a file to settle before fixing it",
        envvar="FIXWATCH_DELAY",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        help="Fixer worker threads (1 keeps fixes strictly one at a time)",
        envvar="FIXWATCH_WORKERS",
    ),
    use_polling: Optional[bool] = typer.Option(
        None, "--poll/--no-poll", help="Force polling observer (auto if under /mnt)"
    ),
    probe_all_linters: bool = typer.Option(
        False,
        "--probe-all-linters",
        help="Check eslint even when stylelint had to be installed",
    ),
    skip_deps: bool = typer.Option(
        False, "--skip-deps", help="Do not check or install external tools"
    ),
    loglevel: str = typer.Option(
        "INFO", "--loglevel", help="Logging level: DEBUG, INFO, WARNING, ERROR"
    ),
):
    """Watch a directory and run phpcbf, stylelint or eslint on changed files.

    - .php files get phpcbf --standard=PSR2, .css files stylelint --fix, .js files eslint --fix.
    - Missing php, npm or composer aborts; missing linters are installed globally first.
    """
    # Logging
    logging.basicConfig(
        level=getattr(logging, loglevel.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = resolve_config(config_file, watch_dir)
    except ConfigError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    check = validate_directory(config.dir)
    if not check.ok:
        typer.secho(check.message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    root = config.dir.resolve()

    welcome(root)

    if not skip_deps:
        checker = DependencyChecker(
            probe_all_linters=probe_all_linters,
            notify=lambda msg: typer.secho(msg, fg=typer.colors.GREEN),
        )
        result = checker.run()
        if not result.ok:
            typer.secho(result.message, fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        typer.secho(f"✓ {result.message}", fg=typer.colors.GREEN, bold=True)

    # Auto-poll under /mnt to avoid inotify issues
    if use_polling is None:
        use_polling = str(root).startswith("/mnt/")

    logging.info(f"Observer: {'Polling' if use_polling else 'Inotify'}")
    logging.info(f"Debounce: {delay}s, workers: {workers}")

    executor = ThreadPoolExecutor(
        max_workers=max(1, workers), thread_name_prefix="fix-worker"
    )
    handler = LintFixHandler(executor, delay=delay)

    observer = PollingObserver() if use_polling else Observer()
    observer.schedule(handler, os.fspath(root), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logging.info("Stopping watcher...")
    finally:
        observer.stop()
        observer.join()
        handler.close()
        executor.shutdown(wait=True)


if __name__ == "__main__":
    app()
