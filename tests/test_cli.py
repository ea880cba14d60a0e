"""End-to-end CLI tests with the observer and dependency checks stubbed out."""

import json
from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

import fixwatch.cli as cli
from fixwatch.config import CheckResult

runner = CliRunner()


class FakeObserver:
    instances = []

    def __init__(self):
        self.scheduled = []
        self.started = False
        self.stopped = False
        FakeObserver.instances.append(self)

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self):
        pass


class StubChecker:
    result = CheckResult(True, "ALL DEPENDENCIES ARE PRESENT")
    ran = False

    def __init__(self, **kwargs):
        StubChecker.kwargs = kwargs

    def run(self):
        StubChecker.ran = True
        return StubChecker.result


def _interrupt(_seconds):
    raise KeyboardInterrupt


@pytest.fixture(autouse=True)
def stubs(monkeypatch):
    FakeObserver.instances = []
    StubChecker.result = CheckResult(True, "ALL DEPENDENCIES ARE PRESENT")
    StubChecker.ran = False
    monkeypatch.setattr(cli, "Observer", FakeObserver)
    monkeypatch.setattr(cli, "PollingObserver", FakeObserver)
    monkeypatch.setattr(cli, "DependencyChecker", StubChecker)
    monkeypatch.setattr(cli, "time", SimpleNamespace(sleep=_interrupt))


def test_watches_directory_and_stops_cleanly(tmp_path):
    result = runner.invoke(cli.app, ["--dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    (obs,) = FakeObserver.instances
    handler, path, recursive = obs.scheduled[0]
    assert path == str(tmp_path.resolve())
    assert recursive is True
    assert handler.delay == pytest.approx(0.555)
    assert obs.started and obs.stopped
    assert "ALL DEPENDENCIES ARE PRESENT" in result.output


def test_dir_from_config_file(tmp_path):
    site = tmp_path / "site"
    site.mkdir()
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"dir": str(site)}))
    result = runner.invoke(cli.app, ["--config", str(cfg), "--delay", "0.1"])
    assert result.exit_code == 0, result.output
    handler, path, _ = FakeObserver.instances[0].scheduled[0]
    assert path == str(site.resolve())
    assert handler.delay == pytest.approx(0.1)


def test_missing_directory_exits_before_watching(tmp_path):
    result = runner.invoke(cli.app, ["--dir", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert FakeObserver.instances == []
    assert StubChecker.ran is False


def test_missing_required_tool_exits_before_watching(tmp_path):
    StubChecker.result = CheckResult(False, "Sorry, this script requires PHP")
    result = runner.invoke(cli.app, ["--dir", str(tmp_path)])
    assert result.exit_code == 1
    assert FakeObserver.instances == []


def test_bad_config_file_exits_1(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text("{}")
    result = runner.invoke(cli.app, ["--config", str(cfg)])
    assert result.exit_code == 1
    assert FakeObserver.instances == []


def test_no_directory_given_exits_1(monkeypatch):
    monkeypatch.delenv("FIXWATCH_DIR", raising=False)
    monkeypatch.delenv("FIXWATCH_CONFIG", raising=False)
    result = runner.invoke(cli.app, ["--loglevel", "DEBUG"])
    assert result.exit_code == 1


def test_skip_deps_and_all_linters_flag(tmp_path):
    result = runner.invoke(cli.app, ["--dir", str(tmp_path), "--skip-deps"])
    assert result.exit_code == 0
    assert StubChecker.ran is False

    result = runner.invoke(cli.app, ["--dir", str(tmp_path), "--probe-all-linters"])
    assert result.exit_code == 0
    assert StubChecker.kwargs["probe_all_linters"] is True


def test_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("FIXWATCH_DIR", str(tmp_path))
    result = runner.invoke(cli.app, ["--no-poll"])
    assert result.exit_code == 0, result.output
    assert FakeObserver.instances[0].scheduled[0][1] == str(tmp_path.resolve())
