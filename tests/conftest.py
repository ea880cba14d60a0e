"""Shared fixtures for fixwatch tests."""

import subprocess
from typing import List

import pytest


class FakeRunner:
    """Records argv lists instead of spawning processes."""

    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: List[List[str]] = []

    def __call__(self, argv, check=False, **kwargs):
        self.calls.append(list(argv))
        return subprocess.CompletedProcess(argv, self.returncode)


class InlineExecutor:
    """Runs submitted callables immediately on the calling thread."""

    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        fn(*args, **kwargs)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def all_tools():
    return ("php", "npm", "composer", "phpcs", "phpcbf", "stylelint", "eslint")


@pytest.fixture
def make_which():
    """Build a PATH lookup that only knows the given tool names."""

    def _make(*present: str):
        found = set(present)
        return lambda name: f"/usr/bin/{name}" if name in found else None

    return _make
