import subprocess

import pytest

from gitflux.core.config import set_config

GITFLUX_ENV_VARS = [
    "GITFLUX_REPO_DIR",
    "GITFLUX_VERSION_FILE",
    "GITFLUX_ARTIFACT_SINCE",
    "GITFLUX_LEGACY_TAG_PATTERN",
    "GITFLUX_SNAPSHOT_SUFFIX",
    "GITFLUX_GIT",
    "GITFLUX_GIT_TIMEOUT",
    "GITFLUX_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment from leaking into the config."""
    for name in GITFLUX_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)


class FakeGit:
    """Canned answers for git subcommands, keyed by their argument tuple."""

    def __init__(self):
        self.outputs = {}
        self.calls = []

    def answer(self, *args, stdout=""):
        self.outputs[args] = stdout

    def run(self, command, **kwargs):
        self.calls.append((command, kwargs))
        key = tuple(command[1:])
        if key in self.outputs:
            return subprocess.CompletedProcess(command, 0, stdout=self.outputs[key], stderr="")
        raise subprocess.CalledProcessError(
            128, command, output="", stderr="fatal: not a git repository"
        )


@pytest.fixture
def fake_git(monkeypatch):
    git = FakeGit()
    monkeypatch.setattr(subprocess, "run", git.run)
    return git
