"""Shared fixtures: a scriptable stand-in for the `bw` CLI."""

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

from passbridge.config import BrokerConfig

STUB_SCRIPT = '''
import json, os, sys, time

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, "behaviour.json")) as f:
    behaviour = json.load(f)

with open(os.path.join(here, "calls.jsonl"), "a") as f:
    f.write(json.dumps({
        "argv": sys.argv[1:],
        "pid": os.getpid(),
        "password": os.environ.get("PASSBRIDGE_BW_PASSWORD"),
    }) + "\\n")

expected = behaviour.get("expect_argv")
if expected is not None and sys.argv[1:] != expected:
    sys.stderr.write("unexpected arguments")
    sys.exit(2)

time.sleep(behaviour.get("sleep", 0))
sys.stdout.write(behaviour.get("stdout", ""))
sys.stdout.flush()
sys.stderr.write(behaviour.get("stderr", ""))
sys.exit(behaviour.get("exit_code", 0))
'''


@dataclass
class FakeCli:
    path: Path
    directory: Path

    def behave(self, **behaviour) -> "FakeCli":
        (self.directory / "behaviour.json").write_text(json.dumps(behaviour))
        return self

    @property
    def calls(self) -> list[dict]:
        log = self.directory / "calls.jsonl"
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text().splitlines() if line]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("PASSBRIDGE_BW_BINARY", "PASSBRIDGE_EXEC_TIMEOUT", "PASSBRIDGE_PORT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fake_bw(tmp_path) -> FakeCli:
    """An executable `bw` whose output is set with `.behave(...)`."""
    directory = tmp_path / "fake_bw"
    directory.mkdir()
    script = directory / "stub.py"
    script.write_text(STUB_SCRIPT)

    # exec keeps the stub's pid equal to the spawned child's pid
    wrapper = directory / "bw"
    wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
    wrapper.chmod(0o755)
    return FakeCli(path=wrapper, directory=directory).behave()


@pytest.fixture
def settings_path(tmp_path) -> Path:
    return tmp_path / "settings.json"


@pytest.fixture
def config(fake_bw, settings_path) -> BrokerConfig:
    return BrokerConfig(
        binary_path=str(fake_bw.path),
        exec_timeout_ms=10000,
        settings_path=settings_path,
    )
