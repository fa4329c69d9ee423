"""Shared test fixtures and configuration."""

import json
import os
import sys
from pathlib import Path
from typing import Callable

# Add glsl_lint/ to Python path so `from glsllint.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "glsl_lint"))

import pytest

from glsllint.editor.recording import RecordingEditor
from glsllint.linter.collection import DiagnosticCollection
from glsllint.settings import LintSettings
from glsllint.virtualdocs.store import VirtualDocumentStore

os.environ["GLSLLINT_DEV_MODE"] = "true"


_FAKE_VALIDATOR = '''\
import json
import os
import sys

source = sys.stdin.buffer.read().decode("utf-8")
with open({record!r}, "a", encoding="utf-8") as f:
    f.write(json.dumps({{"args": sys.argv[1:], "stdin": source, "cwd": os.getcwd()}}) + "\\n")
sys.stdout.write({stdout!r})
sys.stderr.write({stderr!r})
sys.exit({exit_code!r})
'''


class FakeValidator:
    """A Python script standing in for glslangValidator.

    Run as ``sys.executable <script> ...``: the script path goes in the base
    argument string, so the linter sees the interpreter as the validator.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self.script = directory / "fake_validator.py"
        self.record = directory / "calls.jsonl"
        self.configure()

    def configure(self, stdout: str = "", exit_code: int = 0, stderr: str = "") -> None:
        self.script.write_text(
            _FAKE_VALIDATOR.format(
                record=str(self.record),
                stdout=stdout,
                stderr=stderr,
                exit_code=exit_code,
            )
        )

    @property
    def path(self) -> str:
        return sys.executable

    @property
    def base_args(self) -> str:
        return str(self.script)

    @property
    def calls(self) -> list[dict]:
        if not self.record.exists():
            return []
        return [json.loads(line) for line in self.record.read_text().splitlines() if line]


@pytest.fixture
def fake_validator(tmp_path: Path) -> FakeValidator:
    directory = tmp_path / "validator"
    directory.mkdir()
    return FakeValidator(directory)


@pytest.fixture
def make_settings(fake_validator: FakeValidator) -> Callable[..., LintSettings]:
    def _make(**overrides) -> LintSettings:
        values = {
            "glslang_validator_path": fake_validator.path,
            "glslang_validator_args": fake_validator.base_args,
        }
        values.update(overrides)
        return LintSettings(**values)

    return _make


@pytest.fixture
def editor() -> RecordingEditor:
    return RecordingEditor()


@pytest.fixture
def collection() -> DiagnosticCollection:
    return DiagnosticCollection()


@pytest.fixture
def store() -> VirtualDocumentStore:
    return VirtualDocumentStore()
