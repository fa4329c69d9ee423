"""Tests for settings loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from glsllint.settings import DEFAULT_LITERAL_LANGUAGES, LintSettings, load_settings


def test_defaults() -> None:
    settings = LintSettings()
    assert settings.glslang_validator_path == ""
    assert settings.glslify_pattern == "#pragma glslify:"
    assert settings.supported_langs_with_string_literals == DEFAULT_LITERAL_LANGUAGES
    assert settings.additional_stage_associations == {}


def test_json_options_file(tmp_path: Path) -> None:
    path = tmp_path / "options.json"
    path.write_text(
        json.dumps(
            {
                "glslang_validator_path": "/opt/glslang/bin/glslangValidator",
                "additional_stage_associations": {".glsl": "frag"},
            }
        )
    )
    settings = load_settings(path)
    assert settings.glslang_validator_path == "/opt/glslang/bin/glslangValidator"
    assert settings.additional_stage_associations == {".glsl": "frag"}


def test_yaml_options_file(tmp_path: Path) -> None:
    path = tmp_path / "glsllint.yaml"
    path.write_text(
        "glslang_validator_args: -V --target-env vulkan1.2\n"
        "supported_langs_with_string_literals:\n"
        "  - javascript\n"
        "workspace_root: /work\n"
    )
    settings = load_settings(path)
    assert settings.glslang_validator_args == "-V --target-env vulkan1.2"
    assert settings.supported_langs_with_string_literals == ["javascript"]
    assert settings.workspace_root == "/work"


def test_env_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GLSLLINT_OPTIONS_PATH", str(tmp_path / "missing.json"))
    monkeypatch.setenv("GLSLLINT_VALIDATOR_PATH", "${env:VULKAN_SDK}/bin/glslangValidator")
    monkeypatch.setenv("GLSLLINT_LITERAL_LANGUAGES", "typescript, javascript")
    monkeypatch.delenv("GLSLLINT_WORKSPACE_ROOT", raising=False)

    settings = load_settings()

    assert settings.glslang_validator_path == "${env:VULKAN_SDK}/bin/glslangValidator"
    assert settings.supported_langs_with_string_literals == ["typescript", "javascript"]
    assert settings.workspace_root is None


def test_empty_yaml_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_settings(path) == LintSettings()
