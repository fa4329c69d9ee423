"""Linter settings: options file or environment fallback."""

from __future__ import annotations

import json
import logging
import os
from io import StringIO
from pathlib import Path

from pydantic import BaseModel, Field
from ruamel.yaml import YAML

from glsllint.preprocess.glslify import DEFAULT_GLSLIFY_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "/data/options.json"

DEFAULT_LITERAL_LANGUAGES = [
    "javascript",
    "typescript",
    "javascriptreact",
    "typescriptreact",
]


class LintSettings(BaseModel):
    glslang_validator_path: str = ""
    glslang_validator_args: str = ""
    glslify_pattern: str = DEFAULT_GLSLIFY_PATTERN
    glslify_path: str = "glslify"
    additional_stage_associations: dict[str, str] = Field(default_factory=dict)
    supported_langs_with_string_literals: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LITERAL_LANGUAGES)
    )
    workspace_root: str | None = None


def _from_env() -> dict:
    options: dict = {
        "glslang_validator_path": os.environ.get("GLSLLINT_VALIDATOR_PATH", ""),
        "glslang_validator_args": os.environ.get("GLSLLINT_VALIDATOR_ARGS", ""),
        "glslify_path": os.environ.get("GLSLLINT_GLSLIFY_PATH", "glslify"),
        "workspace_root": os.environ.get("GLSLLINT_WORKSPACE_ROOT") or None,
    }
    languages = os.environ.get("GLSLLINT_LITERAL_LANGUAGES")
    if languages is not None:
        options["supported_langs_with_string_literals"] = [
            lang.strip() for lang in languages.split(",") if lang.strip()
        ]
    return options


def _read_options_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        yaml = YAML(typ="safe")
        loaded = yaml.load(StringIO(text))
    else:
        loaded = json.loads(text)
    return dict(loaded) if loaded else {}


def load_settings(path: str | Path | None = None) -> LintSettings:
    """Load settings from an options file (JSON or YAML) or the environment."""
    opts_path = Path(path or os.environ.get("GLSLLINT_OPTIONS_PATH", DEFAULT_OPTIONS_PATH))
    if opts_path.exists():
        logger.info("Loading settings from %s", opts_path)
        return LintSettings(**_read_options_file(opts_path))
    return LintSettings(**_from_env())
