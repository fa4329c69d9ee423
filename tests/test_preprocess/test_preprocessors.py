"""Tests for the include-flattening preprocessors."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import pytest

from glsllint.preprocess.base import PreprocessError
from glsllint.preprocess.glslify import GlslifyPreprocessor
from glsllint.preprocess.imports import ImportPreprocessor

FAKE_GLSLIFY = """\
import sys
from pathlib import Path

source = Path(sys.argv[-1]).read_text()
if "broken" in source:
    sys.stderr.write("Cannot find module 'glsl-broken'\\n")
    sys.exit(1)
sys.stdout.write("// glslified\\n" + source.replace("#pragma glslify: ", "// "))
"""


SLOW_GLSLIFY = """\
import os
import sys
import time
from pathlib import Path

Path(sys.argv[-1]).with_suffix(".pid").write_text(str(os.getpid()))
time.sleep(60)
"""


def _fake_glslify(tmp_path: Path, source: str = FAKE_GLSLIFY) -> Path:
    """A launcher script standing in for the glslify CLI."""
    script = tmp_path / "fake_glslify.py"
    script.write_text(source)
    launcher = tmp_path / "glslify"
    launcher.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
    launcher.chmod(0o755)
    return launcher


class TestImportPreprocessor:
    def test_trigger(self) -> None:
        pre = ImportPreprocessor()
        assert pre.applies("@import ./lighting;\nvoid main() {}")
        assert pre.applies("@IMPORT ./lighting;")
        assert not pre.applies("#include \"lighting.glsl\"")

    @pytest.mark.asyncio
    async def test_imports_are_inlined(self, tmp_path: Path) -> None:
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "noise.glsl").write_text("float noise(vec2 p) { return 0.0; }")
        (tmp_path / "light.glsl").write_text("vec3 light() { return vec3(1.0); }")
        shader = tmp_path / "shader.frag"
        source = "@import ./lib/noise;\n@import light;\nvoid main() {}\n"

        flattened = await ImportPreprocessor().flatten(source, str(shader))

        assert flattened == (
            "float noise(vec2 p) { return 0.0; }\n"
            "vec3 light() { return vec3(1.0); }\n"
            "void main() {}\n"
        )

    @pytest.mark.asyncio
    async def test_imported_files_are_not_expanded_again(self, tmp_path: Path) -> None:
        (tmp_path / "a.glsl").write_text("@import ./b;\n")
        flattened = await ImportPreprocessor().flatten("@import ./a;", str(tmp_path / "s.frag"))
        assert flattened == "@import ./b;\n"

    @pytest.mark.asyncio
    async def test_missing_import_raises(self, tmp_path: Path) -> None:
        with pytest.raises(PreprocessError):
            await ImportPreprocessor().flatten("@import ./nope;", str(tmp_path / "s.frag"))

    @pytest.mark.asyncio
    async def test_undecodable_import_raises(self, tmp_path: Path) -> None:
        (tmp_path / "common.glsl").write_bytes(b"// \xff\xfe\n")
        with pytest.raises(PreprocessError, match="common.glsl"):
            await ImportPreprocessor().flatten("@import ./common;", str(tmp_path / "s.frag"))


class TestGlslifyPreprocessor:
    def test_default_trigger(self) -> None:
        pre = GlslifyPreprocessor()
        assert pre.applies("#pragma glslify: noise = require('glsl-noise/simplex/2d')")
        assert not pre.applies("#pragma optimize(on)")

    def test_custom_trigger(self) -> None:
        pre = GlslifyPreprocessor(pattern=r"^#pragma\s+glslify")
        assert pre.applies("void f();\n#pragma  glslify: x = require('y')")

    @pytest.mark.skipif(sys.platform == "win32", reason="uses a shell launcher")
    @pytest.mark.asyncio
    async def test_runs_glslify_on_the_file(self, tmp_path: Path) -> None:
        shader = tmp_path / "shader.frag"
        shader.write_text("#pragma glslify: noise = require('glsl-noise')\nvoid main() {}\n")
        pre = GlslifyPreprocessor(glslify_path=str(_fake_glslify(tmp_path)))

        flattened = await pre.flatten(shader.read_text(), str(shader))

        assert flattened == "// glslified\n// noise = require('glsl-noise')\nvoid main() {}\n"

    @pytest.mark.skipif(sys.platform == "win32", reason="uses a shell launcher")
    @pytest.mark.asyncio
    async def test_glslify_failure_raises(self, tmp_path: Path) -> None:
        shader = tmp_path / "shader.frag"
        shader.write_text("#pragma glslify: x = require('glsl-broken')\n")
        pre = GlslifyPreprocessor(glslify_path=str(_fake_glslify(tmp_path)))

        with pytest.raises(PreprocessError, match="glsl-broken"):
            await pre.flatten(shader.read_text(), str(shader))

    @pytest.mark.asyncio
    async def test_missing_tool_raises(self, tmp_path: Path) -> None:
        pre = GlslifyPreprocessor(glslify_path=str(tmp_path / "no-glslify"))
        with pytest.raises(PreprocessError):
            await pre.flatten("", str(tmp_path / "shader.frag"))

    @pytest.mark.skipif(sys.platform == "win32", reason="uses a shell launcher")
    @pytest.mark.asyncio
    async def test_cancelled_flatten_kills_and_reaps_glslify(self, tmp_path: Path) -> None:
        shader = tmp_path / "shader.frag"
        shader.write_text("#pragma glslify: x = require('glsl-slow')\n")
        pid_file = tmp_path / "shader.pid"
        pre = GlslifyPreprocessor(glslify_path=str(_fake_glslify(tmp_path, SLOW_GLSLIFY)))

        task = asyncio.create_task(pre.flatten(shader.read_text(), str(shader)))
        for _ in range(1000):
            if pid_file.exists() and pid_file.read_text():
                break
            await asyncio.sleep(0.01)
        pid = int(pid_file.read_text())
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)
