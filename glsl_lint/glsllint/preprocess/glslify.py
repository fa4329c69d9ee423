"""glslify module includes, flattened by the glslify command line tool."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from glsllint.preprocess.base import PreprocessError, Preprocessor

logger = logging.getLogger(__name__)

DEFAULT_GLSLIFY_PATTERN = "#pragma glslify:"


class GlslifyPreprocessor(Preprocessor):
    """Run ``glslify <file>`` and use its stdout as the shader source.

    glslify works on the file on disk, so the document must be saved.
    """

    name = "glslify"

    def __init__(self, pattern: str = DEFAULT_GLSLIFY_PATTERN, glslify_path: str = "glslify") -> None:
        super().__init__(pattern)
        self._glslify_path = glslify_path or "glslify"

    async def flatten(self, text: str, file_name: str) -> str:
        path = Path(file_name)
        try:
            process = await asyncio.create_subprocess_exec(
                self._glslify_path,
                str(path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(path.parent),
            )
        except OSError as e:
            raise PreprocessError(f"Failed to start glslify '{self._glslify_path}': {e}") from e

        try:
            stdout, stderr = await process.communicate()
        except BaseException:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        if process.returncode != 0:
            raise PreprocessError(
                f"glslify exited with {process.returncode}:\n"
                f"{stderr.decode('utf-8', errors='replace').strip()}"
            )

        logger.info("glslify flattened %s", file_name)
        return stdout.decode("utf-8", errors="replace")
