"""Webpack-style ``@import path;`` includes."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from glsllint.preprocess.base import PreprocessError, Preprocessor

logger = logging.getLogger(__name__)

IMPORT_RE = re.compile(r"@import ([./\w_-]+);", re.IGNORECASE)


class ImportPreprocessor(Preprocessor):
    """Inline ``@import ./common;`` with ``<dir>/common.glsl``.

    Imports are resolved relative to the importing file and only one level
    deep: imported files are inserted as written.
    """

    name = "import"

    def __init__(self) -> None:
        super().__init__(IMPORT_RE)

    async def flatten(self, text: str, file_name: str) -> str:
        base_dir = Path(file_name).parent

        def replace(match: re.Match[str]) -> str:
            include = base_dir / f"{match.group(1)}.glsl"
            try:
                return include.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise PreprocessError(f"Cannot read imported file {include}: {e}") from e

        flattened = IMPORT_RE.sub(replace, text)
        logger.debug("Flattened @import includes of %s", file_name)
        return flattened
