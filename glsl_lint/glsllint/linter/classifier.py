"""Pick shader sources out of extracted literals."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from glsllint.linter.models import UNKNOWN_STAGE, LiteralRecord
from glsllint.linter.stages import StageResolver, text_stage_resolver

# An entry point like ``void main() {`` is what separates shaders from other strings.
SHADER_RE = re.compile(r"main\s*\(.*\)\s*\{", re.MULTILINE)


def is_shader(text: str) -> bool:
    return SHADER_RE.search(text) is not None


def classify_literals(
    literals: Iterable[LiteralRecord],
    resolver: StageResolver | None = None,
    on_unresolved: Callable[[LiteralRecord], None] | None = None,
) -> list[LiteralRecord]:
    """Keep shader-looking literals, in document order, with their stage set.

    Literals whose stage cannot be determined keep the ``unknown`` sentinel
    and are passed to ``on_unresolved``.
    """
    resolver = resolver or text_stage_resolver()
    shaders: list[LiteralRecord] = []
    for literal in literals:
        if not is_shader(literal.text):
            continue
        stage = resolver.resolve(literal.text)
        if stage is None:
            stage = UNKNOWN_STAGE
            if on_unresolved is not None:
                on_unresolved(literal)
        shaders.append(literal.model_copy(update={"stage": stage}))
    return shaders
