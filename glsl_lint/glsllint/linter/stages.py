"""Shader stage resolution.

A stage is resolved by an ordered list of strategies, each returning a stage
or ``None``. The first strategy that answers wins:

1. file extension (whole-file linting only), built-ins merged with the user's
   ``additional_stage_associations``
2. content patterns, an ordered priority list
3. an explicit ``#pragma vscode_glsllint_stage: STAGE`` directive, taken
   verbatim
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import PurePath

from glsllint.linter.models import ShaderStage

logger = logging.getLogger(__name__)

BUILTIN_STAGE_ASSOCIATIONS: dict[str, str] = {
    ".vert": ShaderStage.vert.value,
    ".vs": ShaderStage.vert.value,
    ".frag": ShaderStage.frag.value,
    ".fs": ShaderStage.frag.value,
    ".gs": ShaderStage.geom.value,
    ".geom": ShaderStage.geom.value,
    ".comp": ShaderStage.comp.value,
    ".tesc": ShaderStage.tesc.value,
    ".tese": ShaderStage.tese.value,
    ".rgen": ShaderStage.rgen.value,
    ".rint": ShaderStage.rint.value,
    ".rahit": ShaderStage.rahit.value,
    ".rchit": ShaderStage.rchit.value,
    ".rmiss": ShaderStage.rmiss.value,
    ".rcall": ShaderStage.rcall.value,
    ".mesh": ShaderStage.mesh.value,
    ".task": ShaderStage.task.value,
}

# Order matters: stages whose built-ins also appear in later stages go first
# (e.g. tessellation and geometry shaders write gl_Position too).
STAGE_EXPRESSIONS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (stage.value, re.compile(pattern, re.MULTILINE))
    for stage, pattern in (
        (ShaderStage.mesh, r"\bSetMeshOutputs(EXT|NV)\s*\(|\bgl_MeshVerticesEXT\b|\bgl_Primitive(Point|Line|Triangle)IndicesEXT\b"),
        (ShaderStage.task, r"\bEmitMeshTasksEXT\s*\(|\btaskPayloadSharedEXT\b"),
        (ShaderStage.rahit, r"\bignoreIntersectionEXT\b|\bterminateRayEXT\b"),
        (ShaderStage.rint, r"\breportIntersectionEXT\s*\("),
        (ShaderStage.rcall, r"\bcallableDataInEXT\b"),
        (ShaderStage.rchit, r"\bhitAttributeEXT\b|\bgl_HitTEXT\b|\bgl_InstanceCustomIndexEXT\b"),
        (ShaderStage.rmiss, r"\brayPayloadInEXT\b"),
        (ShaderStage.rgen, r"\btraceRayEXT\s*\(|\brayPayloadEXT\b|\bgl_LaunchIDEXT\b"),
        (ShaderStage.comp, r"\blocal_size_[xyz]\b|\bgl_GlobalInvocationID\b|\bgl_LocalInvocationI(D|ndex)\b"),
        (ShaderStage.tesc, r"layout\s*\(\s*vertices\s*=|\bgl_TessLevel(Outer|Inner)\s*\[[^\]]*\]\s*=[^=]"),
        (ShaderStage.tese, r"\bgl_TessCoord\b|\b(equal_spacing|fractional_even_spacing|fractional_odd_spacing)\b"),
        (ShaderStage.geom, r"\bEmit(Stream)?Vertex\s*\(|\bEndPrimitive\s*\(|\bmax_vertices\s*="),
        (ShaderStage.vert, r"\bgl_Position\s*=[^=]|\bgl_PointSize\s*=[^=]|\bgl_Vertex(ID|Index)\b|^\s*attribute\s+\w+"),
        (ShaderStage.frag, r"\bgl_Frag(Color|Data|Coord|Depth)\b|\bdiscard\s*;|^\s*(layout\s*\([^)]*\)\s*)?out\s+((lowp|mediump|highp)\s+)?vec4\b"),
    )
)

PRAGMA_STAGE_RE = re.compile(r"#pragma[ \t]+vscode_glsllint_stage[ \t]*:[ \t]*(\S+)")


class StageStrategy(ABC):
    """One tier of stage resolution."""

    name: str = ""

    @abstractmethod
    def resolve(self, text: str, file_name: str | None = None) -> str | None:
        ...


class ExtensionStrategy(StageStrategy):
    """Map a file extension to a stage; user associations win on collision.

    An association to an empty stage switches the built-in mapping for that
    extension off.
    """

    name = "extension"

    def __init__(self, additional: Mapping[str, str] | None = None) -> None:
        self._associations = {**BUILTIN_STAGE_ASSOCIATIONS, **(additional or {})}

    @property
    def associations(self) -> dict[str, str]:
        return dict(self._associations)

    def resolve(self, text: str, file_name: str | None = None) -> str | None:
        if not file_name:
            return None
        stage = self._associations.get(PurePath(file_name).suffix)
        return stage or None


class ContentPatternStrategy(StageStrategy):
    name = "content"

    def __init__(
        self, expressions: Sequence[tuple[str, re.Pattern[str]]] = STAGE_EXPRESSIONS
    ) -> None:
        self._expressions = tuple(expressions)

    def resolve(self, text: str, file_name: str | None = None) -> str | None:
        for stage, expression in self._expressions:
            if expression.search(text):
                return stage
        return None


class PragmaStrategy(StageStrategy):
    name = "pragma"

    def resolve(self, text: str, file_name: str | None = None) -> str | None:
        match = PRAGMA_STAGE_RE.search(text)
        return match.group(1) if match else None


class StageResolver:
    """Consult strategies in order and stop at the first answer."""

    def __init__(self, strategies: Sequence[StageStrategy]) -> None:
        self._strategies = tuple(strategies)

    @property
    def strategies(self) -> tuple[StageStrategy, ...]:
        return self._strategies

    def resolve(self, text: str, file_name: str | None = None) -> str | None:
        for strategy in self._strategies:
            stage = strategy.resolve(text, file_name)
            if stage:
                logger.debug(
                    "Stage %s resolved by %s strategy for %s",
                    stage, strategy.name, file_name or "<literal>",
                )
                return stage
        return None


def file_stage_resolver(additional: Mapping[str, str] | None = None) -> StageResolver:
    """Resolver for whole shader files: extension, then content, then pragma."""
    return StageResolver([ExtensionStrategy(additional), ContentPatternStrategy(), PragmaStrategy()])


def text_stage_resolver() -> StageResolver:
    """Resolver for embedded literals, which have no extension to go by."""
    return StageResolver([ContentPatternStrategy(), PragmaStrategy()])
