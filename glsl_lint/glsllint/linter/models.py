"""Lint pipeline data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ShaderStage(str, Enum):
    """Shader stages understood by glslangValidator's ``-S`` flag."""

    vert = "vert"
    frag = "frag"
    geom = "geom"
    comp = "comp"
    tesc = "tesc"
    tese = "tese"
    rgen = "rgen"
    rint = "rint"
    rahit = "rahit"
    rchit = "rchit"
    rmiss = "rmiss"
    rcall = "rcall"
    mesh = "mesh"
    task = "task"
    unknown = "unknown"


# Stages travel as plain strings: a #pragma directive may name any value.
UNKNOWN_STAGE = ShaderStage.unknown.value


class FragmentOrigin(str, Enum):
    whole_file = "whole-file"
    embedded_literal = "embedded-literal"


class LiteralRecord(BaseModel):
    """A string-like literal found in a host document."""

    text: str
    start_line: int = Field(..., ge=0, description="0-based line of the literal in the host document")
    stage: str = UNKNOWN_STAGE


class Fragment(BaseModel):
    """A unit of shader source submitted to the validator."""

    text: str
    stage: str = UNKNOWN_STAGE
    origin: FragmentOrigin = FragmentOrigin.whole_file
    line_offset: int = 0

    @classmethod
    def from_literal(cls, literal: LiteralRecord) -> Fragment:
        return cls(
            text=literal.text,
            stage=literal.stage,
            origin=FragmentOrigin.embedded_literal,
            line_offset=literal.start_line,
        )


class DiagnosticSeverity(str, Enum):
    error = "error"
    warning = "warning"


class Position(BaseModel):
    line: int
    character: int = 0


class Range(BaseModel):
    start: Position
    end: Position

    @classmethod
    def at_line(cls, line: int) -> Range:
        """Zero-width range at the start of a 0-based line."""
        return cls(start=Position(line=line), end=Position(line=line))

    def shifted(self, lines: int) -> Range:
        return Range(
            start=Position(line=self.start.line + lines, character=self.start.character),
            end=Position(line=self.end.line + lines, character=self.end.character),
        )


class Diagnostic(BaseModel):
    """A published diagnostic, always in host-document coordinates."""

    range: Range
    message: str
    severity: DiagnosticSeverity
    source: str = "glsllint"
