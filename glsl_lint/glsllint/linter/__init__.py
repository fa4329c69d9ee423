"""Embedded-shader lint pipeline."""

from glsllint.linter.collection import DiagnosticCollection
from glsllint.linter.engine import LintEngine, LintMode
from glsllint.linter.models import (
    Diagnostic,
    DiagnosticSeverity,
    Fragment,
    FragmentOrigin,
    LiteralRecord,
    ShaderStage,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCollection",
    "DiagnosticSeverity",
    "Fragment",
    "FragmentOrigin",
    "LintEngine",
    "LintMode",
    "LiteralRecord",
    "ShaderStage",
]
