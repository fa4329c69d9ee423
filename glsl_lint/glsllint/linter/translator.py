"""Turn glslangValidator output into diagnostics.

Validator lines look like ``ERROR: stdin:7:3: 'foo' : syntax error``. Only
the line number is kept; every diagnostic sits at column 0.
"""

from __future__ import annotations

import logging
import re

from glsllint.linter.invoker import ValidatorRun
from glsllint.linter.models import (
    Diagnostic,
    DiagnosticSeverity,
    Fragment,
    FragmentOrigin,
    Range,
)

logger = logging.getLogger(__name__)

STREAM_LABEL = "stdin"

# <severity>: <label>:<line>[:<col>]: <message>
DIAGNOSTIC_LINE_RE = re.compile(r"^(ERROR|WARNING):\s*(.+?):(\d+):(?:(\d+):)? (.*)$")

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")

_SEVERITIES = {
    "ERROR:": DiagnosticSeverity.error,
    "WARNING:": DiagnosticSeverity.warning,
}


def _severity_of(line: str) -> DiagnosticSeverity | None:
    for prefix, severity in _SEVERITIES.items():
        if line.startswith(prefix):
            return severity
    return None


def parse_line(line: str) -> Diagnostic | None:
    """Parse one validator line into a fragment-local diagnostic."""
    if not line or line == STREAM_LABEL:
        return None
    severity = _severity_of(line)
    if severity is None:
        return None
    match = DIAGNOSTIC_LINE_RE.match(line)
    if match is None:
        logger.debug("Skipping unparsable validator line: %r", line)
        return None
    error_line = max(int(match.group(3)) - 1, 0)
    return Diagnostic(
        range=Range.at_line(error_line),
        message=match.group(5),
        severity=severity,
    )


def translate_output(stdout: str, fragment: Fragment) -> list[Diagnostic]:
    """Parse validator stdout and map ranges into host-document coordinates."""
    diagnostics: list[Diagnostic] = []
    for line in _LINE_SPLIT_RE.split(stdout):
        diagnostic = parse_line(line)
        if diagnostic is None:
            continue
        if fragment.origin == FragmentOrigin.embedded_literal:
            diagnostic.range = diagnostic.range.shifted(fragment.line_offset)
        diagnostics.append(diagnostic)
    return diagnostics


def translate_run(run: ValidatorRun, fragment: Fragment) -> list[Diagnostic]:
    """Diagnostics for a finished validator run.

    A clean exit and a usage error both produce nothing here; every other
    exit code gets a best-effort parse of stdout.
    """
    if run.succeeded or run.usage_error:
        return []
    return translate_output(run.stdout, fragment)
