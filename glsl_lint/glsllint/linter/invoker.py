"""Run glslangValidator on a shader fragment."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
from collections.abc import Callable
from enum import IntEnum
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_VALIDATOR = "glslangValidator"

# ${env:NAME} substitutions inside the configured validator path
ENV_RESOLVE_RE = re.compile(r"\$\{(.*?)\}")


class ValidatorExitCode(IntEnum):
    """glslangValidator's documented exit codes."""

    success = 0
    fail_usage = 1
    fail_compile = 2
    fail_link = 3
    fail_compiler_create = 4
    fail_thread_create = 5
    fail_linker_create = 6


class ValidatorNotFoundError(Exception):
    """The validator binary is missing, unreadable or could not be started."""


class ValidatorRun(BaseModel):
    """Everything one validator process produced."""

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == ValidatorExitCode.success

    @property
    def usage_error(self) -> bool:
        return self.exit_code == ValidatorExitCode.fail_usage


def substitute_variables(
    configured: str,
    report: Callable[[str], None] | None = None,
) -> str:
    """Replace ``${env:NAME}`` tokens with environment values.

    Unresolvable tokens are replaced with their inner text and reported.
    """

    def replace(match: re.Match[str]) -> str:
        variable = match.group(1)
        kind, sep, argument = variable.partition(":")
        if not sep:
            return variable
        if kind == "env":
            value = os.environ.get(argument)
            if value:
                return value
            message = f"Failed to resolve environment variable '{argument}'"
        else:
            message = (
                f"Resolving via '{variable}' is not supported, "
                "only 'env:YOUR_ENV_VARIABLE' is supported."
            )
        logger.warning("%s", message)
        if report is not None:
            report(message)
        return variable

    return ENV_RESOLVE_RE.sub(replace, configured)


def resolve_validator_path(
    configured: str | None,
    report: Callable[[str], None] | None = None,
) -> str:
    """Resolve the configured validator path to a readable file.

    Raises ValidatorNotFoundError when the binary is not available.
    """
    path = substitute_variables(configured or DEFAULT_VALIDATOR, report)

    # Bare command names are looked up on PATH
    if os.sep not in path and (os.altsep is None or os.altsep not in path):
        found = shutil.which(path)
        if found:
            path = found

    if not Path(path).is_file() or not os.access(path, os.R_OK):
        raise ValidatorNotFoundError(
            f"glslangValidator binary is not available: '{path}'. "
            "Please check your glslang_validator_path setting."
        )
    return path


def build_args(base_args: str, stage: str) -> list[str]:
    """User arguments (whitespace separated) followed by the stdin/stage flags."""
    args = [arg for arg in re.split(r"\s+", base_args or "") if arg]
    args.extend(["--stdin", "-S", stage])
    return args


class ValidatorInvoker:
    """Spawns one validator process per fragment."""

    def __init__(
        self,
        validator_path: str | None = None,
        base_args: str = "",
        cwd: str | Path | None = None,
        report: Callable[[str], None] | None = None,
    ) -> None:
        self._validator_path = validator_path
        self._base_args = base_args
        self._cwd = str(cwd) if cwd else None
        self._report = report

    async def run(self, source: str, stage: str) -> ValidatorRun:
        """Feed ``source`` on stdin and collect output and exit status.

        Raises ValidatorNotFoundError before spawning when the validator is
        not available.
        """
        path = resolve_validator_path(self._validator_path, self._report)
        args = build_args(self._base_args, stage)

        logger.debug("Running %s %s (cwd=%s)", path, " ".join(args), self._cwd)
        try:
            process = await asyncio.create_subprocess_exec(
                path,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._cwd,
            )
        except OSError as e:
            raise ValidatorNotFoundError(f"Failed to start glslangValidator '{path}': {e}") from e

        try:
            stdout, stderr = await process.communicate(source.encode("utf-8", errors="replace"))
        except BaseException:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        run = ValidatorRun(
            args=args,
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        logger.debug("glslangValidator exited with %d (stage=%s)", run.exit_code, stage)
        return run
