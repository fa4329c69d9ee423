"""Lint engine -- runs a lint pass per document event and publishes the result."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from glsllint.editor.base import EditorSurface
from glsllint.editor.models import MessageSeverity, TextDocument
from glsllint.linter.classifier import classify_literals
from glsllint.linter.collection import DiagnosticCollection
from glsllint.linter.invoker import ValidatorInvoker, ValidatorNotFoundError
from glsllint.linter.literals import HostParseError, literals_from_text
from glsllint.linter.models import UNKNOWN_STAGE, Diagnostic, Fragment, LiteralRecord
from glsllint.linter.stages import StageResolver, file_stage_resolver, text_stage_resolver
from glsllint.linter.translator import translate_run
from glsllint.preprocess.base import PreprocessError, Preprocessor
from glsllint.preprocess.glslify import GlslifyPreprocessor
from glsllint.preprocess.imports import ImportPreprocessor
from glsllint.settings import LintSettings
from glsllint.virtualdocs.store import (
    FLATTENED_MARKER,
    VirtualDocumentStore,
    combined_identifier,
    flattened_identifier,
)

logger = logging.getLogger(__name__)

SHADER_LANGUAGE = "glsl"
MESSAGE_PREFIX = "GLSL Lint: "


class LintMode(str, Enum):
    whole_file = "whole-file"
    literals = "literals"


class LintEngine:
    """Sequences extraction, stage resolution, validation and translation."""

    def __init__(
        self,
        settings: LintSettings,
        editor: EditorSurface,
        collection: DiagnosticCollection,
        store: VirtualDocumentStore,
        invoker: ValidatorInvoker | None = None,
        glslify: Preprocessor | None = None,
        imports: Preprocessor | None = None,
    ) -> None:
        self._settings = settings
        self._editor = editor
        self._collection = collection
        self._store = store
        self._invoker = invoker or ValidatorInvoker(
            validator_path=settings.glslang_validator_path,
            base_args=settings.glslang_validator_args,
            cwd=settings.workspace_root,
            report=self._report_error,
        )
        self._glslify = glslify or GlslifyPreprocessor(
            settings.glslify_pattern, settings.glslify_path
        )
        self._imports = imports or ImportPreprocessor()
        self._file_resolver: StageResolver = file_stage_resolver(
            settings.additional_stage_associations
        )
        self._text_resolver: StageResolver = text_stage_resolver()

    @property
    def settings(self) -> LintSettings:
        return self._settings

    @property
    def collection(self) -> DiagnosticCollection:
        return self._collection

    # -- document events --

    async def activate(
        self, documents: Iterable[TextDocument]
    ) -> list[tuple[TextDocument, list[Diagnostic] | None]]:
        """Lint every document that is already open, one after another."""
        return [(document, await self.lint(document)) for document in documents]

    async def on_open(self, document: TextDocument) -> list[Diagnostic] | None:
        return await self.lint(document)

    async def on_save(self, document: TextDocument) -> list[Diagnostic] | None:
        return await self.lint(document)

    def on_close(self, uri: str) -> None:
        self._collection.delete(uri)

    def dispose(self) -> None:
        self._collection.clear()

    # -- lint pass --

    def mode_for(self, document: TextDocument) -> LintMode | None:
        """Which pass applies to ``document``; None means leave it alone."""
        if document.file_name.endswith(FLATTENED_MARKER):
            return None
        if document.language_id == SHADER_LANGUAGE:
            return LintMode.whole_file
        if document.language_id in self._settings.supported_langs_with_string_literals:
            return LintMode.literals
        return None

    async def lint(self, document: TextDocument) -> list[Diagnostic] | None:
        """Run one pass and publish it. Returns None when nothing was published."""
        mode = self.mode_for(document)
        if mode is None:
            logger.debug("Skipping %s (%s)", document.uri, document.language_id)
            return None

        if mode == LintMode.literals:
            diagnostics = await self._lint_literals(document)
        else:
            diagnostics = await self._lint_whole_file(document)
            if diagnostics is None:
                return None

        self._collection.set(document.uri, diagnostics)
        logger.info(
            "Linted %s (%s mode): %d diagnostics",
            document.uri, mode.value, len(diagnostics),
        )
        return diagnostics

    async def _lint_literals(self, document: TextDocument) -> list[Diagnostic]:
        try:
            literals = literals_from_text(document.text, document.language_id)
        except HostParseError as e:
            logger.warning("Cannot scan %s for shader literals: %s", document.uri, e)
            return []

        def unresolved(literal: LiteralRecord) -> None:
            self._report_error(
                "The shader stage could not be determined automatically. "
                f"(literal at line {literal.start_line + 1}) Please add: "
                "'#pragma vscode_glsllint_stage: STAGE' to the shader code. "
                "Where STAGE is a valid shader stage (e.g.: 'vert' or 'frag')"
            )

        shaders = classify_literals(literals, self._text_resolver, unresolved)
        logger.debug(
            "%s: %d of %d literals look like shaders",
            document.uri, len(shaders), len(literals),
        )

        diagnostics: list[Diagnostic] = []
        for literal in shaders:
            diagnostics.extend(await self._lint_fragment(Fragment.from_literal(literal)))
        return diagnostics

    async def _lint_whole_file(self, document: TextDocument) -> list[Diagnostic] | None:
        text = document.text
        glslify_used = self._glslify.applies(text)
        if glslify_used:
            try:
                text = await self._glslify.flatten(text, document.file_name)
            except PreprocessError as e:
                self._report_error(f"failed to compile the glslify file!\n{e}")
                return None

        imports_used = self._imports.applies(text)
        if imports_used:
            try:
                text = await self._imports.flatten(text, document.file_name)
            except PreprocessError as e:
                self._report_error(f"failed to resolve @import includes!\n{e}")
                return None

        stage = self._file_resolver.resolve(text, document.file_name)
        if stage is None:
            stage = UNKNOWN_STAGE
            self._report_error(
                f"failed to map extension: '{document.extension}', you can add it "
                "to the setting 'additional_stage_associations'"
            )

        diagnostics = await self._lint_fragment(Fragment(text=text, stage=stage))

        if glslify_used:
            await self._show_flattened(flattened_identifier(document.file_name), text)
        if imports_used:
            await self._show_flattened(combined_identifier(document.file_name), text)
        return diagnostics

    async def _lint_fragment(self, fragment: Fragment) -> list[Diagnostic]:
        try:
            run = await self._invoker.run(fragment.text, fragment.stage)
        except ValidatorNotFoundError as e:
            self._report_error(str(e))
            return []

        if run.usage_error:
            args = "\n".join(run.args)
            self._report_error(
                "Wrong parameters when starting glslangValidator.\n"
                f"Arguments:\n{args}\nstderr:\n{run.stderr}"
            )
        return translate_run(run, fragment)

    async def _show_flattened(self, identifier: str, text: str) -> None:
        self._store.add(identifier, text)
        try:
            await self._editor.show_document(identifier, SHADER_LANGUAGE)
        except Exception:
            logger.exception("Could not show flattened document %s", identifier)

    def _report_error(self, message: str) -> None:
        self._editor.show_message(f"{MESSAGE_PREFIX}{message}", MessageSeverity.error)
