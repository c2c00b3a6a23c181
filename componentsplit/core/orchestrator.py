"""
Orchestrator: sequences scanning, dependency resolution, rewriting and packaging
over one host unit.
"""
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from componentsplit.core.config import DEFAULT_CONFIG, ModularizerConfig
from componentsplit.core.dependencies import DependencyResolver
from componentsplit.core.engine.ast_handler import ASTHandler
from componentsplit.core.error_handling import EntryNotFoundError
from componentsplit.core.formatting.formatter import BaseFormatter, format_with_fallback, get_formatter
from componentsplit.core.host import HostUnit
from componentsplit.core.input_validation import validate_source_code, validate_type
from componentsplit.core.packager import ExportPackager
from componentsplit.core.rewriter import UnitRewriter, build_import_lines
from componentsplit.core.scanner import ComponentScanner
from componentsplit.core.writer import OutputWriter
from componentsplit.models.code_element import ExtractionCandidate, GeneratedModule, ModularizationResult

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Accumulators owned by a single run; never stored on the orchestrator."""
    candidates: List[ExtractionCandidate] = field(default_factory=list)
    import_lines: List[str] = field(default_factory=list)
    modules: List[GeneratedModule] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)


class Modularizer:
    """
    Main entry point for componentsplit.

    An instance holds only immutable configuration and a stateless formatter,
    so it can be reused across calls and threads: all per-run state lives in
    a fresh ``RunState``.
    """

    def __init__(self, config: Optional[ModularizerConfig] = None, formatter: Optional[BaseFormatter] = None):
        self.config = config or DEFAULT_CONFIG
        self.formatter = formatter

    @staticmethod
    def load_file(file_path: Union[str, os.PathLike]) -> str:
        """
        Load content from a file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        with open(file_path, 'r', encoding='utf8') as fh:
            return fh.read()

    def find_entry_file(self, base_dir: Union[str, os.PathLike] = '.') -> Path:
        """
        Return the first of ``config.entry_candidates`` that exists under ``base_dir``.

        Raises:
            EntryNotFoundError: If none of the candidates exists
        """
        base = Path(base_dir)
        for candidate in self.config.entry_candidates:
            path = base / candidate
            if path.is_file():
                logger.info(f"Found input file: {path}")
                return path
        raise EntryNotFoundError(str(base), self.config.entry_candidates)

    def scan(self, code: str) -> List[ExtractionCandidate]:
        """List the candidates ``process`` would extract, fully resolved, without rewriting."""
        validate_source_code(code)
        host = HostUnit.parse(code, ASTHandler())
        scan = ComponentScanner(self.config).scan(host)
        resolver = DependencyResolver(self.config, host)
        return [resolver.resolve(c, scan.names) for c in scan.candidates]

    def process(self, code: str, filename: str = 'App.jsx') -> ModularizationResult:
        """
        Split ``code`` into an updated host text and one module per component.

        Args:
            code: Host source text
            filename: Host file name, used for formatter parser selection and messages

        Returns:
            ModularizationResult with modules in discovery order

        Raises:
            EmptyInputError: If ``code`` is missing, blank or not a string
            ParseError: If ``code`` is not syntactically valid
        """
        return self._process(code, filename, self.config)

    def _process(self, code: str, filename: str, config: ModularizerConfig) -> ModularizationResult:
        started = time.perf_counter()
        validate_source_code(code)
        state = RunState()

        logger.info(f"Parsing {filename}...")
        host = HostUnit.parse(code, ASTHandler())
        scan = ComponentScanner(config).scan(host)
        state.warnings.extend(scan.warnings)

        if not scan.candidates:
            logger.info('No extractable components found; the host is already modular')
            return ModularizationResult(
                updated_app=code,
                components=[],
                processing_time=self._elapsed_ms(started),
                warnings=state.warnings,
            )

        resolver = DependencyResolver(config, host)
        state.candidates = [resolver.resolve(candidate, scan.names) for candidate in scan.candidates]
        state.import_lines = build_import_lines(scan.names, config)

        rewritten = UnitRewriter(config).rewrite(host, scan.removals, state.import_lines)

        formatter = self.formatter or get_formatter(config.formatting)
        packager = ExportPackager(config, formatter)
        for candidate in state.candidates:
            module = packager.package(candidate)
            state.modules.append(module)
            state.warnings.extend(module.warnings)
            if not module.formatted:
                state.diagnostics.append(f"{module.filename} could not be formatted and is emitted as-is")

        host_result = format_with_fallback(formatter, rewritten, filename)
        if not host_result.formatted:
            state.diagnostics.append(f"{filename} could not be formatted and is emitted as-is")

        logger.info(f"Extracted {len(state.modules)} component(s) from {filename}")
        return ModularizationResult(
            updated_app=host_result.text,
            components=state.modules,
            processing_time=self._elapsed_ms(started),
            warnings=state.warnings,
            diagnostics=state.diagnostics,
        )

    def run(self, app_path: Union[str, os.PathLike], components_dir: Optional[Union[str, os.PathLike]] = None,
            dry_run: bool = False) -> ModularizationResult:
        """
        Filesystem mode: modularize ``app_path`` in place.

        Modules are written to ``components_dir`` (default: the configured
        import path resolved against the host's directory), then the host file
        is overwritten. Nothing is written when the parse fails, when no
        component is found or with ``dry_run``.
        """
        validate_type(app_path, (str, os.PathLike), 'app_path')
        path = Path(app_path)
        config = self.config
        if path.suffix == '.tsx' and config.file_extension == '.jsx':
            config = config.model_copy(update={'file_extension': '.tsx'})

        logger.info(f"Reading {path}...")
        result = self._process(self.load_file(path), path.name, config)
        if not result.components or dry_run:
            return result

        target_dir = Path(components_dir) if components_dir is not None else path.parent / config.import_path
        writer = OutputWriter(target_dir)
        writer.write_modules(result.components)
        writer.write_host(path, result.updated_app)
        return result

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
