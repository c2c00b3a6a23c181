"""
Dependency resolver: works out what an extracted component needs to import.

Detection is structural. The candidate text is parsed and its identifiers
and JSX nodes are inspected, so names that only appear inside strings or
comments are ignored.
"""
import logging
import posixpath
import re
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from componentsplit.core.config import DEFAULT_CONFIG, DEFAULT_RUNTIME_MARKERS, ModularizerConfig
from componentsplit.core.engine.ast_handler import ASTHandler
from componentsplit.core.error_handling import ParseError
from componentsplit.core.host import HostUnit
from componentsplit.models.code_element import ExtractionCandidate

logger = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")


def text_needs_runtime_import(code: str, markers: Iterable[str] = DEFAULT_RUNTIME_MARKERS,
                              namespace: str = 'React') -> bool:
    """
    Substring heuristic for runtime usage.

    Matches inside string literals and comments too, so ``DependencyResolver``
    only uses it for fragments that do not parse.
    """
    if any(marker in code for marker in markers):
        return True
    return f"{namespace}." in code or '<' in code or '/>' in code


def reroot_import_source(source: str, depth: int) -> str:
    """
    Rewrite a relative module specifier for a file ``depth`` directories
    below the host file. Package specifiers are returned unchanged.
    """
    if depth <= 0 or not source.startswith('.'):
        return source
    rerooted = posixpath.normpath(posixpath.join('../' * depth, source))
    return rerooted if rerooted.startswith('.') else './' + rerooted


class DependencyResolver:
    """Resolves runtime, sibling and host-import dependencies of candidates."""

    def __init__(self, config: Optional[ModularizerConfig] = None, host: Optional[HostUnit] = None):
        self.config = config or DEFAULT_CONFIG
        self.handler = host.handler if host is not None else ASTHandler()
        self.import_bindings = list(host.import_bindings) if host is not None else []
        self.host_names: Set[str] = host.top_level_names() if host is not None else set()
        self.runtime_bindings = [b for b in self.import_bindings if b.source == self.config.runtime_module]
        self.runtime_locals: Set[str] = {self.config.runtime_default_name}
        for binding in self.runtime_bindings:
            self.runtime_locals.update(binding.local_names)

    def references(self, body_text: str) -> Tuple[List[str], bool]:
        """
        Names referenced by ``body_text`` and whether it contains JSX markup.

        Text that does not parse on its own is scanned for identifier tokens,
        with ``text_needs_runtime_import`` standing in for markup detection.
        """
        try:
            root, code_bytes = self.handler.parse(body_text)
        except ParseError as e:
            logger.debug(f"Scanning unparsable fragment as text: {e.message}")
            names = list(dict.fromkeys(IDENTIFIER_RE.findall(body_text)))
            return (names, text_needs_runtime_import(body_text, (), self.config.runtime_default_name))
        return self.handler.collect_references(root, code_bytes)

    def needs_runtime_import(self, body_text: str) -> bool:
        """Return True if ``body_text`` uses JSX, the runtime namespace or a runtime primitive."""
        names, has_markup = self.references(body_text)
        return self._uses_runtime(set(names), has_markup)

    def _uses_runtime(self, refs: Set[str], has_markup: bool) -> bool:
        if has_markup:
            return True
        return bool(refs & (self.runtime_locals | set(self.config.runtime_markers)))

    def resolve(self, candidate: ExtractionCandidate, candidate_names: Sequence[str]) -> ExtractionCandidate:
        """
        Return a copy of ``candidate`` with its dependency fields filled in.

        Args:
            candidate: Candidate produced by the scanner
            candidate_names: Names of every candidate of the run, in discovery order
        """
        names, has_markup = self.references(candidate.body_text)
        refs = set(names)
        own = set(candidate.bound_names) | {candidate.name}
        uses_runtime = self._uses_runtime(refs, has_markup)

        siblings = tuple(n for n in candidate_names if n in refs and n not in own)
        unresolved = tuple(
            n for n in names
            if n in self.host_names and n not in own and n not in candidate_names
            and n != self.config.runtime_default_name
        )
        if unresolved:
            logger.warning(
                f"Component '{candidate.name}' references host-scope name(s) that stay in the host: "
                f"{', '.join(unresolved)}"
            )

        resolved = candidate.model_copy(update={
            'uses_external_runtime': uses_runtime,
            'runtime_specifiers': self._runtime_specifiers(refs) if uses_runtime else (),
            'sibling_references': siblings,
            'host_imports': self._carried_imports(refs),
            'unresolved_references': unresolved,
        })
        logger.debug(
            f"Resolved {candidate.name}: runtime={uses_runtime}, siblings={list(siblings)}, "
            f"imports={len(resolved.host_imports)}"
        )
        return resolved

    def _runtime_specifiers(self, refs: Set[str]) -> Tuple[str, ...]:
        specifiers: List[str] = []
        covered: Set[str] = set()
        for binding in self.runtime_bindings:
            for spec in binding.named:
                if spec.local in refs and spec.local not in covered:
                    specifiers.append(spec.render())
                    covered.add(spec.local)
        for marker in self.config.runtime_markers:
            if marker in refs and marker not in covered:
                specifiers.append(marker)
                covered.add(marker)
        return tuple(specifiers)

    def _carried_imports(self, refs: Set[str]) -> Tuple[str, ...]:
        lines: List[str] = []
        depth = self.config.components_depth
        for binding in self.import_bindings:
            if binding.is_side_effect:
                continue
            if binding.source == self.config.runtime_module:
                # Default and named runtime imports are covered by the runtime import line.
                keep = [n for n in (binding.default_name, binding.namespace_name)
                        if n and n in refs and n != self.config.runtime_default_name]
            else:
                keep = [n for n in binding.local_names if n in refs]
            if not keep:
                continue
            line = binding.render(keep, source=reroot_import_source(binding.source, depth))
            if line and line not in lines:
                lines.append(line)
        return tuple(lines)
