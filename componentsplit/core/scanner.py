"""
Component scanner: finds extractable top-level declarations in a host unit.

Scanning is read-only. Matched statements are recorded as removal spans and
applied later by the rewriter, so the tree is never mutated while it is being
traversed.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tree_sitter import Node

from componentsplit.core.classifier import is_extractable
from componentsplit.core.config import DEFAULT_CONFIG, ModularizerConfig
from componentsplit.core.host import BINDING_DECLARATION_TYPES, HostUnit
from componentsplit.models.code_element import ExtractionCandidate
from componentsplit.models.enums import DeclarationForm
from componentsplit.models.range import SourceSpan

logger = logging.getLogger(__name__)

FUNCTION_VALUE_TYPES = frozenset({'arrow_function', 'function_expression', 'function'})


@dataclass
class ScanResult:
    """Candidates in discovery order plus the statement spans to remove."""
    candidates: List[ExtractionCandidate] = field(default_factory=list)
    removals: List[SourceSpan] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.candidates]


class ComponentScanner:
    """Walks the top-level statements of a host unit once, in source order."""

    def __init__(self, config: Optional[ModularizerConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def scan(self, host: HostUnit) -> ScanResult:
        result = ScanResult()
        logger.info('Scanning for extractable components...')
        for node in host.statements:
            if node.type == 'function_declaration':
                self._scan_function(host, node, result)
            elif node.type in BINDING_DECLARATION_TYPES:
                self._scan_bindings(host, node, result)
        logger.info(f"Found {len(result.candidates)} extractable component(s)")
        return result

    def _scan_function(self, host: HostUnit, node: Node, result: ScanResult) -> None:
        name_node = node.child_by_field_name('name')
        if name_node is None:
            return
        name = host.text(name_node)
        if not is_extractable(name, self.config.reserved_names):
            return
        span, comments = self._removal_span(host, node)
        result.candidates.append(ExtractionCandidate(
            name=name,
            declaration_form=DeclarationForm.NAMED_DECLARATION,
            body_text=host.text(node),
            leading_comments=comments,
            span=span,
            bound_names=(name,),
        ))
        result.removals.append(span)
        logger.info(f"  Found function component: {name}")

    def _scan_bindings(self, host: HostUnit, node: Node, result: ScanResult) -> None:
        matched: List[str] = []
        for declarator in node.named_children:
            if declarator.type != 'variable_declarator':
                continue
            name_node = declarator.child_by_field_name('name')
            value_node = declarator.child_by_field_name('value')
            if name_node is None or name_node.type != 'identifier':
                continue
            if value_node is None or value_node.type not in FUNCTION_VALUE_TYPES:
                continue
            name = host.text(name_node)
            if is_extractable(name, self.config.reserved_names):
                matched.append(name)
        if not matched:
            return

        bound = tuple(host.declared_names(node))
        span, comments = self._removal_span(host, node)
        body_text = host.text(node)
        for name in matched:
            result.candidates.append(ExtractionCandidate(
                name=name,
                declaration_form=DeclarationForm.BOUND_EXPRESSION,
                body_text=body_text,
                leading_comments=comments,
                span=span,
                bound_names=bound,
            ))
            logger.info(f"  Found arrow function component: {name}")
        result.removals.append(span)

        dropped = [n for n in bound if n not in matched]
        if dropped:
            # Statements are removed whole; the other bindings move with the component.
            message = (f"Statement declaring {', '.join(matched)} also binds {', '.join(dropped)}; "
                       f"the whole statement is moved out of the host")
            logger.warning(message)
            result.warnings.append(message)

    def _leading_comment_range(self, node: Node) -> Optional[Tuple[Node, Node]]:
        """First and last comment of the block directly above ``node``, if any."""
        first = last = None
        current = node
        previous = node.prev_named_sibling
        while previous is not None and previous.type == 'comment':
            if previous.end_point[0] < current.start_point[0] - 1:
                break
            before = previous.prev_named_sibling
            if before is not None and before.end_point[0] == previous.start_point[0]:
                # Trailing comment of the previous statement
                break
            first = previous
            if last is None:
                last = previous
            current = previous
            previous = before
        if first is None:
            return None
        return (first, last)

    def _removal_span(self, host: HostUnit, node: Node) -> Tuple[SourceSpan, str]:
        code = host.code_bytes
        comments = ''
        start_node = node
        comment_range = self._leading_comment_range(node)
        if comment_range is not None:
            first, last = comment_range
            comments = code[first.start_byte:last.end_byte].decode('utf8')
            start_node = first

        start = start_node.start_byte
        line_start = code.rfind(b'\n', 0, start) + 1
        if not code[line_start:start].strip():
            start = line_start

        end = node.end_byte
        while end < len(code) and code[end:end + 1] in (b' ', b'\t'):
            end += 1
        if code[end:end + 2] == b'\r\n':
            end += 2
        elif code[end:end + 1] == b'\n':
            end += 1

        span = SourceSpan(
            start_byte=start,
            end_byte=end,
            start_line=start_node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )
        return (span, comments)
