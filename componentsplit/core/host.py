"""
Host unit: the parsed root-level file under transformation.
"""
import logging
from typing import List, Optional, Set

from tree_sitter import Node

from componentsplit.core.engine.ast_handler import ASTHandler
from componentsplit.models.code_element import ImportBinding, ImportSpecifier

logger = logging.getLogger(__name__)

NAMED_DECLARATION_TYPES = frozenset({
    'function_declaration',
    'generator_function_declaration',
    'class_declaration',
    'abstract_class_declaration',
    'interface_declaration',
    'type_alias_declaration',
    'enum_declaration',
})
BINDING_DECLARATION_TYPES = frozenset({'lexical_declaration', 'variable_declaration'})
PATTERN_NAME_TYPES = frozenset({'identifier', 'shorthand_property_identifier_pattern'})


class HostUnit:
    """
    A parsed host file.

    Owned by a single run: the tree is never shared with another run, and
    rewriting works on ``code_bytes`` rather than on the tree itself.
    """

    def __init__(self, root: Node, code_bytes: bytes, handler: ASTHandler):
        self.root = root
        self.code_bytes = code_bytes
        self.handler = handler
        self.import_nodes: List[Node] = [n for n in root.named_children if n.type == 'import_statement']
        self.existing_import_lines: List[str] = [self.text(n) for n in self.import_nodes]
        self.import_bindings: List[ImportBinding] = [self._parse_import(n) for n in self.import_nodes]

    @classmethod
    def parse(cls, code: str, handler: Optional[ASTHandler] = None) -> 'HostUnit':
        """Parse ``code`` into a host unit. Raises ParseError on invalid input."""
        handler = handler or ASTHandler()
        root, code_bytes = handler.parse(code)
        return cls(root, code_bytes, handler)

    @property
    def source(self) -> str:
        return self.code_bytes.decode('utf8')

    @property
    def statements(self) -> List[Node]:
        """Top-level statements in source order (comments excluded)."""
        return [n for n in self.root.named_children if n.type != 'comment']

    def text(self, node: Node) -> str:
        return self.handler.get_node_text(node, self.code_bytes)

    def _parse_import(self, node: Node) -> ImportBinding:
        source_node = node.child_by_field_name('source')
        source = self.text(source_node)[1:-1] if source_node is not None else ''
        default_name = None
        namespace_name = None
        named: List[ImportSpecifier] = []
        type_only = any(child.type == 'type' for child in node.children)
        for clause in node.named_children:
            if clause.type != 'import_clause':
                continue
            for part in clause.named_children:
                if part.type == 'identifier':
                    default_name = self.text(part)
                elif part.type == 'namespace_import':
                    ident = next((c for c in part.named_children if c.type == 'identifier'), None)
                    if ident is not None:
                        namespace_name = self.text(ident)
                elif part.type == 'named_imports':
                    for spec in part.named_children:
                        if spec.type != 'import_specifier':
                            continue
                        name_node = spec.child_by_field_name('name')
                        alias_node = spec.child_by_field_name('alias')
                        imported = self.text(name_node)
                        local = self.text(alias_node) if alias_node is not None else imported
                        named.append(ImportSpecifier(imported=imported, local=local))
        return ImportBinding(
            source=source,
            text=self.text(node),
            default_name=default_name,
            namespace_name=namespace_name,
            named=tuple(named),
            type_only=type_only,
        )

    def declared_names(self, node: Node) -> List[str]:
        """Names bound at top level by ``node`` (imports excluded)."""
        if node.type == 'export_statement':
            declaration = node.child_by_field_name('declaration')
            return self.declared_names(declaration) if declaration is not None else []
        if node.type in NAMED_DECLARATION_TYPES:
            name_node = node.child_by_field_name('name')
            return [self.text(name_node)] if name_node is not None else []
        if node.type in BINDING_DECLARATION_TYPES:
            names: List[str] = []
            for declarator in node.named_children:
                if declarator.type != 'variable_declarator':
                    continue
                name_node = declarator.child_by_field_name('name')
                if name_node is None:
                    continue
                if name_node.type == 'identifier':
                    names.append(self.text(name_node))
                else:
                    # Destructuring pattern
                    names.extend(
                        self.text(n) for n in self.handler.walk(name_node) if n.type in PATTERN_NAME_TYPES
                    )
            return names
        return []

    def top_level_names(self) -> Set[str]:
        """All names declared at top level, excluding import bindings."""
        names: Set[str] = set()
        for node in self.statements:
            names.update(self.declared_names(node))
        return names

    def import_insertion_offset(self) -> int:
        """
        Byte offset where new import lines go: the start of the line after the
        last top-level import, or the top of the file (after a directive
        prologue such as ``'use client';``) when there are no imports.
        """
        if self.import_nodes:
            return self._line_end_offset(self.import_nodes[-1].end_byte)
        offset = 0
        for node in self.statements:
            if node.type == 'expression_statement' and node.named_child_count == 1 \
                    and node.named_children[0].type == 'string':
                offset = self._line_end_offset(node.end_byte)
                continue
            break
        return offset

    def _line_end_offset(self, position: int) -> int:
        newline = self.code_bytes.find(b'\n', position)
        return len(self.code_bytes) if newline == -1 else newline + 1
