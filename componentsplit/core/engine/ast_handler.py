"""
AST Handler for componentsplit providing a unified interface for tree-sitter operations.
"""
import logging
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from componentsplit.core.engine.languages import get_parser
from componentsplit.core.error_handling import ParseError

logger = logging.getLogger(__name__)

JSX_NODE_TYPES = frozenset({'jsx_element', 'jsx_self_closing_element', 'jsx_fragment'})

# Node types whose text is a reference to a name in scope.
REFERENCE_NODE_TYPES = frozenset({'identifier', 'shorthand_property_identifier', 'type_identifier'})


class ASTHandler:
    """
    Handles Abstract Syntax Tree operations using tree-sitter.
    Provides parsing with strict error reporting and simple tree navigation.
    """

    def __init__(self, language_code: str = 'tsx'):
        """
        Initialize the AST handler.

        Args:
            language_code: Grammar to use ('tsx' or 'typescript')
        """
        self.language_code = language_code
        self.parser = get_parser(language_code)

    def parse(self, code: str) -> Tuple[Node, bytes]:
        """
        Parse source code into an AST.

        Tree-sitter recovers from syntax errors by inserting ERROR and missing
        nodes; any such node makes the input invalid here.

        Args:
            code: Source code as string

        Returns:
            Tuple of (root_node, code_bytes)

        Raises:
            ParseError: If the code contains a syntax error
        """
        code_bytes = code.encode('utf8')
        tree = self.parser.parse(code_bytes)
        root = tree.root_node
        if root.has_error:
            bad = self.find_first_error(root)
            raise self._build_parse_error(bad, code_bytes)
        return (root, code_bytes)

    def _build_parse_error(self, node: Optional[Node], code_bytes: bytes) -> ParseError:
        if node is None:
            return ParseError('Failed to parse code: invalid syntax')
        line, column = node.start_point[0] + 1, node.start_point[1] + 1
        if node.is_missing:
            detail = f"missing '{node.type}'"
        else:
            snippet = self.get_node_text(node, code_bytes).strip().splitlines()
            detail = f"unexpected '{snippet[0][:40]}'" if snippet else 'unexpected end of input'
        message = f"Failed to parse code: {detail} at line {line}, column {column}"
        source_lines = code_bytes.decode('utf8', errors='replace').splitlines()
        code_snippet = source_lines[line - 1].strip() if 0 < line <= len(source_lines) else None
        logger.debug(message)
        return ParseError(message, line=line, column=column, code_snippet=code_snippet)

    def find_first_error(self, node: Node) -> Optional[Node]:
        """Return the first ERROR or missing node in document order, if any."""
        for current in self.walk(node):
            if current.type == 'ERROR' or current.is_missing:
                return current
        return None

    def get_node_text(self, node: Node, code_bytes: bytes) -> str:
        """
        Get the text content of a node.

        Args:
            node: Tree-sitter node
            code_bytes: Source code as bytes

        Returns:
            String content of the node
        """
        return code_bytes[node.start_byte:node.end_byte].decode('utf8')

    def get_node_range(self, node: Node) -> Tuple[int, int]:
        """
        Get the line range of a node.

        Returns:
            Tuple of (start_line, end_line) in 1-indexed form
        """
        return (node.start_point[0] + 1, node.end_point[0] + 1)

    @staticmethod
    def walk(node: Node) -> Iterator[Node]:
        """Yield ``node`` and all of its descendants in pre-order."""
        stack: List[Node] = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def find_child_by_field_name(self, node: Node, field_name: str) -> Optional[Node]:
        """
        Find a child node by field name.

        Returns:
            Child node or None if not found
        """
        if node is None:
            return None
        return node.child_by_field_name(field_name)

    def collect_references(self, node: Node, code_bytes: bytes) -> Tuple[List[str], bool]:
        """
        Collect the names referenced under ``node`` and whether it contains JSX.

        String and comment contents never produce references.

        Returns:
            Tuple of (names in first-appearance order, has_markup)
        """
        names: List[str] = []
        seen = set()
        has_markup = False
        for current in self.walk(node):
            if current.type in JSX_NODE_TYPES:
                has_markup = True
            elif current.type in REFERENCE_NODE_TYPES:
                name = self.get_node_text(current, code_bytes)
                if name not in seen:
                    seen.add(name)
                    names.append(name)
        return (names, has_markup)
