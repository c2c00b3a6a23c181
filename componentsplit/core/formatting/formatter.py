"""
Output formatting for componentsplit.

A formatter either returns canonical text or raises ``FormatError``.
``format_with_fallback`` turns that into an explicit result with two
variants: ``Formatted`` or ``FallbackRaw``.
"""
import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel
from tree_sitter import Node

from componentsplit.core.config import FormatterOptions
from componentsplit.core.engine.ast_handler import ASTHandler
from componentsplit.core.error_handling import FormatError, ParseError

logger = logging.getLogger(__name__)

LITERAL_NODE_TYPES = frozenset({'string', 'template_string'})


class FormatResult(BaseModel):
    """Text produced by a formatting attempt"""
    text: str
    model_config = {'frozen': True}

    @property
    def formatted(self) -> bool:
        return False


class Formatted(FormatResult):
    """The formatter accepted the input"""

    @property
    def formatted(self) -> bool:
        return True


class FallbackRaw(FormatResult):
    """The formatter rejected the input; ``text`` is the unformatted input"""
    reason: str = ''


class BaseFormatter:
    """Base class for code formatters."""

    name = 'base'

    def __init__(self, options: Optional[FormatterOptions] = None):
        """
        Initialize the formatter.

        Args:
            options: Quote style, indentation and terminator settings
        """
        self.options = options or FormatterOptions()

    def format_code(self, code: str, filename: str = 'module.jsx') -> str:
        """
        Format code. Override this in concrete formatters.

        Raises:
            FormatError: If the code cannot be formatted
        """
        return code


class BasicFormatter(BaseFormatter):
    """
    Built-in formatter: normalises line endings and blank lines and makes sure
    the result still parses. Indentation and quoting are left as written; use
    ``PrettierFormatter`` for full canonicalisation.

    ``FormatterOptions`` quote, indentation, semicolon and trailing-comma
    settings only apply to ``PrettierFormatter``; this formatter ignores them.

    Lines whose line break lies inside a string or template literal are kept
    verbatim, since that whitespace is part of the literal's value.
    """

    name = 'basic'

    def __init__(self, options: Optional[FormatterOptions] = None, handler: Optional[ASTHandler] = None):
        super().__init__(options)
        self.handler = handler

    def format_code(self, code: str, filename: str = 'module.jsx') -> str:
        # Template literals normalise CRLF to LF, so this never changes a value
        code = code.replace('\r\n', '\n')
        handler = self.handler or ASTHandler()
        try:
            root, code_bytes = handler.parse(code)
        except ParseError as e:
            raise FormatError(f"Cannot format {filename}: {e.message}", formatter=self.name) from e

        literal_ranges = self.literal_ranges(handler, root)
        cleaned_lines: List[bytes] = []
        last_line_blank = True  # Avoid leading blank lines
        offset = 0
        for line in code_bytes.split(b'\n'):
            newline_at = offset + len(line)
            offset = newline_at + 1
            if any(start < newline_at < end for start, end in literal_ranges):
                cleaned_lines.append(line)
                last_line_blank = False
                continue
            line = line.rstrip()
            if line:
                cleaned_lines.append(line)
                last_line_blank = False
            elif not last_line_blank:
                cleaned_lines.append(b'')
                last_line_blank = True
        return b'\n'.join(cleaned_lines).strip(b'\n').decode('utf8') + '\n'

    @staticmethod
    def literal_ranges(handler: ASTHandler, root: Node) -> List[Tuple[int, int]]:
        """Byte ranges of the string and template literals that span more than one line."""
        return [
            (node.start_byte, node.end_byte)
            for node in handler.walk(root)
            if node.type in LITERAL_NODE_TYPES and node.start_point[0] != node.end_point[0]
        ]


def format_with_fallback(formatter: BaseFormatter, code: str, filename: str = 'module.jsx') -> FormatResult:
    """
    Format ``code``, falling back to the unformatted text on ``FormatError``.

    Returns:
        ``Formatted`` on success, ``FallbackRaw`` carrying the input otherwise
    """
    try:
        return Formatted(text=formatter.format_code(code, filename))
    except FormatError as e:
        logger.info(f"Formatting failed for {filename}, using unformatted code: {e.message}")
        return FallbackRaw(text=code, reason=e.message)


def get_formatter(options: Optional[FormatterOptions] = None) -> BaseFormatter:
    """Return the formatter selected by ``options``."""
    options = options or FormatterOptions()
    if options.use_prettier:
        from componentsplit.core.formatting.prettier_formatter import PrettierFormatter
        return PrettierFormatter(options)
    return BasicFormatter(options)
