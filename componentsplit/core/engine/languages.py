"""
Tree-sitter grammars used by componentsplit.

The TSX grammar is used for every input: it accepts plain JavaScript, JSX
markup and TypeScript annotations.
"""
import logging
from typing import Dict

import tree_sitter_typescript
from tree_sitter import Language, Parser

from componentsplit.core.error_handling import UnsupportedLanguageError

logger = logging.getLogger(__name__)

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())
TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

LANGUAGES: Dict[str, Language] = {
    'tsx': TSX_LANGUAGE,
    'typescript': TS_LANGUAGE,
}


def get_parser(language_code: str = 'tsx') -> Parser:
    """
    Create a new parser for ``language_code``.

    Parsers are not shared: each caller gets its own instance, so concurrent
    runs never touch the same parser.

    Raises:
        UnsupportedLanguageError: If no grammar is registered for the code
    """
    language = LANGUAGES.get(language_code)
    if language is None:
        raise UnsupportedLanguageError(language_code)
    logger.debug(f"Creating tree-sitter parser for {language_code}")
    return Parser(language)
