"""
Tree-sitter languages and parsers known to decolower.
"""
import logging
from typing import Dict

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from decolower.core.error_handling import UnsupportedLanguageError

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())
TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())
TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

LANGUAGES: Dict[str, Language] = {
    'javascript': JS_LANGUAGE,
    'typescript': TS_LANGUAGE,
    'tsx': TSX_LANGUAGE,
}

_PARSERS: Dict[str, Parser] = {}


def get_language(language_code: str) -> Language:
    try:
        return LANGUAGES[language_code.lower()]
    except KeyError:
        raise UnsupportedLanguageError(language_code, operation='parse') from None


def get_parser(language_code: str) -> Parser:
    """Return a (shared) parser for ``language_code``."""
    language_code = language_code.lower()
    parser = _PARSERS.get(language_code)
    if parser is None:
        parser = Parser(get_language(language_code))
        _PARSERS[language_code] = parser
        logger.debug(f'Created tree-sitter parser for {language_code}')
    return parser
