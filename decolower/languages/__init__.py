"""
Language detection for source files.
"""
import logging
import os
from typing import Dict, List, Optional

from decolower.core.engine.languages import LANGUAGES

logger = logging.getLogger(__name__)

FILE_EXTENSIONS: Dict[str, str] = {
    '.js': 'javascript',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.jsx': 'javascript',
    '.ts': 'typescript',
    '.mts': 'typescript',
    '.cts': 'typescript',
    '.tsx': 'tsx',
}


def get_language_for_file(file_path: str) -> Optional[str]:
    """Get the language code for a file based on its extension."""
    _, ext = os.path.splitext(file_path)
    if not ext:
        return None
    language = FILE_EXTENSIONS.get(ext.lower())
    if language is None:
        logger.debug(f'No language registered for extension {ext!r}')
    return language


def get_supported_languages() -> List[str]:
    """Get a list of all supported language codes."""
    return list(LANGUAGES)
