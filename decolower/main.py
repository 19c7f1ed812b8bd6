import logging
import os
from typing import List, Optional

from decolower.core.config import EmitOptions, config
from decolower.core.desugarer import Declaration, Desugarer, Site
from decolower.core.error_handling import UnsupportedLanguageError
from decolower.languages import get_language_for_file, get_supported_languages

logger = logging.getLogger(__name__)


class DecoLower:
    """
    Main entry point for decolower.
    Rewrites decorated JavaScript and TypeScript into decorator-free source.
    """

    def __init__(self, language_code: Optional[str] = None, emit_form: Optional[str] = None,
                 options: Optional[EmitOptions] = None):
        """
        Initialize decolower for a specific language.

        Args:
            language_code: 'javascript', 'typescript' or 'tsx'; defaults to
                the ``parsing.default_language`` setting
            emit_form: 'classBased' or 'constructorFunction'; defaults to the
                ``emission.form`` setting
            options: Complete emission options, overriding both settings

        Raises:
            UnsupportedLanguageError: If the language is not supported
            InvalidConfigurationError: If the emission settings are invalid
        """
        language_code = (language_code or config.get('parsing', 'default_language', 'javascript')).lower()
        if language_code not in get_supported_languages():
            raise UnsupportedLanguageError(language_code)
        self.language_code = language_code
        self.options = options or config.emit_options(emit_form)
        logger.debug(f'Using Desugarer for {language_code} ({self.options.form.value})')
        self.desugarer = Desugarer(language_code, self.options)

    @classmethod
    def from_file_path(cls, file_path: str, **kwargs) -> 'DecoLower':
        """
        Create a DecoLower instance based on file extension.

        Raises:
            UnsupportedLanguageError: If the file extension is not supported
        """
        language_code = get_language_for_file(file_path)
        if not language_code:
            raise UnsupportedLanguageError(os.path.splitext(file_path)[1] or file_path, operation='desugar')
        return cls(language_code, **kwargs)

    @staticmethod
    def supported_languages() -> List[str]:
        return get_supported_languages()

    @staticmethod
    def load_file(file_path: str) -> str:
        """
        Load content from a file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f'File not found: {file_path}')
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()

    @staticmethod
    def open_workspace(root: str) -> 'Workspace':
        """Open a workspace rooted at ``root`` and index its source files."""
        from decolower.core.workspace import Workspace
        return Workspace.open(root)

    def desugar(self, code: str) -> str:
        """Return ``code`` with every decorated class and object literal lowered."""
        return self.desugarer.desugar(code)

    def desugar_file(self, file_path: str, output_path: Optional[str] = None) -> str:
        """Lower a file; write the result to ``output_path`` when given."""
        result = self.desugar(self.load_file(file_path))
        if output_path:
            directory = os.path.dirname(output_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as fh:
                fh.write(result)
            logger.info(f'Wrote {output_path}')
        return result

    def parse(self, code: str) -> List[Declaration]:
        """Syntax models of the decorated declarations in ``code``, in source order."""
        return [site.declaration for site in self.desugarer.sites(code)]

    def classify(self, code: str) -> List[Site]:
        """Decoration units of every decorated declaration in ``code``, in source order."""
        return self.desugarer.sites(code)
