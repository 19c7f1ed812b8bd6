import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from decolower.core.error_utilities import ErrorCollection, batch_process
from decolower.languages import get_language_for_file
from decolower.main import DecoLower

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Result of lowering a workspace"""
    written: List[Path] = field(default_factory=list)
    errors: ErrorCollection = field(default_factory=ErrorCollection)

    @property
    def ok(self) -> bool:
        return not self.errors


class Workspace:
    """Index of the source files under a root directory."""

    def __init__(self, root: str, extensions: Optional[Iterable[str]] = None):
        self.root = Path(root)
        self.extensions = {e.lower() if e.startswith('.') else f'.{e.lower()}' for e in extensions or ()}
        self.index: Dict[Path, str] = {}

    @classmethod
    def open(cls, root: str, extensions: Optional[Iterable[str]] = None) -> 'Workspace':
        ws = cls(root, extensions)
        ws._build_index()
        return ws

    def _build_index(self) -> None:
        self.index.clear()
        for path in sorted(self.root.rglob('*')):
            if not path.is_file():
                continue
            if self.extensions and path.suffix.lower() not in self.extensions:
                continue
            language = get_language_for_file(str(path))
            if language is None:
                continue
            self.index[path.relative_to(self.root)] = language
        logger.debug(f'Indexed {len(self.index)} files under {self.root}')

    def files(self) -> List[Path]:
        return list(self.index)

    def desugar_all(self, out_dir: str, emit_form: Optional[str] = None) -> BatchReport:
        """
        Lower every indexed file into ``out_dir``, mirroring the tree.
        Files are independent; a failure is recorded and the rest continue.
        """
        out_root = Path(out_dir)
        hems: Dict[str, DecoLower] = {}

        def _desugar(relative: Path) -> Path:
            language = self.index[relative]
            if language not in hems:
                hems[language] = DecoLower(language, emit_form=emit_form)
            target = out_root / relative
            hems[language].desugar_file(str(self.root / relative), str(target))
            return target

        written, errors = batch_process(self.files(), _desugar, operation_name='desugar')
        logger.info(f'Lowered {len(written)} of {len(self.index)} files into {os.fspath(out_root)}')
        return BatchReport(written=written, errors=errors)
