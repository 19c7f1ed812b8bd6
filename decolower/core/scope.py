"""
Temporary names for one lowered declaration.

Every name handed out is checked against the identifiers already present in
the source being lowered, so a temporary never shadows a user binding.
"""
import logging
from typing import Dict, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)


class TempScope:
    """Allocates the temporaries used inside one lowered declaration."""

    def __init__(self, prefix: str = '_', taken: Optional[Iterable[str]] = None):
        """
        Args:
            prefix: Prefix of every generated name
            taken: Identifiers the generated names must avoid
        """
        self.prefix = prefix
        self.taken: Set[str] = set(taken or ())
        self.declared: List[str] = []
        self._reserved: Dict[str, str] = {}

    def fresh(self, base: str) -> str:
        """A new declared name per call: ``_dec``, ``_dec2``, ..."""
        return self.declare(self._unique(base))

    def shared(self, base: str) -> str:
        """The same declared name on every call."""
        return self.declare(self.reserve(base))

    def reserve(self, base: str) -> str:
        """The same name on every call, left out of the ``var`` list (for bindings the code declares itself)."""
        if base not in self._reserved:
            self._reserved[base] = self._unique(base)
        return self._reserved[base]

    def declare(self, name: str) -> str:
        if name not in self.declared:
            self.declared.append(name)
        self.taken.add(name)
        return name

    def _unique(self, base: str) -> str:
        name = f'{self.prefix}{base}'
        counter = 1
        while name in self.taken:
            counter += 1
            name = f'{self.prefix}{base}{counter}'
        if counter > 1:
            logger.debug(f'Temporary {self.prefix}{base} is taken; using {name}')
        self.taken.add(name)
        return name
