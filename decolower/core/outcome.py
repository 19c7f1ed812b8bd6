"""
Decorator return values as an explicit sum type.

A decorator either keeps the value it was handed (it returned nothing) or
replaces it wholesale. Every composition step must handle both branches.
"""
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Keep:
    """The decorator returned nothing; the carried value stays authoritative."""

    def __repr__(self) -> str:
        return 'Keep()'


@dataclass(frozen=True)
class Replace:
    """The decorator returned a value that replaces the carried one."""
    value: Any


Outcome = Union[Keep, Replace]

KEEP = Keep()


def outcome_of(returned: Any) -> Outcome:
    """Classify a raw decorator return value. ``None`` is the absent value."""
    if returned is None:
        return KEEP
    return Replace(returned)
