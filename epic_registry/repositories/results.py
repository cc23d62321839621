"""
Epic Registry - Repository Results

Return shapes shared by the list operations.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class FindAndCountResult:
    """A page of rows plus the size of the full matching set."""

    rows: list[Any]
    count: int


@dataclass(frozen=True)
class AutocompleteOption:
    """Suggestion entry for UI autocomplete lists."""

    id: str
    label: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)
