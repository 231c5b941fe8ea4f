"""
SIC/XE Symbol Table
===================

Maps labels to addresses. The table is written only during pass 1 and
frozen before pass 2 starts reading it, so every forward reference sees
its final address.

Symbol names are case-insensitive; they are stored in uppercase.
A missing label (None or an empty string) never matches a lookup.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from sicxe_asm.errors import DuplicateSymbolError, SourceLocation


@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name (uppercase)
        value: Address assigned in pass 1
        location: Where the symbol was defined
    """
    name: str
    value: int
    location: SourceLocation


class SymbolTable:
    """
    Label to address mapping with phase-gated mutability.

    Usage:
        symbols = SymbolTable()
        symbols.define("LOOP", 0x1003, location)
        symbols.freeze()
        symbols.lookup("LOOP")   # 0x1003
    """

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}
        self._frozen = False

    @staticmethod
    def _key(name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        return name.upper()

    # =========================================================================
    # Pass 1 Interface
    # =========================================================================

    def define(self, name: str, value: int, location: SourceLocation,
               source_line: Optional[str] = None) -> Symbol:
        """
        Bind a label to an address.

        Raises:
            DuplicateSymbolError: If the label is already defined
            RuntimeError: If the table is frozen or the name is empty
        """
        if self._frozen:
            raise RuntimeError("symbol table is frozen; labels can only be defined in pass 1")
        key = self._key(name)
        if key is None:
            raise RuntimeError("cannot define a symbol without a name")

        existing = self._symbols.get(key)
        if existing is not None:
            raise DuplicateSymbolError(
                key,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        symbol = Symbol(name=key, value=value, location=location)
        self._symbols[key] = symbol
        return symbol

    def freeze(self) -> None:
        """Make the table read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # Pass 2 Interface
    # =========================================================================

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = self._key(name)
        return key is not None and key in self._symbols

    def lookup(self, name: Optional[str]) -> Optional[int]:
        """Return the address bound to a label, or None if undefined."""
        key = self._key(name)
        if key is None:
            return None
        symbol = self._symbols.get(key)
        return symbol.value if symbol else None

    def get(self, name: Optional[str]) -> Optional[Symbol]:
        """Return the full Symbol entry, or None if undefined."""
        key = self._key(name)
        if key is None:
            return None
        return self._symbols.get(key)

    def similar(self, name: str) -> list[str]:
        """Return defined names that look like a misspelling of name."""
        return find_similar(name, self._symbols)

    def as_dict(self) -> dict[str, int]:
        """Return a plain name to address dictionary."""
        return {name: sym.value for name, sym in self._symbols.items()}

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)


# =============================================================================
# Misspelling Hints
# =============================================================================

def find_similar(name: str, candidates: Iterable[str]) -> list[str]:
    """
    Find names that look like a typo of name, for error hints.

    Uses a simple edit distance heuristic.
    """
    name_lower = name.lower()
    similar = []

    for candidate in candidates:
        candidate_lower = candidate.lower()
        if (
            candidate_lower == name_lower or
            abs(len(candidate) - len(name)) <= 1 and
            _edit_distance(name_lower, candidate_lower) <= 2
        ):
            similar.append(candidate)

    return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]
