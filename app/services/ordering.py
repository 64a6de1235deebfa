"""Display-position rules for the game catalog.

A game's position is an optional non-negative integer.  ``None`` means
*unassigned*: the game has never been placed and will be given a position
the next time the full catalog is read.  Unassigned positions sort after
every assigned one, and ties between equal positions are broken by game id.
"""
from typing import Iterable, List, Optional, Tuple

# Largest value the INTEGER sort_order column holds on every supported store.
MAX_POSITION = 2 ** 31 - 1


class Position:
    """Immutable display position with explicit *unassigned* state."""

    __slots__ = ('_value',)

    def __init__(self, value: Optional[int] = None) -> None:
        if value is not None:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Position must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"Position must be non-negative, got {value}")
            if value > MAX_POSITION:
                raise ValueError(f"Position must be at most {MAX_POSITION}, got {value}")
        self._value = value

    @property
    def value(self) -> Optional[int]:
        return self._value

    @property
    def assigned(self) -> bool:
        return self._value is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        if self._value is None:
            return 'Position(unassigned)'
        return f'Position({self._value})'


def heal_positions(positions: Iterable[Position]) -> List[Tuple[int, Position]]:
    """Plan the repair of a catalog scanned in display order.

    Every unassigned entry is given its zero-based index in the scan.
    Assigned entries are left alone, even if that creates duplicates.

    Returns:
        ``(index, new_position)`` pairs, one per unassigned entry, in scan
        order.  Empty when nothing needs healing.
    """
    return [
        (index, Position(index))
        for index, position in enumerate(positions)
        if not position.assigned
    ]
