"""
Square-number move notation.

Playable squares are numbered 1..size*size/2 row by row from y == 0, which
on an 8x8 board gives the familiar 1..32 numbering. Steps are written
``22-18``; capture chains ``23x14x5``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from draughts.types import BOARD_SIZE, Move, Position


@lru_cache(maxsize=None)
def _mappings(size: int) -> Tuple[Tuple[Position, ...], Dict[Position, int]]:
    """Build mappings between square numbers and positions."""
    positions: List[Position] = []
    numbers: Dict[Position, int] = {}
    for y in range(size):
        for x in range(size):
            if (x + y) % 2 == 1:
                positions.append(Position(x, y))
                numbers[Position(x, y)] = len(positions)
    return tuple(positions), numbers


def square_number(pos: Tuple[int, int], size: int = BOARD_SIZE) -> int:
    """Convert a position to its square number."""
    number = _mappings(size)[1].get(Position(*pos))
    if number is None:
        raise ValueError(f"{tuple(pos)} is not a playable square")
    return number


def position_of(number: int, size: int = BOARD_SIZE) -> Position:
    """Convert a square number to its position."""
    positions = _mappings(size)[0]
    if not 1 <= number <= len(positions):
        raise ValueError(f"square number must be in 1..{len(positions)}, got {number}")
    return positions[number - 1]


def squares_of(turn: Sequence[Move], size: int = BOARD_SIZE) -> List[int]:
    """Square numbers visited by a turn, starting square first."""
    if not turn:
        return []
    seq = [square_number(turn[0].source, size)]
    seq.extend(square_number(m.destination, size) for m in turn)
    return seq


def seq_to_str(turn: Sequence[Move], size: int = BOARD_SIZE) -> str:
    """Convert a turn to string notation."""
    if not turn:
        return ""
    sep = 'x' if turn[0].is_jump else '-'
    return sep.join(str(n) for n in squares_of(turn, size))


def parse_move_str(s: str, size: int = BOARD_SIZE) -> Optional[List[int]]:
    """Parse a move string into a list of square numbers."""
    s = s.strip().lower().replace('x', '-').replace(' ', '')
    if not s:
        return None
    parts: List[str] = s.split('-')
    if not all(parts):
        return None
    try:
        seq: List[int] = [int(p) for p in parts]
    except ValueError:
        return None
    limit = len(_mappings(size)[0])
    if len(seq) < 2 or not all(1 <= x <= limit for x in seq):
        return None
    return seq
