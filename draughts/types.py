"""
Type definitions and value objects for the draughts engine.

This module provides:
- Immutable value types for pieces, positions and moves
- Type aliases for turns and scores
- Board constants
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Tuple

if TYPE_CHECKING:
    from draughts.state import GameState

# Board constants
BOARD_SIZE = 8
PLAYER_ROWS = 3
PLAYERS = (1, 2)

Player = int  # 1 moves toward y == 0, 2 moves toward y == size-1


class IllegalMoveError(ValueError):
    """Raised when a move that is not currently available is applied."""


class Position(NamedTuple):
    """A square on the board, addressed by column ``x`` and row ``y``."""
    x: int
    y: int


@dataclass(frozen=True)
class Piece:
    """A single piece. The id is stable for the piece's whole lifetime."""
    id: int
    player: Player
    is_king: bool = False

    def __post_init__(self) -> None:
        if self.player not in PLAYERS:
            raise ValueError(f"player must be one of {PLAYERS}, got {self.player}")

    def crowned(self) -> "Piece":
        if self.is_king:
            return self
        return replace(self, is_king=True)


@dataclass(frozen=True)
class Move:
    """One step or one capture by a single piece."""
    piece: Piece
    source: Position
    destination: Position

    @property
    def jumped_position(self) -> Optional[Position]:
        """Square of the captured piece, or None for a simple step."""
        if abs(self.destination.x - self.source.x) != 2:
            return None
        return Position(
            self.source.x + (self.destination.x - self.source.x) // 2,
            self.source.y + (self.destination.y - self.source.y) // 2,
        )

    @property
    def is_jump(self) -> bool:
        return self.jumped_position is not None


Turn = List[Move]  # one player's full action: a step, or a chain of jumps
Score = float


@dataclass(frozen=True)
class TurnOutcome:
    """A complete turn together with the state reached after playing it."""
    moves: Tuple[Move, ...]
    end_state: "GameState"


def other_player(player: Player) -> Player:
    return 2 if player == 1 else 1
