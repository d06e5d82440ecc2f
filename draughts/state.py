"""
Immutable game state for draughts.

A GameState is a snapshot of the board plus whose turn it is and, in the
middle of a capture chain, the square the chain must continue from. States
are never mutated; every transition builds a new state from a copy of the
board.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from draughts.moves import MoveGenerator
from draughts.types import (
    BOARD_SIZE,
    PLAYER_ROWS,
    PLAYERS,
    IllegalMoveError,
    Move,
    Piece,
    Player,
    Position,
    other_player,
)

Board = Tuple[Optional[Piece], ...]  # row-major, index x + y*size

_generator = MoveGenerator()


def _starting_board(size: int, player_rows: int) -> Board:
    """Player 1 fills the rows nearest y == size-1, player 2 those nearest y == 0."""
    board: List[Optional[Piece]] = [None] * (size * size)
    next_id = 0
    for i in range(player_rows):
        for j in range(size):
            if (j & 1) != (i & 1):
                continue
            for player in PLAYERS:
                x = j if player == 1 else size - 1 - j
                y = size - 1 - i if player == 1 else i
                board[x + y * size] = Piece(next_id, player)
                next_id += 1
    return tuple(board)


@dataclass(frozen=True)
class GameState:
    """Immutable representation of a draughts position."""

    board: Board
    player_to_move: Player = 1
    forced_jump_origin: Optional[Position] = None
    size: int = BOARD_SIZE

    def __post_init__(self) -> None:
        """Validate the state after initialization."""
        if not isinstance(self.board, tuple) or len(self.board) != self.size * self.size:
            raise ValueError(f"Board must be a tuple of {self.size * self.size} squares")
        if self.player_to_move not in PLAYERS:
            raise ValueError(f"player_to_move must be one of {PLAYERS}")
        if self.forced_jump_origin is not None:
            piece = self.piece_at(self.forced_jump_origin)
            if piece is None or piece.player != self.player_to_move:
                raise ValueError("forced_jump_origin must hold a piece of the player to move")

    @classmethod
    def new(cls, size: int = BOARD_SIZE, player_rows: int = PLAYER_ROWS) -> "GameState":
        """Standard starting position; player 1 moves first."""
        if size % 2 or size < 4:
            raise ValueError("size must be an even number >= 4")
        if player_rows < 1 or 2 * player_rows >= size:
            raise ValueError("player_rows must leave at least one empty row between the sides")
        return cls(board=_starting_board(size, player_rows), size=size)

    @classmethod
    def from_pieces(cls, pieces: dict, player_to_move: Player = 1,
                    size: int = BOARD_SIZE) -> "GameState":
        """Build a state from a ``{(x, y): Piece}`` mapping."""
        board: List[Optional[Piece]] = [None] * (size * size)
        for (x, y), piece in pieces.items():
            if not (0 <= x < size and 0 <= y < size):
                raise IndexError(f"position {(x, y)} is off the board")
            board[x + y * size] = piece
        return cls(board=tuple(board), player_to_move=player_to_move, size=size)

    # -----------------------------
    # Queries
    # -----------------------------
    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        return 0 <= pos[0] < self.size and 0 <= pos[1] < self.size

    def piece_at(self, pos: Tuple[int, int]) -> Optional[Piece]:
        x, y = pos
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"position {(x, y)} is off the {self.size}x{self.size} board")
        return self.board[x + y * self.size]

    def pieces(self) -> List[Tuple[Position, Piece]]:
        """All pieces on the board, scanned row by row."""
        res = []
        for i, piece in enumerate(self.board):
            if piece is not None:
                res.append((Position(i % self.size, i // self.size), piece))
        return res

    def available_moves(self) -> List[Move]:
        """Legal moves for the side to move; captures are mandatory."""
        if self.forced_jump_origin is not None:
            return _generator.jumps_from(self, self.forced_jump_origin)
        return _generator.legal_moves(self)

    def is_terminal(self) -> bool:
        return not self.available_moves()

    def count_pieces(self) -> Tuple[int, int, int, int]:
        """Count pieces of each type on the board.

        Returns:
            Tuple of (player1_men, player2_men, player1_kings, player2_kings)
        """
        p1_men = p2_men = p1_kings = p2_kings = 0
        for piece in self.board:
            if piece is None:
                continue
            if piece.player == 1:
                if piece.is_king:
                    p1_kings += 1
                else:
                    p1_men += 1
            elif piece.is_king:
                p2_kings += 1
            else:
                p2_men += 1
        return p1_men, p2_men, p1_kings, p2_kings

    def to_array(self) -> np.ndarray:
        """Encode the board as an int8 grid indexed ``[y, x]``.

        Player 2 pieces are positive, player 1 pieces negative; kings have
        magnitude 2, men magnitude 1.
        """
        grid = np.zeros((self.size, self.size), dtype=np.int8)
        for (x, y), piece in self.pieces():
            value = 2 if piece.is_king else 1
            grid[y, x] = value if piece.player == 2 else -value
        return grid

    # -----------------------------
    # Transitions
    # -----------------------------
    def apply_move(self, move: Move) -> "GameState":
        """Apply a move that must be one of ``available_moves()``."""
        if move not in self.available_moves():
            raise IllegalMoveError(
                f"move {move.source}->{move.destination} is not available for player {self.player_to_move}"
            )
        return self.state_after_move(move)

    def state_after_move(self, move: Move) -> "GameState":
        """Successor state without legality checks.

        Only pass moves produced by ``available_moves()`` on this state.
        """
        size = self.size
        board = list(self.board)
        board[move.source.x + move.source.y * size] = None
        jumped = move.jumped_position
        if jumped is not None:
            board[jumped.x + jumped.y * size] = None

        dest = move.destination
        piece = move.piece
        far_edge = 0 if self.player_to_move == 1 else size - 1
        if dest.y == far_edge:
            piece = piece.crowned()
        board[dest.x + dest.y * size] = piece

        # Same-player continuation is tested on the provisional state.
        state = GameState(tuple(board), self.player_to_move, None, size)
        if jumped is not None and _generator.jumps_from(state, dest):
            return GameState(state.board, self.player_to_move, dest, size)
        return GameState(state.board, other_player(self.player_to_move), None, size)
