"""Draughts package: game state, move generation and time-bounded search.

Usage examples:
    from draughts import GameState, IterativeDeepeningSearch
    from draughts import initial_state, apply_turn, best_turn
"""
from __future__ import annotations

from .types import (
    BOARD_SIZE,
    PLAYER_ROWS,
    IllegalMoveError,
    Move,
    Piece,
    Position,
    Turn,
    TurnOutcome,
)
from .state import GameState
from .moves import MoveGenerator, MoveValidator, turns_for_state
from .eval import Evaluator, MaterialEvaluator, get_evaluator
from .search import IterativeDeepeningSearch, SearchResult, SearchStrategy, best_turn, get_search_strategy
from .notation import parse_move_str, seq_to_str, square_number, position_of
from .engine import (
    initial_state,
    legal_moves,
    apply_move,
    apply_turn,
    is_terminal,
    winner,
    count_pieces,
    find_turn,
    get_engine,
)
