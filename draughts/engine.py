"""
Functional engine API over GameState and the search.

Callers that drive a game (a UI, the self-play CLI) use these helpers to
validate and enact turns and to ask the engine for its choice.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from draughts.config import DraughtsConfig, get_config, get_game_rules
from draughts.moves import turns_for_state
from draughts.notation import squares_of
from draughts.search import IterativeDeepeningSearch
from draughts.state import GameState
from draughts.types import Move, Player, Turn, other_player

__all__ = [
    "initial_state",
    "legal_moves",
    "apply_move",
    "apply_turn",
    "is_terminal",
    "winner",
    "count_pieces",
    "find_turn",
    "get_engine",
]


def initial_state(config: Optional[DraughtsConfig] = None) -> GameState:
    """Starting position using the configured board geometry."""
    rules = config.rules if config is not None else get_game_rules()
    return GameState.new(size=rules.board_size, player_rows=rules.player_rows)


def legal_moves(state: GameState) -> List[Move]:
    return state.available_moves()


def apply_move(state: GameState, move: Move) -> GameState:
    return state.apply_move(move)


def apply_turn(state: GameState, turn: Sequence[Move]) -> GameState:
    """Play a turn's moves one at a time, checking each for legality."""
    for move in turn:
        state = state.apply_move(move)
    return state


def is_terminal(state: GameState) -> bool:
    """True when the side to move has no legal move (and has lost)."""
    return state.is_terminal()


def winner(state: GameState) -> Optional[Player]:
    if not state.is_terminal():
        return None
    return other_player(state.player_to_move)


def count_pieces(state: GameState) -> Tuple[int, int, int, int]:
    return state.count_pieces()


def find_turn(state: GameState, squares: Sequence[int]) -> Optional[Turn]:
    """Match a square-number sequence (from ``parse_move_str``) to a full turn."""
    wanted = list(squares)
    for outcome in turns_for_state(state):
        if squares_of(outcome.moves, state.size) == wanted:
            return list(outcome.moves)
    return None


def get_engine(config: Optional[DraughtsConfig] = None) -> IterativeDeepeningSearch:
    """Get a new search engine instance."""
    return IterativeDeepeningSearch(settings=(config or get_config()).engine)
