"""
Iterative-deepening alpha-beta search over whole turns.

The tree branches on complete turns (a step, or a full capture chain), so
one ply is always one player's full action. Each iteration searches one
ply deeper than the last; when the wall-clock deadline passes mid-iteration
the partial work is discarded and the previous iteration's answer stands.
"""
from __future__ import annotations

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from draughts.config import EngineSettings, get_engine_settings
from draughts.eval import Evaluator, get_evaluator
from draughts.moves import turns_for_state
from draughts.notation import seq_to_str
from draughts.state import GameState
from draughts.types import Player, Score, Turn, TurnOutcome

logger = logging.getLogger(__name__)

# Returned in place of a score once the deadline has passed.
TIMED_OUT = None

Clock = Callable[[], float]


@dataclass
class SearchResult:
    """Outcome of one call to ``search``."""
    moves: Turn = field(default_factory=list)
    score: Optional[Score] = None
    depth: int = 0
    nodes: int = 0
    elapsed: float = 0.0
    timed_out: bool = False


class SearchStrategy(ABC):
    """Abstract interface for search strategies."""

    @abstractmethod
    def search(self, state: GameState, time_budget_ms: Optional[int] = None) -> SearchResult:  # pragma: no cover
        raise NotImplementedError

    def best_turn(self, state: GameState, time_budget_ms: Optional[int] = None) -> Turn:
        """Moves of the chosen turn; empty iff the side to move has lost."""
        return self.search(state, time_budget_ms).moves


class _Run:
    """Per-call search state: deadline, root player and node count."""

    def __init__(self, evaluator: Evaluator, root_player: Player, deadline: float,
                 check_depth: int, clock: Clock) -> None:
        self.evaluator = evaluator
        self.root_player = root_player
        self.deadline = deadline
        self.check_depth = check_depth
        self.clock = clock
        self.nodes = 0

    def _expired(self, depth_remaining: int) -> bool:
        return depth_remaining > self.check_depth and self.clock() > self.deadline

    def _leaf_values(self, turns: List[TurnOutcome]) -> np.ndarray:
        """Static scores of every child one ply above the horizon."""
        self.nodes += len(turns)
        return self.evaluator.batch_evaluate([t.end_state for t in turns], self.root_player)

    def root(self, turns: List[TurnOutcome], depth: int) -> Optional[Tuple[TurnOutcome, Score]]:
        alpha = -math.inf
        best: Optional[TurnOutcome] = None
        for outcome in turns:
            value = self.minimizer(outcome.end_state, alpha, math.inf, depth - 1)
            if value is TIMED_OUT:
                return None
            if value > alpha:
                alpha = value
                best = outcome
        if best is None:
            # every turn loses outright; keep the first
            best = turns[0]
        return best, alpha

    def maximizer(self, state: GameState, alpha: Score, beta: Score,
                  depth_remaining: int) -> Optional[Score]:
        self.nodes += 1
        if depth_remaining == 0:
            return self.evaluator.evaluate(state, self.root_player)
        if self._expired(depth_remaining):
            return TIMED_OUT
        best = -math.inf
        turns = turns_for_state(state)
        leaves = self._leaf_values(turns) if depth_remaining == 1 else None
        for i, outcome in enumerate(turns):
            if leaves is not None:
                value = float(leaves[i])
            else:
                value = self.minimizer(outcome.end_state, max(best, alpha), beta, depth_remaining - 1)
                if value is TIMED_OUT:
                    return TIMED_OUT
            if value > best:
                best = value
            if best >= beta:
                break
        return best

    def minimizer(self, state: GameState, alpha: Score, beta: Score,
                  depth_remaining: int) -> Optional[Score]:
        self.nodes += 1
        if depth_remaining == 0:
            return self.evaluator.evaluate(state, self.root_player)
        if self._expired(depth_remaining):
            return TIMED_OUT
        best = math.inf
        turns = turns_for_state(state)
        leaves = self._leaf_values(turns) if depth_remaining == 1 else None
        for i, outcome in enumerate(turns):
            if leaves is not None:
                value = float(leaves[i])
            else:
                value = self.maximizer(outcome.end_state, alpha, min(best, beta), depth_remaining - 1)
                if value is TIMED_OUT:
                    return TIMED_OUT
            if value < best:
                best = value
            if best <= alpha:
                break
        return best


class IterativeDeepeningSearch(SearchStrategy):
    """Minimax with alpha-beta pruning under a wall-clock budget."""

    def __init__(self, evaluator: Optional[Evaluator] = None,
                 settings: Optional[EngineSettings] = None,
                 clock: Clock = time.monotonic) -> None:
        settings = settings or get_engine_settings()
        self.evaluator: Evaluator = evaluator or get_evaluator()
        self.time_budget_ms: int = settings.time_budget_ms
        self.timeout_check_depth: int = settings.timeout_check_depth
        self.max_depth: Optional[int] = settings.max_depth
        self.clock = clock

    def search(self, state: GameState, time_budget_ms: Optional[int] = None) -> SearchResult:
        start = self.clock()
        if not state.available_moves():
            return SearchResult()

        budget = self.time_budget_ms if time_budget_ms is None else time_budget_ms
        run = _Run(self.evaluator, state.player_to_move, start + budget / 1000.0,
                   self.timeout_check_depth, self.clock)
        turns = turns_for_state(state)
        result = SearchResult(moves=list(turns[0].moves))
        if len(turns) == 1:
            result.elapsed = self.clock() - start
            return result

        while self.max_depth is None or result.depth < self.max_depth:
            if result.depth > 0 and self.clock() > run.deadline:
                break
            found = run.root(turns, result.depth + 1)
            if found is None:
                result.timed_out = True
                logger.debug("depth %d timed out after %d nodes", result.depth + 1, run.nodes)
                break
            best, score = found
            result.moves = list(best.moves)
            result.score = score
            result.depth += 1
            logger.debug("depth %d: %s score=%s nodes=%d",
                         result.depth, seq_to_str(result.moves, state.size), score, run.nodes)

        result.nodes = run.nodes
        result.elapsed = self.clock() - start
        logger.info("player %d plays %s (depth %d, score %s, %d nodes, %.3fs)",
                    state.player_to_move, seq_to_str(result.moves, state.size),
                    result.depth, result.score, result.nodes, result.elapsed)
        return result


def get_search_strategy(settings: Optional[EngineSettings] = None) -> SearchStrategy:
    """Factory for the default search strategy."""
    return IterativeDeepeningSearch(settings=settings)


def best_turn(state: GameState, time_budget_ms: Optional[int] = None) -> Turn:
    """Functional wrapper around the default strategy."""
    return get_search_strategy().best_turn(state, time_budget_ms)
