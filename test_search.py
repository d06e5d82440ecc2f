from __future__ import annotations

import math

import numpy as np
import pytest

from draughts.config import EngineSettings
from draughts.eval import Evaluator, MaterialEvaluator, get_evaluator
from draughts.moves import turns_for_state
from draughts.search import IterativeDeepeningSearch, get_search_strategy
from draughts.state import GameState
from draughts.types import Piece, Position


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TickingEvaluator(Evaluator):
    """Material evaluator that advances a fake clock on every leaf."""

    def __init__(self, clock: FakeClock, tick: float) -> None:
        self.clock = clock
        self.tick = tick
        self.inner = MaterialEvaluator()
        self.calls = 0

    def evaluate(self, state, player):
        self.calls += 1
        self.clock.now += self.tick
        return self.inner.evaluate(state, player)


def make_search(max_depth=None, budget=1000, check_depth=2, **kwargs):
    settings = EngineSettings(time_budget_ms=budget, timeout_check_depth=check_depth, max_depth=max_depth)
    return IterativeDeepeningSearch(settings=settings, **kwargs)


def test_lost_position_returns_empty_turn_without_searching():
    evaluator = TickingEvaluator(FakeClock(), 0.0)
    state = GameState.from_pieces({(1, 0): Piece(0, 2)}, player_to_move=1)
    search = make_search(max_depth=3, evaluator=evaluator)
    result = search.search(state)
    assert result.moves == []
    assert result.nodes == 0
    assert evaluator.calls == 0
    assert search.best_turn(state) == []


def test_opening_turn_for_player_one_is_a_single_step():
    state = GameState.new()
    turn = make_search(max_depth=2).best_turn(state, time_budget_ms=5000)
    assert len(turn) == 1
    assert turn[0].piece.player == 1
    assert not turn[0].is_jump
    assert turn[0] in state.available_moves()


def test_opening_reply_for_player_two_is_a_single_step():
    state = GameState.new()
    state = state.apply_move(state.available_moves()[0])
    assert state.player_to_move == 2
    turn = make_search(max_depth=3).best_turn(state, time_budget_ms=5000)
    assert len(turn) == 1
    assert turn[0].piece.player == 2
    assert not turn[0].is_jump
    state.apply_move(turn[0])


def test_ties_keep_first_enumerated_turn():
    state = GameState.new()
    result = make_search(max_depth=1).search(state)
    assert result.depth == 1
    assert result.score == 0
    assert result.moves == list(turns_for_state(state)[0].moves)


def test_prefers_longer_capture_chain():
    state = GameState.from_pieces({
        (0, 5): Piece(0, 1),
        (5, 6): Piece(1, 1),
        (1, 4): Piece(2, 2),
        (6, 5): Piece(3, 2),
        (6, 3): Piece(4, 2),
    })
    turns = turns_for_state(state)
    assert len(turns) == 2
    turn = make_search(max_depth=1).best_turn(state)
    assert [m.source for m in turn] == [Position(5, 6), Position(7, 4)]
    assert turn[-1].destination == Position(5, 2)


def test_forced_single_turn_returned_immediately():
    state = GameState.from_pieces({
        (1, 6): Piece(0, 1),
        (2, 5): Piece(1, 2),
        (4, 3): Piece(2, 2),
        (7, 0): Piece(3, 2),
    })
    result = make_search(max_depth=4).search(state)
    assert len(result.moves) == 2
    assert result.depth == 0


def test_timeout_falls_back_to_last_completed_depth():
    clock = FakeClock()
    evaluator = TickingEvaluator(clock, 0.010)
    search = make_search(budget=100, check_depth=0, evaluator=evaluator, clock=clock)
    state = GameState.new()

    result = search.search(state)

    # depth 1 costs 7 leaves (70ms); depth 2 overruns on its second root turn
    assert result.timed_out
    assert result.depth == 1
    assert result.moves == list(turns_for_state(state)[0].moves)
    assert result.elapsed >= 0.1


def test_deadline_between_iterations_stops_deepening():
    clock = FakeClock()
    evaluator = TickingEvaluator(clock, 0.010)
    search = make_search(budget=50, check_depth=0, evaluator=evaluator, clock=clock)
    result = search.search(GameState.new())
    assert result.depth == 1
    assert not result.timed_out
    assert evaluator.calls == 7


def test_shallow_iterations_do_not_check_clock():
    clock = FakeClock()
    evaluator = TickingEvaluator(clock, 0.010)
    search = make_search(budget=100, check_depth=2, evaluator=evaluator, clock=clock)
    result = search.search(GameState.new())
    # depth 2 overruns the deadline but none of its nodes looks at the clock
    assert result.depth == 2
    assert not result.timed_out
    assert clock.now > 0.1


def test_search_is_deterministic():
    state = GameState.new()
    state = state.apply_move(state.available_moves()[3])
    a = make_search(max_depth=3).search(state)
    b = make_search(max_depth=3).search(state)
    assert a.moves == b.moves
    assert a.score == b.score
    assert a.nodes == b.nodes


def test_material_score_ignores_lost_position():
    # player 1 is stuck and has lost, yet leads on material
    state = GameState.from_pieces({
        (1, 0): Piece(0, 1),
        (3, 0): Piece(1, 1),
        (6, 7): Piece(2, 2),
    })
    assert state.is_terminal()
    assert MaterialEvaluator().evaluate(state, 1) == 1.0
    assert MaterialEvaluator().evaluate(state, 2) == -1.0


def test_factory_uses_engine_settings():
    strategy = get_search_strategy(EngineSettings(time_budget_ms=250, max_depth=1))
    assert isinstance(strategy, IterativeDeepeningSearch)
    assert strategy.time_budget_ms == 250
    assert len(strategy.best_turn(GameState.new())) == 1


def plain_minimax(state, depth, root_player, maximizing):
    """Full-width minimax over turns, no pruning."""
    if depth == 0:
        return MaterialEvaluator().evaluate(state, root_player)
    values = [plain_minimax(t.end_state, depth - 1, root_player, not maximizing)
              for t in turns_for_state(state)]
    if not values:
        return -math.inf if maximizing else math.inf
    return max(values) if maximizing else min(values)


def midgame_state(plies):
    """Deterministic playout from the start, stopping where there is a real choice."""
    state = GameState.new()
    played = 0
    while played < plies or len(turns_for_state(state)) < 2:
        turns = turns_for_state(state)
        assert turns
        state = turns[(played * 3) % len(turns)].end_state
        played += 1
    return state


@pytest.mark.parametrize("plies", [4, 9, 15])
@pytest.mark.parametrize("depth", [2, 3])
def test_pruned_search_matches_plain_minimax(plies, depth):
    state = midgame_state(plies)
    turns = turns_for_state(state)
    root = state.player_to_move
    values = [plain_minimax(t.end_state, depth - 1, root, False) for t in turns]
    best = max(values)
    expected = turns[values.index(best)]

    result = make_search(max_depth=depth).search(state)

    assert result.depth == depth
    assert result.score == best
    assert result.moves == list(expected.moves)


def test_batch_evaluate_matches_single_evaluation():
    states = [midgame_state(plies) for plies in (0, 5, 11)]
    evaluator = get_evaluator()
    for player in (1, 2):
        batch = evaluator.batch_evaluate(states, player)
        assert isinstance(batch, np.ndarray)
        assert batch.tolist() == [evaluator.evaluate(s, player) for s in states]
        assert evaluator.batch_evaluate([], player).shape == (0,)


def test_default_batch_evaluate_loops_over_evaluate():
    clock = FakeClock()
    ticking = TickingEvaluator(clock, 0.5)
    states = [GameState.new(), midgame_state(6)]
    batch = ticking.batch_evaluate(states, 1)
    assert batch.tolist() == [MaterialEvaluator().evaluate(s, 1) for s in states]
    assert ticking.calls == 2
    assert ticking.batch_evaluate([], 2).shape == (0,)
