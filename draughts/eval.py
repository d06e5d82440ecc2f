"""
Evaluation interfaces and the default material evaluator.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

import numpy as np

from draughts.types import Player, Score

if TYPE_CHECKING:
    from draughts.state import GameState


class Evaluator(ABC):
    """Abstract evaluator interface for position scoring."""

    @abstractmethod
    def evaluate(self, state: "GameState", player: Player) -> Score:  # pragma: no cover
        """Evaluate a single position from ``player``'s point of view."""
        raise NotImplementedError

    def batch_evaluate(self, states: Sequence["GameState"], player: Player) -> np.ndarray:
        """Evaluate several positions. Default uses one call per state."""
        out = np.zeros(len(states), dtype=np.float32)
        for i, state in enumerate(states):
            out[i] = float(self.evaluate(state, player))
        return out


class MaterialEvaluator(Evaluator):
    """Piece count difference; kings and men weigh the same.

    Positions with no legal moves are not scored specially.
    """

    def evaluate(self, state: "GameState", player: Player) -> Score:
        # player 2 pieces are positive in the array encoding
        goodness = int(np.sign(state.to_array()).sum())
        return float(goodness if player == 2 else -goodness)

    def batch_evaluate(self, states: Sequence["GameState"], player: Player) -> np.ndarray:
        if not states:
            return np.zeros(0, dtype=np.float32)
        grids = np.stack([s.to_array() for s in states])
        goodness = np.sign(grids).reshape(len(states), -1).sum(axis=1).astype(np.float32)
        return goodness if player == 2 else -goodness


def get_evaluator() -> Evaluator:
    return MaterialEvaluator()
