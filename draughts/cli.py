from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from draughts.config import DraughtsConfig, EngineSettings, get_config, load_config_from_file, setup_logging
from draughts.engine import apply_turn, get_engine, initial_state, winner
from draughts.notation import seq_to_str

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play the engine against itself")
    ap.add_argument("--budget-ms", type=int, default=None, help="Search time per turn in milliseconds")
    ap.add_argument("--max-depth", type=int, default=None, help="Stop deepening after this many plies")
    ap.add_argument("--max-turns", type=int, default=200, help="Declare a draw after this many turns")
    ap.add_argument("--config", default=None, help="JSON config file")
    return ap.parse_args(argv)


def play_game(config: DraughtsConfig, max_turns: int) -> Optional[int]:
    """Play one engine-vs-engine game. Returns the winner, or None for a draw."""
    engine = get_engine(config)
    state = initial_state(config)
    for number in range(1, max_turns + 1):
        turn = engine.best_turn(state)
        if not turn:
            break
        logger.info("%3d. player %d: %s", number, state.player_to_move, seq_to_str(turn, state.size))
        state = apply_turn(state, turn)
    return winner(state)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config_from_file(args.config) if args.config else get_config()
    setup_logging()

    updates = {}
    if args.budget_ms is not None:
        updates["time_budget_ms"] = args.budget_ms
    if args.max_depth is not None:
        updates["max_depth"] = args.max_depth
    if updates:
        engine = EngineSettings.model_validate({**config.engine.model_dump(), **updates})
        config = config.model_copy(update={"engine": engine})

    result = play_game(config, args.max_turns)
    print("draw" if result is None else f"player {result} wins")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
