from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from draughts.types import Move, Piece, Position, TurnOutcome

if TYPE_CHECKING:
    from draughts.state import GameState

# (dx, dy) in generation order
_DIRS: List[Tuple[int, int]] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


def _forward_dy(piece: Piece) -> int:
    return -1 if piece.player == 1 else 1


def _directions(piece: Piece) -> List[Tuple[int, int]]:
    if piece.is_king:
        return _DIRS
    forward = _forward_dy(piece)
    return [(dx, dy) for dx, dy in _DIRS if dy == forward]


class MoveGenerator:
    """Generates legal moves for the side to move in a GameState.

    Only pieces belonging to ``state.player_to_move`` produce moves. The
    forced-jump restriction is applied by the state itself, which asks for
    ``jumps_from`` the pending square instead of ``legal_moves``.
    """

    def jumps_from(self, state: "GameState", pos: Position) -> List[Move]:
        piece = state.piece_at(pos)
        if piece is None or piece.player != state.player_to_move:
            return []
        moves: List[Move] = []
        for dx, dy in _directions(piece):
            land = Position(pos[0] + 2 * dx, pos[1] + 2 * dy)
            if not state.in_bounds(land):
                continue
            over = state.piece_at((pos[0] + dx, pos[1] + dy))
            if over is None or over.player == piece.player:
                continue
            if state.piece_at(land) is None:
                moves.append(Move(piece, Position(*pos), land))
        return moves

    def steps_from(self, state: "GameState", pos: Position) -> List[Move]:
        piece = state.piece_at(pos)
        if piece is None or piece.player != state.player_to_move:
            return []
        moves: List[Move] = []
        for dx, dy in _directions(piece):
            dest = Position(pos[0] + dx, pos[1] + dy)
            if state.in_bounds(dest) and state.piece_at(dest) is None:
                moves.append(Move(piece, Position(*pos), dest))
        return moves

    def _scan(self, state: "GameState", per_square) -> List[Move]:
        res: List[Move] = []
        for x in range(state.size):
            for y in range(state.size):
                res.extend(per_square(state, Position(x, y)))
        return res

    def jumps(self, state: "GameState") -> List[Move]:
        return self._scan(state, self.jumps_from)

    def steps(self, state: "GameState") -> List[Move]:
        return self._scan(state, self.steps_from)

    def legal_moves(self, state: "GameState") -> List[Move]:
        captures = self.jumps(state)
        if captures:
            return captures
        return self.steps(state)


class MoveValidator:
    """Matches externally supplied moves against the generated legal ones."""

    @staticmethod
    def find_move(state: "GameState", source: Tuple[int, int],
                  destination: Tuple[int, int]) -> Optional[Move]:
        for move in state.available_moves():
            if move.source == tuple(source) and move.destination == tuple(destination):
                return move
        return None

    @staticmethod
    def find_move_for_piece(state: "GameState", piece_id: int,
                            destination: Tuple[int, int]) -> Optional[Move]:
        for move in state.available_moves():
            if move.piece.id == piece_id and move.destination == tuple(destination):
                return move
        return None


def turns_for_state(state: "GameState") -> List[TurnOutcome]:
    """Every complete turn the side to move could play.

    A move that leaves the same player to move (a capture with a pending
    continuation) is extended with every turn from the resulting state.
    Chains are bounded by the number of opposing pieces.
    """
    player = state.player_to_move
    res: List[TurnOutcome] = []
    for move in state.available_moves():
        after = state.state_after_move(move)
        if after.player_to_move != player:
            res.append(TurnOutcome((move,), after))
            continue
        for cont in turns_for_state(after):
            res.append(TurnOutcome((move,) + cont.moves, cont.end_state))
    return res
