"""Move application and end-of-game detection.

apply_move() is pure: it returns the very same object for an illegal
request and a fresh GameState otherwise.
"""

from __future__ import annotations

from dataclasses import replace

from .board import (
    build_board,
    capture_destinations,
    has_any_legal_move,
    is_capture,
    legal_destinations,
)
from .models import (
    ContinuationRule,
    GameState,
    GameStatus,
    MoveKind,
    MoveRecord,
    Position,
    Side,
)

__all__ = ["apply_move", "detect_game_end", "pass_turn"]


def _as_position(value) -> Position | None:
    try:
        row, col = value
    except (TypeError, ValueError):
        return None
    return Position(row, col)


def pass_turn(state: GameState, timestamp: float) -> GameState:
    """Hand the move to the opponent and restart the turn clock."""
    return replace(
        state,
        side_to_move=state.side_to_move.opponent,
        selected=None,
        highlighted=(),
        must_continue_from=None,
        bonus_turn=False,
        turn_start_time=timestamp,
        turn_time_remaining=state.settings.turn_time_ms,
    )


def apply_move(state: GameState, fr, to, *, timestamp: float = 0.0) -> GameState:
    """Apply the move *fr* → *to* for the side to move.

    Returns *state* itself when the game is over or *to* is not among
    legal_destinations(state, fr).
    """
    if not state.is_playing:
        return state
    fr, to = _as_position(fr), _as_position(to)
    if fr is None or to is None or to not in legal_destinations(state, fr):
        return state

    piece = state.piece_at(fr)
    promoted = not piece.is_king and to.row == piece.side.promotion_row
    moved = replace(piece, position=to, is_king=piece.is_king or promoted)

    captured = ()
    if is_capture(fr, to):
        mid = Position((fr.row + to.row) // 2, (fr.col + to.col) // 2)
        captured = (state.piece_at(mid),)
        kind = MoveKind.CAPTURE
    elif state.bonus_turn:
        kind = MoveKind.CONTINUATION_MOVE
    else:
        kind = MoveKind.MOVE

    captured_ids = {p.id for p in captured}
    pieces = tuple(
        moved if p.id == piece.id else p
        for p in state.pieces
        if p.id not in captured_ids
    )
    record = MoveRecord(
        id=f"move-{state.move_count + 1}",
        fr=fr,
        to=to,
        kind=kind,
        piece=piece,
        captured=captured,
        timestamp=timestamp,
    )
    after = replace(
        state,
        board=build_board(pieces),
        pieces=pieces,
        history=state.history + (record,),
        move_count=state.move_count + 1,
        selected=None,
        highlighted=(),
        must_continue_from=None,
        bonus_turn=False,
    )

    if kind is MoveKind.CAPTURE:
        after = _continue_after_capture(after, to, timestamp)
    else:
        after = pass_turn(after, timestamp)

    return detect_game_end(after, at=timestamp)


def _continue_after_capture(state: GameState, landing: Position, timestamp: float) -> GameState:
    if state.settings.continuation_rule is ContinuationRule.SAME_PIECE:
        follow_ups = capture_destinations(state, landing)
        if not follow_ups:
            return pass_turn(state, timestamp)
        return replace(
            state,
            must_continue_from=landing,
            selected=landing,
            highlighted=tuple(follow_ups),
        )

    bonus = replace(state, bonus_turn=True)
    if not has_any_legal_move(bonus):
        return pass_turn(state, timestamp)
    return bonus


def detect_game_end(state: GameState, at: float | None = None) -> GameState:
    """Settle status after a transition.

    A side with no pieces loses. Otherwise, if the side to move has no legal
    move the game is drawn. Either way the game clock stops.
    """
    if not state.is_playing:
        return state

    remaining = {side: 0 for side in Side}
    for p in state.pieces:
        remaining[p.side] += 1

    for side in Side:
        if remaining[side] == 0:
            return _finish(state, GameStatus.win_for(side.opponent), side.opponent, at)

    if not has_any_legal_move(state):
        return _finish(state, GameStatus.DRAW, None, at)
    return state


def _finish(
    state: GameState, status: GameStatus, winner: Side | None, at: float | None
) -> GameState:
    game_time = state.game_time
    if at is not None and state.game_start_time is not None:
        game_time = max(game_time, at - state.game_start_time)
    return replace(
        state,
        status=status,
        winner=winner,
        timer_running=False,
        game_time=game_time,
        selected=None,
        highlighted=(),
        must_continue_from=None,
        bonus_turn=False,
    )
