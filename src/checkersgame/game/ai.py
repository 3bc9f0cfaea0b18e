"""Greedy checkers AI — scores each legal move and picks among the best.

No search. Each candidate is scored on its own:

    +10          capture
    0..7         advance (closer to the promotion row is better)
    +5           landing on the promotion row
    0..3.5       closeness to the middle columns

If any capture exists only captures are eligible and the pick is uniform
among the top-scoring ties. Otherwise the pick is uniform among the top
few quiet moves so play is not fully predictable.
"""

from __future__ import annotations

import random

from .board import all_legal_moves, is_capture
from .models import BOARD_SIZE, GameState, Position

__all__ = ["score_move", "select_move"]

CAPTURE_SCORE_BONUS = 10
KING_ROW_BONUS = 5
BOARD_CENTER = (BOARD_SIZE - 1) / 2
MAX_AI_MOVES_CONSIDERED = 3


def score_move(state: GameState, fr: Position, to: Position) -> float:
    side = state.side_to_move
    score = 0.0
    if is_capture(fr, to):
        score += CAPTURE_SCORE_BONUS
    score += (BOARD_SIZE - 1) - abs(side.promotion_row - to[0])
    if to[0] == side.promotion_row:
        score += KING_ROW_BONUS
    score += BOARD_CENTER - abs(to[1] - BOARD_CENTER)
    return score


def select_move(
    state: GameState, rng: random.Random | None = None
) -> tuple[Position, Position] | None:
    """Pick a (from, to) move for the side to move, or None if it has none."""
    if not state.is_playing:
        return None
    moves = all_legal_moves(state)
    if not moves:
        return None
    rng = rng or random.Random()

    captures = [m for m in moves if is_capture(*m)]
    scored = sorted(
        ((score_move(state, fr, to), (fr, to)) for fr, to in (captures or moves)),
        key=lambda item: item[0],
        reverse=True,
    )

    if captures:
        best = scored[0][0]
        top = [move for score, move in scored if score == best]
    else:
        top = [move for _, move in scored[:MAX_AI_MOVES_CONSIDERED]]
    return rng.choice(top)
