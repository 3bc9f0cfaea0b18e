"""Game reducer — the single pure transition function ``apply(state, action)``.

Every action maps to one handler. Handlers return the input state object
unchanged for anything illegal or irrelevant, so callers can detect a no-op
with ``new is old``.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Callable

from . import actions as act
from .ai import select_move
from .board import build_board, create_initial_pieces, in_bounds, legal_destinations
from .models import ContinuationRule, GameSettings, GameState, Position
from .moves import apply_move, detect_game_end, pass_turn

__all__ = [
    "apply",
    "can_drag",
    "drag_move",
    "expire_turn",
    "initialize",
    "is_game_active",
    "make_ai_move",
    "move_to",
    "select",
]


def initialize(settings: GameSettings | None = None) -> GameState:
    """Return a fresh game in the starting position."""
    settings = settings or GameSettings()
    pieces = create_initial_pieces()
    return GameState(
        board=build_board(pieces),
        pieces=pieces,
        side_to_move=settings.starting_side,
        settings=settings,
        turn_time_remaining=settings.turn_time_ms,
    )


def _position(value) -> Position | None:
    try:
        row, col = value
    except (TypeError, ValueError):
        return None
    if not isinstance(row, int) or not isinstance(col, int) or not in_bounds(row, col):
        return None
    return Position(row, col)


def _start_clock(state: GameState, at: float | None) -> GameState:
    """Start the game clock (and the first turn's clock) if it never ran."""
    if at is None or state.game_start_time is not None or not state.is_playing:
        return state
    return replace(
        state,
        game_start_time=at,
        game_time=0.0,
        timer_running=True,
        turn_start_time=at,
        turn_time_remaining=state.settings.turn_time_ms,
    )


# ── Player interaction ───────────────────────────────────────────


def select(state: GameState, position, at: float | None = None) -> GameState:
    """Select the square at *position*.

    An own piece becomes selected with its destinations highlighted; any
    other square clears the selection. The first selection of a game starts
    the game clock.
    """
    if not state.is_playing:
        return state
    state = _start_clock(state, at)
    pos = _position(position)

    marker = state.must_continue_from
    if state.settings.continuation_rule is ContinuationRule.SAME_PIECE and marker is not None:
        if pos != marker:
            return state
        return replace(state, selected=marker, highlighted=tuple(legal_destinations(state, marker)))

    piece = state.piece_at(pos) if pos is not None else None
    if piece is not None and piece.side == state.side_to_move:
        return replace(state, selected=pos, highlighted=tuple(legal_destinations(state, pos)))

    if state.selected is None and not state.highlighted:
        return state
    return replace(state, selected=None, highlighted=())


def move_to(state: GameState, position, at: float = 0.0) -> GameState:
    """Move the selected piece to *position* if it is highlighted."""
    if state.selected is None:
        return state
    pos = _position(position)
    if pos is None or pos not in state.highlighted:
        return state
    return apply_move(state, state.selected, pos, timestamp=at)


def drag_move(state: GameState, fr, to, at: float = 0.0) -> GameState:
    """Apply a drag-and-drop move; illegal drags are ignored."""
    if not state.is_playing:
        return state
    started = _start_clock(state, at)
    after = apply_move(started, fr, to, timestamp=at)
    if after is started:
        return state
    return after


def make_ai_move(
    state: GameState, at: float = 0.0, rng: random.Random | None = None
) -> GameState:
    """Let the AI move for its side. No-op when it is not the AI's turn."""
    settings = state.settings
    if not (state.is_playing and settings.ai_enabled and state.side_to_move == settings.ai_side):
        return state
    choice = select_move(state, rng)
    if choice is None:
        return state
    started = _start_clock(state, at)
    after = apply_move(started, choice[0], choice[1], timestamp=at)
    if after is started:
        return state
    return after


# ── Clocks ───────────────────────────────────────────────────────


def tick_clock(state: GameState, at: float) -> GameState:
    if not state.timer_running or state.game_start_time is None:
        return state
    if not state.is_playing:
        return replace(state, timer_running=False)
    return replace(state, game_time=at - state.game_start_time)


def start_turn_clock(state: GameState, at: float) -> GameState:
    if not (state.settings.turn_time_limit_enabled and state.is_playing):
        return state
    return replace(state, turn_start_time=at, turn_time_remaining=state.settings.turn_time_ms)


def tick_turn_clock(state: GameState, at: float) -> GameState:
    if not (state.settings.turn_time_limit_enabled and state.is_playing):
        return state
    if state.turn_start_time is None:
        return state
    remaining = max(0.0, state.settings.turn_time_ms - (at - state.turn_start_time))
    if remaining == state.turn_time_remaining:
        return state
    return replace(state, turn_time_remaining=remaining)


def expire_turn(state: GameState, at: float) -> GameState:
    """Forfeit the current turn: the other side moves next, nothing moves."""
    if not (state.settings.turn_time_limit_enabled and state.is_playing):
        return state
    return detect_game_end(pass_turn(state, at), at=at)


# ── Settings ─────────────────────────────────────────────────────


def toggle_ai(state: GameState, enabled: bool, side=None) -> GameState:
    settings = replace(
        state.settings,
        ai_enabled=enabled,
        ai_side=side if side is not None else state.settings.ai_side,
    )
    return initialize(settings)


def toggle_turn_time_limit(state: GameState, enabled: bool) -> GameState:
    return initialize(replace(state.settings, turn_time_limit_enabled=enabled))


# ── Queries ──────────────────────────────────────────────────────


def is_game_active(state: GameState) -> bool:
    return state.is_playing


def can_drag(state: GameState, position) -> bool:
    """True when a human may pick up the piece on *position* right now."""
    pos = _position(position)
    if pos is None or not state.is_playing:
        return False
    settings = state.settings
    if settings.ai_enabled and state.side_to_move == settings.ai_side:
        return False
    piece = state.piece_at(pos)
    return piece is not None and piece.side == state.side_to_move


# ── Dispatch ─────────────────────────────────────────────────────

_HANDLERS: dict[type, Callable[[GameState, act.Action], GameState]] = {
    act.SelectSquare: lambda s, a: select(s, a.position, a.at),
    act.MoveTo: lambda s, a: move_to(s, a.position, a.at),
    act.DragMove: lambda s, a: drag_move(s, a.fr, a.to, a.at),
    act.ResetGame: lambda s, a: initialize(s.settings),
    act.StartClock: lambda s, a: _start_clock(s, a.at),
    act.TickClock: lambda s, a: tick_clock(s, a.at),
    act.StartTurnClock: lambda s, a: start_turn_clock(s, a.at),
    act.TickTurnClock: lambda s, a: tick_turn_clock(s, a.at),
    act.ToggleAI: lambda s, a: toggle_ai(s, a.enabled, a.side),
    act.ToggleTurnTimeLimit: lambda s, a: toggle_turn_time_limit(s, a.enabled),
    act.MakeAIMove: lambda s, a: make_ai_move(s, a.at, a.rng),
    act.ExpireTurn: lambda s, a: expire_turn(s, a.at),
}


def apply(state: GameState, action: act.Action) -> GameState:
    """Return the state that follows *state* under *action*."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action)
