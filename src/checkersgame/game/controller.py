"""GameController — owns the game state and every live timer.

The controller is the only thing that replaces the GameState. Each user
call or timer callback becomes an action fed through ``reducer.apply``;
afterwards ``_sync_timers()`` arms or cancels the three timer handles so
they match the new state:

- game clock: repeating tick while the clock runs and the game is on
- turn clock: repeating tick per turn while the turn limit is enabled;
  expiry forfeits the turn
- AI move: one delayed call whenever the AI side is to move
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable

from checkersgame.config import TimingConfig
from checkersgame.core.clock import Scheduler, ThreadingScheduler, TimerHandle

from . import actions as act
from . import reducer
from .board import count_pieces
from .models import GameSettings, GameState, Side
from .stats import compute_stats

logger = logging.getLogger(__name__)

Listener = Callable[[GameState, GameState], None]


class GameController:
    """Single-game orchestrator with owned, cancelable timers."""

    def __init__(
        self,
        settings: GameSettings | None = None,
        scheduler: Scheduler | None = None,
        timing: TimingConfig | None = None,
        rng: random.Random | None = None,
        state: GameState | None = None,
    ) -> None:
        self._scheduler = scheduler or ThreadingScheduler()
        self._timing = timing or TimingConfig()
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._closed = False

        self._clock_handle: TimerHandle | None = None
        self._turn_handle: TimerHandle | None = None
        self._turn_key: tuple | None = None
        self._ai_handle: TimerHandle | None = None
        self._ai_key: tuple | None = None

        # An explicit starting position wins over settings
        self._state = state if state is not None else reducer.initialize(settings)
        with self._lock:
            self._sync_timers()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener(old, new)* on every state change. Returns an unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: act.Action) -> GameState:
        with self._lock:
            if self._closed:
                return self._state
            old = self._state
            try:
                new = reducer.apply(old, action)
                if new is not old:
                    self._state = new
                    self._log_transition(old, new, action)
                    for listener in list(self._listeners):
                        listener(old, new)
            finally:
                self._sync_timers()
            return self._state

    # ------------------------------------------------------------------
    # UI-facing operations
    # ------------------------------------------------------------------

    def select(self, position) -> GameState:
        return self.dispatch(act.SelectSquare(position, self._scheduler.now()))

    def move_to(self, position) -> GameState:
        return self.dispatch(act.MoveTo(position, self._scheduler.now()))

    def drag_move(self, fr, to) -> GameState:
        return self.dispatch(act.DragMove(fr, to, self._scheduler.now()))

    def start_clock(self) -> GameState:
        return self.dispatch(act.StartClock(self._scheduler.now()))

    def reset(self) -> GameState:
        return self.dispatch(act.ResetGame())

    def toggle_ai(self, enabled: bool, side: Side | None = None) -> GameState:
        return self.dispatch(act.ToggleAI(enabled, side))

    def toggle_turn_time_limit(self, enabled: bool) -> GameState:
        return self.dispatch(act.ToggleTurnTimeLimit(enabled))

    def can_drag(self, position) -> bool:
        return reducer.can_drag(self._state, position)

    def close(self) -> None:
        """Cancel every timer; later dispatches are ignored."""
        with self._lock:
            self._closed = True
            self._cancel_clock()
            self._cancel_turn()
            self._cancel_ai()
            self._turn_key = None
            self._ai_key = None

    def __enter__(self) -> GameController:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def get_state_snapshot(self) -> dict:
        s = self._state
        last = s.last_move
        return {
            "side_to_move": s.side_to_move.value,
            "status": s.status.value,
            "winner": s.winner.value if s.winner else None,
            "move_count": s.move_count,
            "selected": list(s.selected) if s.selected else None,
            "highlighted": [list(p) for p in s.highlighted],
            "bonus_turn": s.bonus_turn,
            "must_continue_from": list(s.must_continue_from) if s.must_continue_from else None,
            "pieces_remaining": count_pieces(s),
            "game_time_ms": s.game_time,
            "timer_running": s.timer_running,
            "turn_time_remaining_ms": s.turn_time_remaining,
            "last_move": {
                "from": list(last.fr),
                "to": list(last.to),
                "kind": last.kind.value,
                "captured": [p.id for p in last.captured],
            } if last else None,
            "stats": compute_stats(s).as_dict(),
        }

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _sync_timers(self) -> None:
        if self._closed:
            return
        s = self._state
        settings = s.settings

        # Game clock
        if s.timer_running and s.is_playing:
            if self._clock_handle is None:
                self._clock_handle = self._arm(
                    self._timing.clock_tick_ms, self._on_clock_tick
                )
        else:
            self._cancel_clock()

        # Turn clock, re-armed for every new turn
        turn_key = None
        if settings.turn_time_limit_enabled and s.timer_running and s.is_playing:
            turn_key = (s.side_to_move, s.turn_start_time)
        if turn_key != self._turn_key:
            self._cancel_turn()
            self._turn_key = turn_key
        if turn_key is not None and self._turn_handle is None:
            self._turn_handle = self._arm(
                self._timing.turn_tick_ms, self._on_turn_tick
            )

        # Pending AI move, one per AI turn
        ai_key = None
        if s.is_playing and settings.ai_enabled and s.side_to_move == settings.ai_side:
            ai_key = (s.move_count, s.side_to_move, s.turn_start_time, s.game_start_time)
        if ai_key != self._ai_key:
            self._cancel_ai()
            self._ai_key = ai_key
            if ai_key is not None:
                logger.debug("AI move scheduled in %d ms", self._timing.ai_move_delay_ms)
                self._ai_handle = self._arm(
                    self._timing.ai_move_delay_ms, self._on_ai_move
                )

    def _arm(self, delay_ms: float, callback: Callable[[list], None]) -> TimerHandle:
        """Schedule *callback* with a holder that will contain its own handle.

        Must be called with the lock held. Callbacks act only while their
        handle is still the one the controller owns.
        """
        holder: list[TimerHandle] = []
        handle = self._scheduler.call_later(delay_ms, lambda: callback(holder))
        holder.append(handle)
        return handle

    @staticmethod
    def _is_current(holder: list, owned: TimerHandle | None) -> bool:
        return bool(holder) and holder[0] is owned and not owned.cancelled

    def _on_clock_tick(self, holder: list) -> None:
        with self._lock:
            if self._closed or not self._is_current(holder, self._clock_handle):
                return
            self._clock_handle = None
            self.dispatch(act.TickClock(self._scheduler.now()))

    def _on_turn_tick(self, holder: list) -> None:
        with self._lock:
            if self._closed or not self._is_current(holder, self._turn_handle):
                return
            self._turn_handle = None
            now = self._scheduler.now()
            state = self.dispatch(act.TickTurnClock(now))
            if state.is_playing and state.turn_time_remaining <= 0:
                logger.info("Turn time expired for %s", state.side_to_move.value)
                self.dispatch(act.ExpireTurn(now))

    def _on_ai_move(self, holder: list) -> None:
        with self._lock:
            if self._closed or not self._is_current(holder, self._ai_handle):
                return
            self._ai_handle = None
            before = self._state
            after = self.dispatch(act.MakeAIMove(self._scheduler.now(), self._rng))
            if after is before:
                logger.debug("AI had no move for %s", before.side_to_move.value)

    def _cancel_clock(self) -> None:
        if self._clock_handle is not None:
            self._clock_handle.cancel()
            self._clock_handle = None

    def _cancel_turn(self) -> None:
        if self._turn_handle is not None:
            self._turn_handle.cancel()
            self._turn_handle = None

    def _cancel_ai(self) -> None:
        if self._ai_handle is not None:
            self._ai_handle.cancel()
            self._ai_handle = None

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    @staticmethod
    def _log_transition(old: GameState, new: GameState, action: act.Action) -> None:
        move = new.last_move
        if new.move_count > old.move_count and move is not None:
            logger.debug(
                "%s %s %s -> %s",
                move.piece.side.value, move.kind.value, tuple(move.fr), tuple(move.to),
            )
        if old.is_playing and not new.is_playing:
            logger.info(
                "Game over: %s after %d moves", new.status.value, new.move_count
            )
