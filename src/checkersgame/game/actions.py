"""Actions accepted by the game reducer.

Timestamps (``at``) are milliseconds on whatever clock the caller uses;
the reducer never reads a clock itself.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Union

from .models import Position, Side


@dataclass(frozen=True)
class SelectSquare:
    position: Position
    at: float | None = None


@dataclass(frozen=True)
class MoveTo:
    position: Position
    at: float = 0.0


@dataclass(frozen=True)
class DragMove:
    fr: Position
    to: Position
    at: float = 0.0


@dataclass(frozen=True)
class ResetGame:
    pass


@dataclass(frozen=True)
class StartClock:
    at: float


@dataclass(frozen=True)
class TickClock:
    at: float


@dataclass(frozen=True)
class StartTurnClock:
    at: float


@dataclass(frozen=True)
class TickTurnClock:
    at: float


@dataclass(frozen=True)
class ToggleAI:
    enabled: bool
    side: Side | None = None


@dataclass(frozen=True)
class ToggleTurnTimeLimit:
    enabled: bool


@dataclass(frozen=True)
class MakeAIMove:
    at: float = 0.0
    rng: random.Random | None = field(default=None, compare=False)


@dataclass(frozen=True)
class ExpireTurn:
    at: float


Action = Union[
    SelectSquare,
    MoveTo,
    DragMove,
    ResetGame,
    StartClock,
    TickClock,
    StartTurnClock,
    TickTurnClock,
    ToggleAI,
    ToggleTurnTimeLimit,
    MakeAIMove,
    ExpireTurn,
]
