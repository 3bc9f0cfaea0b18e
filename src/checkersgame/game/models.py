"""Checkers data model — positions, pieces, cells, move records, game state.

All records are frozen and all containers are tuples, so a GameState can be
shared freely: every transition builds a new value and never touches the
old one.

Coordinates are (row, col) on an 8×8 grid. Dark (playable) squares satisfy
(row + col) % 2 == 1.

Red starts on rows 0-2 and moves DOWN the board (increasing row).
Black starts on rows 5-7 and moves UP the board (decreasing row).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

BOARD_SIZE = 8
DEFAULT_TURN_TIME_MS = 5000


class Position(NamedTuple):
    row: int
    col: int

    @property
    def is_dark(self) -> bool:
        return (self.row + self.col) % 2 == 1


class Side(str, Enum):
    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> Side:
        return Side.BLACK if self is Side.RED else Side.RED

    @property
    def direction(self) -> int:
        """Forward row direction for a man of this side."""
        return 1 if self is Side.RED else -1

    @property
    def promotion_row(self) -> int:
        return BOARD_SIZE - 1 if self is Side.RED else 0


class GameStatus(str, Enum):
    PLAYING = "playing"
    RED_WINS = "red_wins"
    BLACK_WINS = "black_wins"
    DRAW = "draw"

    @classmethod
    def win_for(cls, side: Side) -> GameStatus:
        return cls.RED_WINS if side is Side.RED else cls.BLACK_WINS


class MoveKind(str, Enum):
    MOVE = "move"
    CAPTURE = "capture"
    CONTINUATION_MOVE = "continuation_move"


class ContinuationRule(str, Enum):
    """What happens after a capture.

    BONUS_TURN: the capturing side moves again with any piece; a further
    capture renews the bonus, a quiet move ends it.
    SAME_PIECE: the capturing piece must keep jumping while it can.
    """

    BONUS_TURN = "bonus_turn"
    SAME_PIECE = "same_piece"


@dataclass(frozen=True)
class Piece:
    id: str
    side: Side
    position: Position
    is_king: bool = False


@dataclass(frozen=True)
class Cell:
    position: Position
    occupant: Piece | None = None

    @property
    def is_dark(self) -> bool:
        return self.position.is_dark


@dataclass(frozen=True)
class MoveRecord:
    """One applied move. *piece* is the mover as it stood before moving."""

    id: str
    fr: Position
    to: Position
    kind: MoveKind
    piece: Piece
    captured: tuple[Piece, ...] = ()
    timestamp: float = 0.0

    @property
    def promoted(self) -> bool:
        return not self.piece.is_king and self.to.row == self.piece.side.promotion_row


@dataclass(frozen=True)
class GameSettings:
    ai_enabled: bool = True
    ai_side: Side = Side.BLACK
    turn_time_limit_enabled: bool = False
    turn_time_ms: int = DEFAULT_TURN_TIME_MS
    starting_side: Side = Side.RED
    continuation_rule: ContinuationRule = ContinuationRule.BONUS_TURN


@dataclass(frozen=True)
class GameState:
    board: tuple[tuple[Cell, ...], ...]
    pieces: tuple[Piece, ...]
    side_to_move: Side
    settings: GameSettings = field(default_factory=GameSettings)
    selected: Position | None = None
    highlighted: tuple[Position, ...] = ()
    history: tuple[MoveRecord, ...] = ()
    move_count: int = 0
    status: GameStatus = GameStatus.PLAYING
    winner: Side | None = None
    must_continue_from: Position | None = None
    bonus_turn: bool = False
    # Clocks, all in milliseconds
    game_start_time: float | None = None
    game_time: float = 0.0
    timer_running: bool = False
    turn_start_time: float | None = None
    turn_time_remaining: float = DEFAULT_TURN_TIME_MS

    def cell(self, pos: tuple[int, int]) -> Cell:
        return self.board[pos[0]][pos[1]]

    def piece_at(self, pos: tuple[int, int]) -> Piece | None:
        return self.board[pos[0]][pos[1]].occupant

    @property
    def last_move(self) -> MoveRecord | None:
        return self.history[-1] if self.history else None

    @property
    def is_playing(self) -> bool:
        return self.status is GameStatus.PLAYING
