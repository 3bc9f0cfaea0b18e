"""Game statistics for score panels and game summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .models import GameState, Piece, Side


@dataclass(frozen=True)
class GameStats:
    red_pieces: int
    black_pieces: int
    red_kings: int
    black_kings: int
    total_moves: int
    game_time: float
    # Pieces each side has lost, in capture order
    captured: Mapping[Side, tuple[Piece, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def as_dict(self) -> dict:
        return {
            "red_pieces": self.red_pieces,
            "black_pieces": self.black_pieces,
            "red_kings": self.red_kings,
            "black_kings": self.black_kings,
            "total_moves": self.total_moves,
            "game_time_ms": self.game_time,
            "captured": {
                side.value: [p.id for p in pieces]
                for side, pieces in self.captured.items()
            },
        }


def compute_stats(state: GameState) -> GameStats:
    def _count(side: Side, kings_only: bool = False) -> int:
        return sum(
            1 for p in state.pieces
            if p.side == side and (p.is_king or not kings_only)
        )

    lost: dict[Side, list[Piece]] = {side: [] for side in Side}
    for record in state.history:
        for piece in record.captured:
            lost[piece.side].append(piece)

    return GameStats(
        red_pieces=_count(Side.RED),
        black_pieces=_count(Side.BLACK),
        red_kings=_count(Side.RED, kings_only=True),
        black_kings=_count(Side.BLACK, kings_only=True),
        total_moves=state.move_count,
        game_time=state.game_time,
        captured=MappingProxyType({side: tuple(pieces) for side, pieces in lost.items()}),
    )
