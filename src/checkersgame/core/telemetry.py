"""TelemetryLogger — JSONL game logging.

One logger per game. Writes one JSONL line per applied move plus a game
summary as the final line. All entries include schema version and game ID.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path

import checkersgame
from checkersgame.game.board import render_board
from checkersgame.game.models import GameState, MoveRecord
from checkersgame.game.stats import compute_stats

_SCHEMA_VERSION = "1.0.0"


@dataclass
class MoveEntry:
    """One applied move."""

    move_number: int
    side: str
    fr: list[int]
    to: list[int]
    kind: str
    captured: list[str]
    promoted: bool
    bonus_turn: bool
    side_to_move_after: str
    game_time_ms: float
    board: str

    @classmethod
    def from_transition(cls, record: MoveRecord, after: GameState) -> "MoveEntry":
        return cls(
            move_number=int(record.id.rsplit("-", 1)[-1]),
            side=record.piece.side.value,
            fr=list(record.fr),
            to=list(record.to),
            kind=record.kind.value,
            captured=[p.id for p in record.captured],
            promoted=record.promoted,
            bonus_turn=after.bonus_turn,
            side_to_move_after=after.side_to_move.value,
            game_time_ms=after.game_time,
            board=render_board(after),
        )


class TelemetryLogger:
    """Writes JSONL telemetry for a single game."""

    def __init__(self, output_dir: Path, game_id: str):
        self._output_dir = Path(output_dir)
        self._game_id = game_id
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._output_dir / f"{game_id}.jsonl"

    @property
    def file_path(self) -> Path:
        return self._file_path

    def log_move(self, entry: MoveEntry) -> None:
        record = asdict(entry)
        record["schema_version"] = _SCHEMA_VERSION
        record["game_id"] = self._game_id
        record["timestamp"] = datetime.now(timezone.utc).isoformat()
        self._append(record)

    def on_transition(self, old: GameState, new: GameState) -> None:
        """Controller listener: log every move appended between *old* and *new*."""
        for record in new.history[len(old.history):]:
            self.log_move(MoveEntry.from_transition(record, new))

    def finalize_game(self, state: GameState, extra: dict | None = None) -> None:
        record = {
            "schema_version": _SCHEMA_VERSION,
            "record_type": "game_summary",
            "game_id": self._game_id,
            "status": state.status.value,
            "winner": state.winner.value if state.winner else None,
            "moves": state.move_count,
            "stats": compute_stats(state).as_dict(),
            "engine_version": checkersgame.__version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if extra:
            record.update(extra)
        self._append(record)

    def _append(self, record: dict) -> None:
        with open(self._file_path, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
