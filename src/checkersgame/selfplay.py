"""SelfPlayRunner — plays headless games between the AI and a scripted player.

Each game runs on a ManualScheduler so timers (AI delay, game clock, turn
clock) behave exactly as they would live, just in virtual time. The side
the controller's AI owns is moved by the controller itself; the other side
is moved by the runner through the same select → move_to path a UI uses.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from checkersgame.config import GameConfig
from checkersgame.core.clock import ManualScheduler
from checkersgame.core.seed import SeedManager
from checkersgame.core.telemetry import TelemetryLogger
from checkersgame.game.ai import select_move
from checkersgame.game.controller import GameController
from checkersgame.game.models import GameState

logger = logging.getLogger(__name__)

_STEP_LIMIT_FACTOR = 200  # runner steps allowed per move before giving up


@dataclass
class GameResult:
    """Outcome of a single self-play game."""

    game_id: str
    status: str
    winner: str | None
    moves: int
    finished: bool
    game_time_ms: float
    final_state: GameState = field(repr=False)
    telemetry_path: Path | None = None


@dataclass
class SelfPlayResult:
    """Aggregate result of a self-play run."""

    games: list[GameResult]
    telemetry_dir: Path | None

    @property
    def tallies(self) -> dict[str, int]:
        counts = Counter(g.status if g.finished else "unfinished" for g in self.games)
        return dict(counts)


class SelfPlayRunner:
    """Runs the self-play games described by a GameConfig."""

    def __init__(self, config: GameConfig, write_telemetry: bool = True) -> None:
        self.config = config
        self.seed_mgr = SeedManager(config.seed)
        self.telemetry_dir = self._resolve_telemetry_dir() if write_telemetry else None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> SelfPlayResult:
        games = [
            self.play_game(n) for n in range(1, self.config.selfplay.games + 1)
        ]
        return SelfPlayResult(games=games, telemetry_dir=self.telemetry_dir)

    def play_game(self, game_number: int) -> GameResult:
        cfg = self.config
        game_id = f"{cfg.name}-g{game_number}"
        scheduler = ManualScheduler()
        ai_rng = self.seed_mgr.rng_for(game_number, "ai")
        player_rng = self.seed_mgr.rng_for(game_number, "player")

        telemetry = None
        if self.telemetry_dir is not None:
            telemetry = TelemetryLogger(self.telemetry_dir, game_id)

        with GameController(
            settings=cfg.settings,
            scheduler=scheduler,
            timing=cfg.timing,
            rng=ai_rng,
        ) as controller:
            if telemetry is not None:
                controller.subscribe(telemetry.on_transition)

            max_moves = cfg.selfplay.max_moves
            steps_left = max(1, max_moves) * _STEP_LIMIT_FACTOR
            while controller.state.is_playing and controller.state.move_count < max_moves:
                if steps_left <= 0:
                    logger.warning("%s: step limit reached, abandoning game", game_id)
                    break
                steps_left -= 1
                if not self._ai_owns_turn(controller.state):
                    self._play_scripted_move(controller, player_rng)
                scheduler.advance(cfg.selfplay.step_ms)

            final = controller.state

        finished = not final.is_playing
        if telemetry is not None:
            telemetry.finalize_game(final, extra={"finished": finished})
        logger.info(
            "%s: %s after %d moves",
            game_id, final.status.value if finished else "unfinished", final.move_count,
        )
        return GameResult(
            game_id=game_id,
            status=final.status.value,
            winner=final.winner.value if final.winner else None,
            moves=final.move_count,
            finished=finished,
            game_time_ms=final.game_time,
            final_state=final,
            telemetry_path=telemetry.file_path if telemetry else None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_telemetry_dir(self) -> Path:
        """Create and return the telemetry output directory."""
        if self.config.output_dir:
            d = Path(self.config.output_dir) / "telemetry"
        else:
            d = Path("output") / "telemetry"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @staticmethod
    def _ai_owns_turn(state: GameState) -> bool:
        settings = state.settings
        return settings.ai_enabled and state.side_to_move == settings.ai_side

    @staticmethod
    def _play_scripted_move(controller: GameController, rng) -> None:
        choice = select_move(controller.state, rng)
        if choice is None:
            return
        fr, to = choice
        controller.select(fr)
        controller.move_to(to)
