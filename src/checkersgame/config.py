"""Game configuration loader."""

import yaml
from dataclasses import dataclass, field
from pathlib import Path

from checkersgame.game.models import (
    DEFAULT_TURN_TIME_MS,
    ContinuationRule,
    GameSettings,
    Side,
)

DEFAULT_CLOCK_TICK_MS = 100
DEFAULT_TURN_TICK_MS = 100
DEFAULT_AI_MOVE_DELAY_MS = 500


@dataclass
class TimingConfig:
    clock_tick_ms: int = DEFAULT_CLOCK_TICK_MS
    turn_tick_ms: int = DEFAULT_TURN_TICK_MS
    ai_move_delay_ms: int = DEFAULT_AI_MOVE_DELAY_MS


@dataclass
class SelfPlayConfig:
    games: int = 1
    max_moves: int = 300  # stop and report unfinished after this many moves
    step_ms: int = 100    # virtual time advanced per runner step


@dataclass
class GameConfig:
    name: str = "checkers"
    seed: int = 0
    settings: GameSettings = field(default_factory=GameSettings)
    timing: TimingConfig = field(default_factory=TimingConfig)
    selfplay: SelfPlayConfig = field(default_factory=SelfPlayConfig)
    output_dir: Path | None = None


def _side(value: str, key: str) -> Side:
    try:
        return Side(str(value).lower())
    except ValueError:
        raise ValueError(
            f"{key}: unknown side {value!r}. Use one of {[s.value for s in Side]}"
        ) from None


def _rule(value: str) -> ContinuationRule:
    try:
        return ContinuationRule(str(value).lower())
    except ValueError:
        raise ValueError(
            f"game.continuation_rule: unknown rule {value!r}. "
            f"Use one of {[r.value for r in ContinuationRule]}"
        ) from None


def load_config(path: Path) -> GameConfig:
    """Load game config from YAML file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    game = raw.get("game", {})
    ai = raw.get("ai", {})
    clock = raw.get("clock", {})
    sp = raw.get("selfplay", {})

    settings = GameSettings(
        ai_enabled=ai.get("enabled", True),
        ai_side=_side(ai.get("side", "black"), "ai.side"),
        turn_time_limit_enabled=clock.get("turn_time_limit", False),
        turn_time_ms=clock.get("turn_time_ms", DEFAULT_TURN_TIME_MS),
        starting_side=_side(game.get("starting_side", "red"), "game.starting_side"),
        continuation_rule=_rule(game.get("continuation_rule", "bonus_turn")),
    )

    output_dir = raw.get("output_dir")
    return GameConfig(
        name=game.get("name", "checkers"),
        seed=game.get("seed", 0),
        settings=settings,
        timing=TimingConfig(
            clock_tick_ms=clock.get("tick_ms", DEFAULT_CLOCK_TICK_MS),
            turn_tick_ms=clock.get("turn_tick_ms", DEFAULT_TURN_TICK_MS),
            ai_move_delay_ms=ai.get("move_delay_ms", DEFAULT_AI_MOVE_DELAY_MS),
        ),
        selfplay=SelfPlayConfig(
            games=sp.get("games", 1),
            max_moves=sp.get("max_moves", 300),
            step_ms=sp.get("step_ms", 100),
        ),
        output_dir=Path(output_dir) if output_dir else None,
    )
