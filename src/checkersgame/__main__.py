"""CLI entry point: python -m checkersgame [config.yaml]"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from checkersgame.config import GameConfig, load_config
from checkersgame.game.board import piece_symbol
from checkersgame.game.models import BOARD_SIZE, GameState, Side
from checkersgame.selfplay import SelfPlayResult, SelfPlayRunner

_PIECE_STYLES = {Side.RED: "bold red", Side.BLACK: "bold white"}


def build_board_panel(state: GameState) -> Panel:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(justify="right", style="dim")
    for _ in range(BOARD_SIZE):
        grid.add_column(justify="center")
    grid.add_row("", *[str(c) for c in range(BOARD_SIZE)])
    for r, row in enumerate(state.board):
        cells = []
        for cell in row:
            piece = cell.occupant
            style = _PIECE_STYLES[piece.side] if piece else ("dim" if cell.is_dark else "")
            cells.append(Text(piece_symbol(piece) if cell.is_dark or piece else " ", style=style))
        grid.add_row(str(r), *cells)
    return Panel(grid, title="[bold]Final board[/bold]", border_style="green", expand=False)


def build_results_table(result: SelfPlayResult) -> Table:
    table = Table(title="Self-play results")
    table.add_column("Game")
    table.add_column("Result")
    table.add_column("Moves", justify="right")
    table.add_column("Time", justify="right")
    for game in result.games:
        outcome = game.status if game.finished else "unfinished"
        table.add_row(
            game.game_id,
            outcome,
            str(game.moves),
            f"{game.game_time_ms / 1000:.1f}s",
        )
    return table


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="checkersgame",
        description="Headless checkers self-play: AI against a scripted player",
    )
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Path to game YAML config file (defaults built in)",
    )
    parser.add_argument("--games", type=int, default=None, help="Number of games to play")
    parser.add_argument("--seed", type=int, default=None, help="Base RNG seed")
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output directory (default: output/)",
    )
    parser.add_argument(
        "--no-telemetry",
        action="store_true",
        default=False,
        help="Skip writing JSONL telemetry",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config is not None:
        if not args.config.exists():
            print(f"Error: config file not found: {args.config}", file=sys.stderr)
            sys.exit(1)
        config = load_config(args.config)
    else:
        config = GameConfig()
    if args.games is not None:
        config.selfplay.games = args.games
    if args.seed is not None:
        config.seed = args.seed
    if args.output:
        config.output_dir = args.output

    console = Console()
    settings = config.settings
    console.print(
        f"Checkers: {config.name} (seed={config.seed}, games={config.selfplay.games}, "
        f"continuation={settings.continuation_rule.value})"
    )

    runner = SelfPlayRunner(config, write_telemetry=not args.no_telemetry)
    result = runner.run()

    console.print(build_results_table(result))
    if result.games:
        console.print(build_board_panel(result.games[-1].final_state))
    tallies = ", ".join(f"{k}: {v}" for k, v in sorted(result.tallies.items()))
    console.print(f"Totals: {tallies}")
    if result.telemetry_dir:
        console.print(f"Telemetry: {result.telemetry_dir}")


if __name__ == "__main__":
    main()
