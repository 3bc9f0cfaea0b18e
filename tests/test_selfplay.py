"""End-to-end self-play: full games driven through the controller in virtual time."""

import json

import pytest
from checkersgame.__main__ import build_results_table
from checkersgame.config import GameConfig, SelfPlayConfig
from checkersgame.game.models import ContinuationRule, GameSettings
from checkersgame.selfplay import SelfPlayRunner


def _config(tmp_path, **settings) -> GameConfig:
    return GameConfig(
        name="sp",
        seed=7,
        settings=GameSettings(**settings),
        selfplay=SelfPlayConfig(games=2, max_moves=300, step_ms=100),
        output_dir=tmp_path,
    )


def _assert_consistent(state):
    occupied = {
        (r, c): cell.occupant.id
        for r, row in enumerate(state.board)
        for c, cell in enumerate(row)
        if cell.occupant is not None
    }
    assert occupied == {tuple(p.position): p.id for p in state.pieces}
    assert len(state.history) == state.move_count


class TestSelfPlay:
    def test_games_run_to_completion_or_cap(self, tmp_path):
        result = SelfPlayRunner(_config(tmp_path)).run()
        assert len(result.games) == 2
        for game in result.games:
            _assert_consistent(game.final_state)
            assert game.moves > 0
            if game.finished:
                assert game.status != "playing"
                assert game.final_state.timer_running is False

    def test_telemetry_line_per_move_plus_summary(self, tmp_path):
        result = SelfPlayRunner(_config(tmp_path)).run()
        assert result.telemetry_dir == tmp_path / "telemetry"
        for game in result.games:
            lines = game.telemetry_path.read_text().strip().split("\n")
            assert len(lines) == game.moves + 1
            summary = json.loads(lines[-1])
            assert summary["record_type"] == "game_summary"
            assert summary["moves"] == game.moves

    def test_same_seed_same_games(self, tmp_path):
        a = SelfPlayRunner(_config(tmp_path / "a")).run()
        b = SelfPlayRunner(_config(tmp_path / "b")).run()
        assert [(g.status, g.moves) for g in a.games] == [(g.status, g.moves) for g in b.games]
        assert a.games[0].final_state.pieces == b.games[0].final_state.pieces

    def test_move_cap_reports_unfinished(self, tmp_path):
        config = _config(tmp_path)
        config.selfplay.max_moves = 5
        result = SelfPlayRunner(config, write_telemetry=False).run()
        assert result.telemetry_dir is None
        assert result.tallies == {"unfinished": 2}
        for game in result.games:
            assert game.finished is False
            assert game.moves >= 5
            assert game.telemetry_path is None

    @pytest.mark.parametrize("rule", list(ContinuationRule))
    def test_rules_with_turn_limit(self, tmp_path, rule):
        config = _config(
            tmp_path,
            continuation_rule=rule,
            turn_time_limit_enabled=True,
            turn_time_ms=1000,
        )
        for game in SelfPlayRunner(config, write_telemetry=False).run().games:
            _assert_consistent(game.final_state)

    def test_results_table_has_row_per_game(self, tmp_path):
        result = SelfPlayRunner(_config(tmp_path), write_telemetry=False).run()
        assert build_results_table(result).row_count == 2
