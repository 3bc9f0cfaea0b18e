"""Tests for the greedy AI move selector."""

import random
from dataclasses import replace

import pytest
from checkersgame.game.ai import score_move, select_move
from checkersgame.game.board import all_legal_moves, build_board, legal_destinations
from checkersgame.game.models import (
    ContinuationRule,
    GameSettings,
    GameState,
    GameStatus,
    Piece,
    Position,
    Side,
)

RED, BLACK = Side.RED, Side.BLACK


def _piece(side: Side, row: int, col: int, n: int = 0, king: bool = False) -> Piece:
    return Piece(f"{side.value}-{n}", side, Position(row, col), king)


def _state(*pieces: Piece, side: Side = RED, **settings) -> GameState:
    return GameState(
        board=build_board(pieces),
        pieces=tuple(pieces),
        side_to_move=side,
        settings=GameSettings(**settings),
    )


class TestScoring:
    def test_promotion_move_red(self):
        state = _state(_piece(RED, 6, 1))
        # advance 7 + king row 5 + center 2
        assert score_move(state, Position(6, 1), Position(7, 2)) == 14.0

    def test_promotion_move_black(self):
        state = _state(_piece(BLACK, 1, 2), side=BLACK)
        # advance 7 + king row 5 + center 1
        assert score_move(state, Position(1, 2), Position(0, 1)) == 13.0

    def test_capture_bonus(self):
        state = _state(_piece(RED, 3, 2), _piece(BLACK, 4, 3))
        # capture 10 + advance 5 + center 3
        assert score_move(state, Position(3, 2), Position(5, 4)) == 18.0

    def test_center_preferred(self):
        state = _state(_piece(RED, 2, 3))
        center = score_move(state, Position(2, 3), Position(3, 4))
        edge_state = _state(_piece(RED, 2, 1))
        edge = score_move(edge_state, Position(2, 1), Position(3, 0))
        assert center > edge


class TestSelectMove:
    def test_none_without_moves(self):
        assert select_move(_state(_piece(RED, 7, 0))) is None

    def test_none_when_game_over(self, game):
        assert select_move(replace(game, status=GameStatus.DRAW)) is None

    def test_returns_legal_move(self, game, rng):
        fr, to = select_move(game, rng)
        assert to in legal_destinations(game, fr)

    def test_capture_taken(self, rng):
        state = _state(_piece(RED, 3, 2, 0), _piece(RED, 2, 7, 1), _piece(BLACK, 4, 3))
        assert select_move(state, rng) == ((3, 2), (5, 4))

    @pytest.mark.parametrize("seed", range(10))
    def test_best_capture_always_chosen(self, seed):
        state = _state(
            _piece(RED, 2, 1, 0),
            _piece(RED, 4, 5, 1),
            _piece(BLACK, 3, 2, 0),
            _piece(BLACK, 5, 4, 1),
        )
        # (4,5)->(6,3) scores 19, (2,1)->(4,3) scores 17
        assert select_move(state, random.Random(seed)) == ((4, 5), (6, 3))

    @pytest.mark.parametrize("seed", range(20))
    def test_quiet_move_from_top_three(self, game, seed):
        scored = sorted(
            (score_move(game, fr, to) for fr, to in all_legal_moves(game)),
            reverse=True,
        )
        fr, to = select_move(game, random.Random(seed))
        assert score_move(game, fr, to) >= scored[2]

    def test_seeded_rng_is_deterministic(self, game):
        picks_a = [select_move(game, random.Random(7)) for _ in range(5)]
        picks_b = [select_move(game, random.Random(7)) for _ in range(5)]
        assert picks_a == picks_b

    def test_respects_same_piece_marker(self, rng):
        state = _state(
            _piece(RED, 4, 3, 0),
            _piece(RED, 0, 7, 1),
            _piece(BLACK, 5, 4),
            continuation_rule=ContinuationRule.SAME_PIECE,
        )
        state = replace(state, must_continue_from=Position(4, 3))
        assert select_move(state, rng) == ((4, 3), (6, 5))

    def test_plays_for_side_to_move(self, game, rng):
        black_turn = replace(game, side_to_move=BLACK)
        fr, _ = select_move(black_turn, rng)
        assert black_turn.piece_at(fr).side is BLACK
