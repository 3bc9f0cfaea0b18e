"""Tests for board setup and legal-move generation."""

from dataclasses import replace

import pytest
from checkersgame.game.board import (
    all_legal_moves,
    build_board,
    capture_destinations,
    count_pieces,
    create_initial_pieces,
    has_any_legal_move,
    legal_destinations,
    pieces_with_captures,
    render_board,
)
from checkersgame.game.models import (
    ContinuationRule,
    GameSettings,
    GameState,
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


def _dests(state, pos) -> set:
    return set(legal_destinations(state, pos))


# ------------------------------------------------------------------
# Board setup
# ------------------------------------------------------------------

class TestBoardSetup:
    def test_initial_board_dimensions(self, game):
        assert len(game.board) == 8
        assert all(len(row) == 8 for row in game.board)

    def test_red_pieces_in_rows_0_to_2(self, game):
        for r in range(3):
            for c in range(8):
                occupant = game.board[r][c].occupant
                if (r + c) % 2 == 1:
                    assert occupant is not None and occupant.side is RED
                else:
                    assert occupant is None

    def test_black_pieces_in_rows_5_to_7(self, game):
        for r in range(5, 8):
            for c in range(8):
                occupant = game.board[r][c].occupant
                if (r + c) % 2 == 1:
                    assert occupant is not None and occupant.side is BLACK
                else:
                    assert occupant is None

    def test_middle_rows_empty(self, game):
        for r in range(3, 5):
            assert all(cell.occupant is None for cell in game.board[r])

    def test_12_pieces_each_no_kings(self, game):
        assert count_pieces(game) == {"red": 12, "black": 12}
        assert not any(p.is_king for p in game.pieces)

    def test_piece_ids_unique(self):
        pieces = create_initial_pieces()
        assert len({p.id for p in pieces}) == 24

    def test_cells_match_piece_list(self, game):
        occupied = [c.occupant for row in game.board for c in row if c.occupant]
        assert len(occupied) == len(game.pieces)
        for p in game.pieces:
            assert game.cell(p.position).occupant.id == p.id
            assert p.position.is_dark

    def test_dark_flag(self, game):
        assert game.board[0][1].is_dark
        assert not game.board[0][0].is_dark


# ------------------------------------------------------------------
# Move generation
# ------------------------------------------------------------------

class TestMoveGeneration:
    def test_initial_red_moves(self, game):
        # Only row 2 can move: 4 pieces, 7 open destinations in total
        assert len(all_legal_moves(game)) == 7

    def test_initial_black_moves(self, game):
        assert len(all_legal_moves(replace(game, side_to_move=BLACK))) == 7

    def test_back_rows_blocked(self, game):
        assert legal_destinations(game, (1, 0)) == []
        assert legal_destinations(game, (0, 1)) == []

    def test_red_moves_down(self):
        state = _state(_piece(RED, 3, 2))
        assert _dests(state, (3, 2)) == {(4, 1), (4, 3)}

    def test_black_moves_up(self):
        state = _state(_piece(BLACK, 4, 3), side=BLACK)
        assert _dests(state, (4, 3)) == {(3, 2), (3, 4)}

    def test_king_moves_all_directions(self):
        state = _state(_piece(RED, 4, 3, king=True))
        assert _dests(state, (4, 3)) == {(3, 2), (3, 4), (5, 2), (5, 4)}

    def test_edge_piece_limited_moves(self):
        state = _state(_piece(RED, 3, 0))
        assert legal_destinations(state, (3, 0)) == [(4, 1)]

    def test_simple_moves_advance_forward(self, game):
        for fr, to in all_legal_moves(game):
            assert to.row == fr.row + RED.direction
            assert abs(to.col - fr.col) == 1

    def test_idempotent(self, game):
        assert legal_destinations(game, (2, 3)) == legal_destinations(game, (2, 3))


class TestNoMoves:
    def test_empty_square(self, game):
        assert legal_destinations(game, (3, 2)) == []

    def test_opponent_piece(self, game):
        assert legal_destinations(game, (5, 0)) == []

    @pytest.mark.parametrize("pos", [(8, 0), (-1, 2), (3, 99), ("a", 1), None, (1,)])
    def test_bad_positions_never_raise(self, game, pos):
        assert legal_destinations(game, pos) == []

    def test_man_on_far_row_is_stuck(self):
        state = _state(_piece(RED, 7, 0))
        assert legal_destinations(state, (7, 0)) == []
        assert not has_any_legal_move(state)


# ------------------------------------------------------------------
# Captures
# ------------------------------------------------------------------

class TestCaptures:
    def test_simple_capture(self):
        state = _state(_piece(RED, 3, 2), _piece(BLACK, 4, 3))
        assert legal_destinations(state, (3, 2)) == [(5, 4)]

    def test_capture_suppresses_own_simple_moves(self):
        state = _state(_piece(RED, 3, 2), _piece(BLACK, 4, 3))
        assert (4, 1) not in legal_destinations(state, (3, 2))

    def test_mandatory_capture_blocks_other_pieces(self):
        state = _state(
            _piece(RED, 3, 2, 0),
            _piece(RED, 3, 6, 1),
            _piece(BLACK, 4, 3),
        )
        assert legal_destinations(state, (3, 6)) == []
        assert pieces_with_captures(state) == [(3, 2)]

    def test_capture_destinations_exactly_two_away(self):
        state = _state(
            _piece(RED, 3, 2, king=True),
            _piece(BLACK, 4, 3, 0),
            _piece(BLACK, 2, 1, 1),
        )
        for to in legal_destinations(state, (3, 2)):
            assert abs(to.row - 3) == 2 and abs(to.col - 2) == 2

    def test_cant_jump_own_piece(self):
        state = _state(_piece(RED, 3, 2, 0), _piece(RED, 4, 3, 1))
        assert legal_destinations(state, (3, 2)) == [(4, 1)]

    def test_cant_jump_to_occupied(self):
        state = _state(
            _piece(RED, 3, 2),
            _piece(BLACK, 4, 3, 0),
            _piece(BLACK, 5, 4, 1),
        )
        assert legal_destinations(state, (3, 2)) == [(4, 1)]

    def test_cant_jump_off_board(self):
        state = _state(_piece(RED, 5, 6), _piece(BLACK, 6, 7))
        assert legal_destinations(state, (5, 6)) == [(6, 5)]

    def test_king_captures_backward(self):
        state = _state(_piece(RED, 5, 4, king=True), _piece(BLACK, 4, 3))
        assert legal_destinations(state, (5, 4)) == [(3, 2)]

    def test_man_cannot_capture_backward(self):
        state = _state(_piece(RED, 5, 4), _piece(BLACK, 4, 3))
        assert _dests(state, (5, 4)) == {(6, 3), (6, 5)}

    def test_capture_destinations_ignore_turn(self):
        state = _state(_piece(RED, 3, 2), _piece(BLACK, 4, 3), side=BLACK)
        assert capture_destinations(state, (3, 2)) == [(5, 4)]
        assert legal_destinations(state, (3, 2)) == []


# ------------------------------------------------------------------
# Continuation restrictions
# ------------------------------------------------------------------

class TestContinuation:
    def test_same_piece_marker_restricts_to_one_piece(self):
        state = _state(
            _piece(RED, 5, 4, 0),
            _piece(RED, 0, 7, 1),
            _piece(BLACK, 6, 5),
            continuation_rule=ContinuationRule.SAME_PIECE,
        )
        state = replace(state, must_continue_from=Position(5, 4))
        assert legal_destinations(state, (0, 7)) == []
        assert legal_destinations(state, (5, 4)) == [(7, 6)]

    def test_bonus_turn_leaves_every_piece_eligible(self):
        state = _state(_piece(RED, 2, 1, 0), _piece(RED, 5, 4, 1), _piece(BLACK, 7, 0))
        state = replace(state, bonus_turn=True)
        assert legal_destinations(state, (2, 1)) != []
        assert legal_destinations(state, (5, 4)) != []

    def test_bonus_turn_still_mandatory_capture(self):
        state = _state(
            _piece(RED, 2, 1, 0),
            _piece(RED, 5, 4, 1),
            _piece(BLACK, 6, 5),
        )
        state = replace(state, bonus_turn=True)
        assert legal_destinations(state, (2, 1)) == []
        assert legal_destinations(state, (5, 4)) == [(7, 6)]


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

class TestRenderBoard:
    def test_render_has_column_headers(self, game):
        assert "0   1   2   3   4   5   6   7" in render_board(game)

    def test_render_shows_pieces(self, game):
        text = render_board(game)
        assert "r" in text
        assert "b" in text

    def test_render_shows_kings(self):
        text = render_board(_state(_piece(RED, 4, 3, king=True)))
        assert "R" in text
