"""Checkers board logic — setup and legal-move generation.

Single jumps only: a capture is a two-square diagonal hop over an adjacent
enemy piece onto an empty square. What happens after a capture (bonus turn
or same-piece continuation) is decided in moves.py; here it only narrows
which pieces may move.

Mandatory capture: if any piece of the side to move can capture, only
capturing pieces may move, and only by capturing.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import (
    BOARD_SIZE,
    Cell,
    ContinuationRule,
    GameState,
    Piece,
    Position,
    Side,
)

_COL_DIRECTIONS = (-1, 1)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_capture(fr: tuple[int, int], to: tuple[int, int]) -> bool:
    return abs(to[0] - fr[0]) == 2 and abs(to[1] - fr[1]) == 2


# ── Setup ────────────────────────────────────────────────────────


def create_initial_pieces() -> tuple[Piece, ...]:
    """Twelve men per side on the dark squares of each side's three back rows."""
    pieces: list[Piece] = []
    for side, rows in ((Side.RED, range(0, 3)), (Side.BLACK, range(5, 8))):
        index = 0
        for r in rows:
            for c in range(BOARD_SIZE):
                if (r + c) % 2 != 1:
                    continue  # light square
                pieces.append(Piece(f"{side.value}-{index}", side, Position(r, c)))
                index += 1
    return tuple(pieces)


def build_board(pieces: Iterable[Piece]) -> tuple[tuple[Cell, ...], ...]:
    """Derive the 8×8 cell grid from the piece list."""
    by_pos = {p.position: p for p in pieces}
    return tuple(
        tuple(
            Cell(Position(r, c), by_pos.get((r, c)))
            for c in range(BOARD_SIZE)
        )
        for r in range(BOARD_SIZE)
    )


# ── Move generation ──────────────────────────────────────────────


def _row_directions(piece: Piece) -> tuple[int, ...]:
    if piece.is_king:
        return (-1, 1)
    return (piece.side.direction,)


def _candidate_moves(
    state: GameState, pos: Position, piece: Piece
) -> tuple[list[Position], list[Position]]:
    """Return (captures, simple moves) for *piece* ignoring side-wide rules."""
    captures: list[Position] = []
    simple: list[Position] = []
    for dr in _row_directions(piece):
        for dc in _COL_DIRECTIONS:
            r, c = pos.row + dr, pos.col + dc
            if not in_bounds(r, c):
                continue
            target = state.board[r][c].occupant
            if target is None:
                simple.append(Position(r, c))
                continue
            if target.side == piece.side:
                continue  # can't jump own piece
            land_r, land_c = r + dr, c + dc
            if in_bounds(land_r, land_c) and state.board[land_r][land_c].occupant is None:
                captures.append(Position(land_r, land_c))
    return captures, simple


def _own_piece(state: GameState, position) -> tuple[Position, Piece] | None:
    """Validate *position* and return it with the side-to-move's piece on it."""
    try:
        row, col = position
    except (TypeError, ValueError):
        return None
    if not isinstance(row, int) or not isinstance(col, int) or not in_bounds(row, col):
        return None
    piece = state.board[row][col].occupant
    if piece is None or piece.side != state.side_to_move:
        return None
    return Position(row, col), piece


def capture_destinations(state: GameState, position) -> list[Position]:
    """Jump landings for the piece on *position*, ignoring whose turn it is."""
    try:
        row, col = position
    except (TypeError, ValueError):
        return []
    if not isinstance(row, int) or not isinstance(col, int) or not in_bounds(row, col):
        return []
    piece = state.board[row][col].occupant
    if piece is None:
        return []
    captures, _ = _candidate_moves(state, Position(row, col), piece)
    return captures


def pieces_with_captures(state: GameState) -> list[Position]:
    """Positions of every side-to-move piece that has a capture available."""
    return [
        p.position
        for p in state.pieces
        if p.side == state.side_to_move and capture_destinations(state, p.position)
    ]


def legal_destinations(state: GameState, position) -> list[Position]:
    """Legal landing squares for the piece on *position*.

    Empty for out-of-range input, empty squares, and pieces of the side not
    to move. Never raises.
    """
    found = _own_piece(state, position)
    if found is None:
        return []
    pos, piece = found

    if (
        state.settings.continuation_rule is ContinuationRule.SAME_PIECE
        and state.must_continue_from is not None
    ):
        if pos != state.must_continue_from:
            return []
        captures, _ = _candidate_moves(state, pos, piece)
        return captures

    capturers = pieces_with_captures(state)
    if capturers:
        if pos not in capturers:
            return []
        captures, _ = _candidate_moves(state, pos, piece)
        return captures

    _, simple = _candidate_moves(state, pos, piece)
    return simple


def all_legal_moves(state: GameState) -> list[tuple[Position, Position]]:
    """Every legal (from, to) pair for the side to move, in board order."""
    moves: list[tuple[Position, Position]] = []
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            piece = state.board[r][c].occupant
            if piece is None or piece.side != state.side_to_move:
                continue
            fr = Position(r, c)
            moves.extend((fr, to) for to in legal_destinations(state, fr))
    return moves


def has_any_legal_move(state: GameState) -> bool:
    return any(
        legal_destinations(state, p.position)
        for p in state.pieces
        if p.side == state.side_to_move
    )


# ── Inspection ───────────────────────────────────────────────────


def count_pieces(state: GameState) -> dict[str, int]:
    """Count remaining pieces for each side."""
    counts = {side.value: 0 for side in Side}
    for p in state.pieces:
        counts[p.side.value] += 1
    return counts


_SYMBOLS = {
    (Side.RED, False): "r",
    (Side.RED, True): "R",
    (Side.BLACK, False): "b",
    (Side.BLACK, True): "B",
}


def piece_symbol(piece: Piece | None) -> str:
    if piece is None:
        return "."
    return _SYMBOLS[(piece.side, piece.is_king)]


def render_board(state: GameState) -> str:
    """Render an ASCII board. r/b = men, R/B = kings."""
    lines = ["     0   1   2   3   4   5   6   7"]
    for r in range(BOARD_SIZE):
        cells = [f" {piece_symbol(cell.occupant)}" for cell in state.board[r]]
        lines.append(f"{r}   " + " | ".join(cells))
        if r < BOARD_SIZE - 1:
            lines.append("    " + "----+" * 7 + "----")
    return "\n".join(lines)
