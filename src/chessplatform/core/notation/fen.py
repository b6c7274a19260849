"""FEN parsing and serialization."""

from __future__ import annotations

from chessplatform.core.board import Board
from chessplatform.core.enums import CastlingRights, Color
from chessplatform.core.piece import Piece
from chessplatform.core.position import Position
from chessplatform.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


class FenParseError(ValueError):
    """Raised when FEN text does not describe a complete position."""


def _parse_int(text: str, field_name: str, minimum: int) -> int:
    if not (text.isascii() and text.isdigit()):
        raise FenParseError(f"Invalid FEN {field_name}: {text!r}")
    value = int(text)
    if value < minimum:
        raise FenParseError(f"Invalid FEN {field_name}: {text!r}")
    return value


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`."""
    parts = fen.split()
    if len(parts) != 6:
        raise FenParseError(f"Invalid FEN (need 6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part, halfmove_part, fullmove_part = parts

    # 1. Piece placement (row 0 = rank 8, same order as the text)
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FenParseError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    cells: list[Piece | None] = [None] * 64
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isascii() and ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise FenParseError(f"Invalid FEN digit {ch!r}: {fen!r}")
                col += step
            else:
                if col >= 8:
                    raise FenParseError(f"Invalid FEN rank width: {fen!r}")
                try:
                    cells[make_square(row, col)] = Piece.from_char(ch)
                except ValueError as exc:
                    raise FenParseError(f"{exc}: {fen!r}") from exc
                col += 1
            if col > 8:
                raise FenParseError(f"Invalid FEN rank width: {fen!r}")
        if col != 8:
            raise FenParseError(f"Invalid FEN rank width: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise FenParseError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        seen: set[str] = set()
        for ch in castling_part:
            right = rights.get(ch)
            if right is None or ch in seen:
                raise FenParseError(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError as exc:
            raise FenParseError(f"Invalid FEN en-passant square: {ep_part!r}") from exc
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise FenParseError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # 5–6. Clocks
    halfmove = _parse_int(halfmove_part, "halfmove clock", 0)
    fullmove = _parse_int(fullmove_part, "fullmove number", 1)

    return Position(Board(cells), side, castling, ep, halfmove, fullmove)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for row in range(8):
        empty = 0
        text = ""
        for col in range(8):
            piece = pos.board[make_square(row, col)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    text += str(empty)
                    empty = 0
                text += str(piece)
        if empty:
            text += str(empty)
        rows.append(text)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"


def repetition_key(fen: str) -> str:
    """Placement, side, castling and en-passant fields of *fen*.

    Two positions with the same key are "the same position" for the
    repetition rule; the clocks are ignored.
    """
    return " ".join(fen.split()[:4])
