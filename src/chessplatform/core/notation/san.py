"""SAN (Standard Algebraic Notation) conversion."""

from __future__ import annotations

from chessplatform.core.enums import MoveFlag, PieceType
from chessplatform.core.move import Move
from chessplatform.core.move_generator import MoveGenerator
from chessplatform.core.position import Position
from chessplatform.core.types import FILES, file_of, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    """Origin file, rank or square needed to tell *move* apart from rivals."""
    board = position.board
    rivals = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and board[m.from_sq] is not None
        and board[m.from_sq].piece_type == piece_type  # type: ignore[union-attr]
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return FILES[file_of(move.from_sq)]
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return str(rank_of(move.from_sq) + 1)
    return square_name(move.from_sq)


def move_to_san(position: Position, move: Move, after: Position | None = None) -> str:
    """Convert a legal *move* to SAN given the *position* before the move.

    *after* may carry the already computed successor position; it decides
    the ``+`` / ``#`` suffix.
    """
    board = position.board
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {square_name(move.from_sq)}")

    # Castling
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        is_capture = board[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += FILES[file_of(move.from_sq)]
        else:
            san += _SAN_PIECE[piece.piece_type]
            san += _disambiguation(position, move, piece.piece_type)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    if after is None:
        after = position.apply_move(move)
    gen_after = MoveGenerator(after)
    if gen_after.is_in_check(after.side_to_move):
        san += "+" if gen_after.has_legal_moves() else "#"

    return san
