"""Position: complete board state (board + metadata) with pure transitions."""

from __future__ import annotations

from dataclasses import dataclass, field

from chessplatform.core.board import Board
from chessplatform.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessplatform.core.move import Move
from chessplatform.core.piece import Piece
from chessplatform.core.types import A1, A8, H1, H8, Square, col_of, make_square, row_of

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    H8: CastlingRights.BLACK_KINGSIDE,
}


def en_passant_victim(move: Move) -> Square:
    """Square of the pawn removed by an en-passant *move*.

    The captured pawn shares the destination's file and the origin's row.
    """
    return make_square(row_of(move.from_sq), col_of(move.to_sq))


@dataclass(frozen=True, slots=True)
class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Immutable: :meth:`apply_move` returns the successor position, so a
    position can be handed to legality checks, history snapshots and
    display code without defensive copies.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    # ── Core move operation ──────────────────────────────────────────────

    def apply_move(self, move: Move) -> Position:
        """Return the position after *move*. The move is not validated."""
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        changes: dict[Square, Piece | None] = {move.from_sq: None}
        captured = board[move.to_sq]

        # En passant: the captured pawn sits on a different square
        if move.flag == MoveFlag.EN_PASSANT:
            victim_sq = en_passant_victim(move)
            captured = board[victim_sq]
            changes[victim_sq] = None

        placed = piece
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        changes[move.to_sq] = placed

        # Slide the rook for castling
        if move.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE):
            row = row_of(move.from_sq)
            kingside = move.flag == MoveFlag.CASTLE_KINGSIDE
            rook_from = make_square(row, 7 if kingside else 0)
            rook_to = make_square(row, 5 if kingside else 3)
            changes[rook_to] = board[rook_from]
            changes[rook_from] = None

        next_en_passant: Square | None = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            next_en_passant = (move.from_sq + move.to_sq) // 2

        if piece.piece_type == PieceType.PAWN or captured is not None:
            halfmove = 0
        else:
            halfmove = self.halfmove_clock + 1

        fullmove = self.fullmove_number
        if self.side_to_move == Color.BLACK:
            fullmove += 1

        return Position(
            board=board.replace(changes),
            side_to_move=self.side_to_move.opposite,
            castling=self._next_castling(move, piece),
            en_passant=next_en_passant,
            halfmove_clock=halfmove,
            fullmove_number=fullmove,
        )

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _next_castling(self, move: Move, piece: Piece) -> CastlingRights:
        next_castling = self.castling
        if piece.piece_type == PieceType.KING:
            if piece.color == Color.WHITE:
                next_castling &= ~CastlingRights.WHITE_BOTH
            else:
                next_castling &= ~CastlingRights.BLACK_BOTH

        # A rook leaving its corner, or anything landing there, ends that right.
        for sq in (move.from_sq, move.to_sq):
            if sq in _ROOK_CORNERS:
                next_castling &= ~_ROOK_CORNERS[sq]
        return next_castling

    # ── Utilities ────────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.board[sq]

    @classmethod
    def initial(cls) -> Position:
        return cls()
