"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessplatform.core.enums import (
    CastlingRights,
    CastlingSide,
    Color,
    MoveFlag,
    PieceType,
)
from chessplatform.core.move import Move
from chessplatform.core.types import (
    B1,
    B8,
    C1,
    C8,
    D1,
    D8,
    E1,
    E8,
    F1,
    F8,
    G1,
    G8,
    Square,
    make_square,
)

if TYPE_CHECKING:
    from chessplatform.core.board import Board
    from chessplatform.core.position import Position

# Offsets are (d_row, d_col); row 0 is rank 8, so white pawns move to d_row -1.
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# color -> (forward d_row, start row, promotion row)
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int]] = {
    Color.WHITE: (-1, 6, 0),
    Color.BLACK: (1, 1, 7),
}

# (color, side) -> (squares that must be empty, squares the king crosses).
# The last crossed square is the king's destination.
_CASTLING_PATHS: dict[
    tuple[Color, CastlingSide], tuple[tuple[Square, ...], tuple[Square, ...]]
] = {
    (Color.WHITE, CastlingSide.KINGSIDE): ((F1, G1), (F1, G1)),
    (Color.WHITE, CastlingSide.QUEENSIDE): ((B1, C1, D1), (D1, C1)),
    (Color.BLACK, CastlingSide.KINGSIDE): ((F8, G8), (F8, G8)),
    (Color.BLACK, CastlingSide.QUEENSIDE): ((B8, C8, D8), (D8, C8)),
}
_CASTLING_FLAGS: dict[CastlingSide, MoveFlag] = {
    CastlingSide.KINGSIDE: MoveFlag.CASTLE_KINGSIDE,
    CastlingSide.QUEENSIDE: MoveFlag.CASTLE_QUEENSIDE,
}
_KING_HOME: dict[Color, Square] = {Color.WHITE: E1, Color.BLACK: E8}


# -- Precomputed lookup tables ---------------------------------------------


def _on_board(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        row, col = sq >> 3, sq & 7
        targets.append(
            tuple(
                make_square(row + dr, col + dc)
                for dr, dc in offsets
                if _on_board(row + dr, col + dc)
            )
        )
    return tuple(targets)


def _build_pawn_attackers(color: Color) -> tuple[tuple[Square, ...], ...]:
    """For each square, the squares a *color* pawn would attack it from."""
    forward = _PAWN_GEOMETRY[color][0]
    attackers: list[tuple[Square, ...]] = []
    for sq in range(64):
        row, col = sq >> 3, sq & 7
        attackers.append(
            tuple(
                make_square(row - forward, col + dc)
                for dc in (-1, 1)
                if _on_board(row - forward, col + dc)
            )
        )
    return tuple(attackers)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        row, col = sq >> 3, sq & 7
        square_rays: list[tuple[Square, ...]] = []
        for dr, dc in directions:
            r, c = row + dr, col + dc
            ray: list[Square] = []
            while _on_board(r, c):
                ray.append(make_square(r, c))
                r += dr
                c += dc
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_PAWN_ATTACKERS = {color: _build_pawn_attackers(color) for color in Color}

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}
_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


def square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked on *board* by any piece of *by_color*?

    Works backwards from the target: a knight of *by_color* a knight's jump
    away, a pawn on one of its capture squares, and so on.
    """
    for from_sq in _PAWN_ATTACKERS[by_color][sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.PAWN
        ):
            return True

    for from_sq in _KNIGHT_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KNIGHT
        ):
            return True

    for from_sq in _KING_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KING
        ):
            return True

    for rays, attackers in (
        (_BISHOP_RAYS[sq], _DIAGONAL_ATTACKERS),
        (_ROOK_RAYS[sq], _STRAIGHT_ATTACKERS),
    ):
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in attackers:
                    return True
                break

    return False


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    Legality is decided on successor positions built by
    :meth:`Position.apply_move`; the wrapped position is never modified.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [
            move
            for move in self.generate_pseudo_legal_moves()
            if not self.would_expose_king(move)
        ]

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq*; empty unless it is the mover's."""
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        return [
            move
            for move in self.pseudo_legal_moves_from(sq)
            if not self.would_expose_king(move)
        ]

    def has_legal_moves(self) -> bool:
        """Whether the side to move has at least one legal move."""
        for sq in self._board.all_pieces(self._pos.side_to_move):
            for move in self.pseudo_legal_moves_from(sq):
                if not self.would_expose_king(move):
                    return True
        return False

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        for sq in self._board.all_pieces(self._pos.side_to_move):
            moves.extend(self.pseudo_legal_moves_from(sq))
        return moves

    def pseudo_legal_moves_from(self, sq: Square) -> list[Move]:
        """Pseudo-legal moves of whatever piece stands on *sq*."""
        piece = self._board[sq]
        if piece is None:
            return []

        moves: list[Move] = []
        color = piece.color
        piece_type = piece.piece_type
        if piece_type == PieceType.PAWN:
            self._gen_pawn(sq, color, moves)
        elif piece_type == PieceType.KNIGHT:
            self._gen_steps(sq, color, _KNIGHT_TARGETS[sq], moves)
        elif piece_type == PieceType.KING:
            self._gen_steps(sq, color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, color, moves)
        else:
            self._gen_sliding(sq, color, _SLIDER_RAYS[piece_type][sq], moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        if king_sq is None:
            return False
        return square_attacked(self._board, king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        return square_attacked(self._board, sq, by_color)

    def would_expose_king(self, move: Move) -> bool:
        """Would *move* leave the mover's own king attacked?"""
        piece = self._board[move.from_sq]
        if piece is None:
            return True
        after = self._pos.apply_move(move)
        king_sq = after.board.king_square(piece.color)
        if king_sq is None:
            return False
        return square_attacked(after.board, king_sq, piece.color.opposite)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        forward, start_row, promo_row = _PAWN_GEOMETRY[color]
        row, col = sq >> 3, sq & 7
        next_row = row + forward
        if not 0 <= next_row < 8:
            return

        one_step = make_square(next_row, col)
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, next_row == promo_row, moves)
            if row == start_row:
                two_step = make_square(row + 2 * forward, col)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for dc in (-1, 1):
            if not 0 <= col + dc < 8:
                continue
            cap_sq = make_square(next_row, col + dc)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, next_row == promo_row, moves)
            elif cap_sq == self._pos.en_passant and color == self._pos.side_to_move:
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    @staticmethod
    def _add_pawn_move(
        from_sq: Square, to_sq: Square, promotes: bool, moves: list[Move]
    ) -> None:
        if promotes:
            for pt in PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, MoveFlag.PROMOTION, pt))
        else:
            moves.append(Move(from_sq, to_sq))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        if king_sq != _KING_HOME[color] or not self._pos.castling:
            return
        if self.is_in_check(color):
            return

        board = self._board
        opponent = color.opposite
        row = king_sq >> 3
        for side in CastlingSide:
            if not self._pos.castling & CastlingRights.for_side(color, side):
                continue
            rook = board[make_square(row, 7 if side == CastlingSide.KINGSIDE else 0)]
            if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
                continue
            empty, crossed = _CASTLING_PATHS[(color, side)]
            if not all(board.is_empty(s) for s in empty):
                continue
            if any(square_attacked(board, s, opponent) for s in crossed):
                continue
            moves.append(Move(king_sq, crossed[-1], _CASTLING_FLAGS[side]))
