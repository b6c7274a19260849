"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from chessplatform.core.enums import Color, PieceType
from chessplatform.core.piece import Piece
from chessplatform.core.types import Square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Immutable 64-square board.

    Updates go through :meth:`replace`, which returns a new board and leaves
    the original untouched, so boards can be shared freely between
    positions, history snapshots and speculative legality checks.
    """

    __slots__ = ("_squares", "_king_squares")

    def __init__(self, squares: Iterable[Piece | None] | None = None) -> None:
        cells = tuple(squares) if squares is not None else (None,) * 64
        if len(cells) != 64:
            raise ValueError(f"Board needs 64 squares, got {len(cells)}")
        self._squares: tuple[Piece | None, ...] = cells
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]
        for sq, piece in enumerate(cells):
            if piece is not None and piece.piece_type == PieceType.KING:
                self._king_squares[int(piece.color)] = sq

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __iter__(self) -> Iterator[Piece | None]:
        return iter(self._squares)

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [
            sq
            for sq, p in enumerate(self._squares)
            if p is not None and p.color == color and p.piece_type == piece_type
        ]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [
            sq for sq, p in enumerate(self._squares) if p is not None and p.color == color
        ]

    def occupied(self) -> list[tuple[Square, Piece]]:
        """``(square, piece)`` for every occupied square."""
        return [(sq, p) for sq, p in enumerate(self._squares) if p is not None]

    def piece_count(self) -> int:
        return sum(1 for p in self._squares if p is not None)

    def king_square(self, color: Color) -> Square | None:
        """The king square for *color*, or ``None`` if it has no king."""
        return self._king_squares[int(color)]

    # -- Copy-on-write ------------------------------------------------------

    def replace(self, changes: Mapping[Square, Piece | None]) -> Board:
        """Return a new board with *changes* applied."""
        cells = list(self._squares)
        for sq, piece in changes.items():
            cells[sq] = piece
        return Board(cells)

    def rows(self) -> list[list[Piece | None]]:
        """8x8 grid, row 0 = rank 8."""
        return [list(self._squares[r * 8 : r * 8 + 8]) for r in range(8)]

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        cells: list[Piece | None] = [None] * 64
        for col in range(8):
            cells[make_square(6, col)] = Piece(Color.WHITE, PieceType.PAWN)
            cells[make_square(1, col)] = Piece(Color.BLACK, PieceType.PAWN)
        for col, pt in enumerate(_BACK_RANK):
            cells[make_square(7, col)] = Piece(Color.WHITE, pt)
            cells[make_square(0, col)] = Piece(Color.BLACK, pt)
        return cls(cells)

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __hash__(self) -> int:
        return hash(self._squares)

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(8):
            cells = []
            for col in range(8):
                p = self[make_square(row, col)]
                cells.append(str(p) if p else ".")
            rows.append(f"{8 - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
