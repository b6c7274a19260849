"""Core enumerations and flags for chess domain."""

from __future__ import annotations

from enum import Enum, IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def letter(self) -> str:
        """Lowercase FEN letter, e.g. ``"n"`` for a knight."""
        return _LETTERS[self]

    @classmethod
    def parse(cls, text: str) -> PieceType:
        """Parse a piece name or letter, e.g. ``"queen"`` or ``"q"``."""
        key = text.strip().lower()
        for piece_type in cls:
            if key in (piece_type.name.lower(), _LETTERS[piece_type]):
                return piece_type
        raise ValueError(f"Unknown piece type: {text!r}")


_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}


class CastlingSide(Enum):
    """Which rook the king castles with."""

    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


class MoveFlag(IntEnum):
    """Special move classification."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, side: CastlingSide) -> CastlingRights:
        if color == Color.WHITE:
            return (
                cls.WHITE_KINGSIDE
                if side == CastlingSide.KINGSIDE
                else cls.WHITE_QUEENSIDE
            )
        return (
            cls.BLACK_KINGSIDE if side == CastlingSide.KINGSIDE else cls.BLACK_QUEENSIDE
        )


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3

    @property
    def label(self) -> str:
        """Wire label used by the platform ("white-wins", ..., "undecided")."""
        return _RESULT_LABELS[self]


_RESULT_LABELS: dict[GameResult, str] = {
    GameResult.IN_PROGRESS: "undecided",
    GameResult.WHITE_WINS: "white-wins",
    GameResult.BLACK_WINS: "black-wins",
    GameResult.DRAW: "draw",
}


class DrawReason(Enum):
    """Rule that ended the game in a draw."""

    STALEMATE = "stalemate"
    FIFTY_MOVE_RULE = "fifty-move-rule"
    INSUFFICIENT_MATERIAL = "insufficient-material"
    THREEFOLD_REPETITION = "threefold-repetition"


class RepetitionMode(Enum):
    """How positions are compared when counting repetitions.

    ``POSITION`` compares placement, side to move, castling rights and the
    en-passant square (the FIDE notion of "same position"). ``FULL_FEN``
    compares complete FEN strings including both clocks, so it practically
    never reports a repetition.
    """

    POSITION = "position"
    FULL_FEN = "full-fen"
