"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessplatform.core.enums import CastlingSide, MoveFlag, PieceType
from chessplatform.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable candidate move produced by the move generator."""

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    @property
    def castling_side(self) -> CastlingSide | None:
        if self.flag == MoveFlag.CASTLE_KINGSIDE:
            return CastlingSide.KINGSIDE
        if self.flag == MoveFlag.CASTLE_QUEENSIDE:
            return CastlingSide.QUEENSIDE
        return None

    @property
    def is_en_passant(self) -> bool:
        return self.flag == MoveFlag.EN_PASSANT

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)
