"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessplatform.core.enums import Color, PieceType

# FEN character ↔ (Color, PieceType); uppercase = white
_FEN_CHARS: dict[tuple[Color, PieceType], str] = {
    (color, ptype): ptype.letter.upper() if color == Color.WHITE else ptype.letter
    for color in Color
    for ptype in PieceType
}
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {v: k for k, v in _FEN_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """A coloured piece as it appears on the board and on the wire."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN character, e.g. 'N' for a white knight."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Piece for a FEN character.

        Raises:
            ValueError: *char* is not one of ``PNBRQKpnbrqk``.
        """
        if char not in _CHAR_MAP:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(*_CHAR_MAP[char])

    def to_dict(self) -> dict[str, str]:
        """Wire form used by the room layer, e.g. ``{"type": "knight", ...}``."""
        return {"type": str(self.piece_type), "color": str(self.color)}
