"""Notation package: FEN / SAN parsing and serialization, PGN export."""

from chessplatform.core.notation.fen import (
    STARTING_FEN,
    FenParseError,
    position_from_fen,
    position_to_fen,
    repetition_key,
)
from chessplatform.core.notation.pgn import (
    SEVEN_TAG_ROSTER,
    build_pgn,
    pgn_date,
    pgn_movetext_from_sans,
    pgn_result_token,
    seven_tag_roster,
)
from chessplatform.core.notation.san import move_to_san

__all__ = [
    "STARTING_FEN",
    "SEVEN_TAG_ROSTER",
    "FenParseError",
    "position_from_fen",
    "position_to_fen",
    "repetition_key",
    "move_to_san",
    "pgn_date",
    "pgn_result_token",
    "pgn_movetext_from_sans",
    "seven_tag_roster",
    "build_pgn",
]
