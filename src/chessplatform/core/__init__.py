"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from chessplatform.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from chessplatform.core.board import Board
from chessplatform.core.enums import (
    CastlingRights,
    CastlingSide,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    PieceType,
    RepetitionMode,
)
from chessplatform.core.move import Move
from chessplatform.core.move_generator import MoveGenerator
from chessplatform.core.notation import (
    STARTING_FEN,
    FenParseError,
    move_to_san,
    position_from_fen,
    position_to_fen,
)
from chessplatform.core.piece import Piece
from chessplatform.core.position import Position
from chessplatform.core.rules import GameStatus, Rules
from chessplatform.core.types import (
    Square,
    file_of,
    index_to_square,
    make_square,
    parse_square,
    rank_of,
    square_name,
    square_to_index,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "CastlingSide",
    "Color",
    "DrawReason",
    "GameResult",
    "MoveFlag",
    "PieceType",
    "RepetitionMode",
    # Types / helpers
    "Square",
    "file_of",
    "index_to_square",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "square_to_index",
    # Domain objects
    "Board",
    "GameStatus",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    # Notation
    "STARTING_FEN",
    "FenParseError",
    "move_to_san",
    "position_from_fen",
    "position_to_fen",
]
