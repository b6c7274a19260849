"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessplatform.core.enums import (
    Color,
    DrawReason,
    GameResult,
    PieceType,
    RepetitionMode,
)
from chessplatform.core.move_generator import MoveGenerator
from chessplatform.core.notation.fen import position_to_fen, repetition_key

if TYPE_CHECKING:
    from chessplatform.core.position import Position

_MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Status flags for the side to move."""

    is_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    is_draw: bool = False
    draw_reason: DrawReason | None = None

    @property
    def is_game_over(self) -> bool:
        return self.is_checkmate or self.is_draw


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Draw policy: every draw rule ends the game on the spot, nothing is
    # claim-based. Insufficient material covers K v K and K+minor v K only.

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def has_legal_moves(position: Position) -> bool:
        return MoveGenerator(position).has_legal_moves()

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return not Rules.has_legal_moves(position)

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return not Rules.has_legal_moves(position)

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K."""
        occupied = position.board.occupied()

        # K vs K
        if len(occupied) == 2:
            return True

        # K+minor vs K
        if len(occupied) == 3:
            others = [p for _, p in occupied if p.piece_type != PieceType.KING]
            return len(others) == 1 and others[0].piece_type in _MINOR_PIECES

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def is_threefold_repetition(
        fens: Iterable[str], mode: RepetitionMode = RepetitionMode.POSITION
    ) -> bool:
        """Whether any position in *fens* occurs at least three times.

        *fens* is the FEN before every move played plus the current FEN.
        """
        if mode == RepetitionMode.POSITION:
            keys = Counter(repetition_key(fen) for fen in fens)
        else:
            keys = Counter(fens)
        return any(count >= 3 for count in keys.values())

    @staticmethod
    def evaluate(
        position: Position,
        history_fens: Iterable[str] = (),
        repetition_mode: RepetitionMode = RepetitionMode.POSITION,
        current_fen: str | None = None,
    ) -> GameStatus:
        """Compute check / mate / stalemate / draw flags for the side to move.

        Draw flags are computed independently of mate; callers deciding the
        result look at checkmate first.
        """
        gen = MoveGenerator(position)
        in_check = gen.is_in_check(position.side_to_move)
        has_moves = gen.has_legal_moves()
        checkmate = in_check and not has_moves
        stalemate = not in_check and not has_moves

        fens = [*history_fens, current_fen or position_to_fen(position)]
        draw_reason: DrawReason | None = None
        if stalemate:
            draw_reason = DrawReason.STALEMATE
        elif Rules.is_fifty_move_rule(position):
            draw_reason = DrawReason.FIFTY_MOVE_RULE
        elif Rules.is_insufficient_material(position):
            draw_reason = DrawReason.INSUFFICIENT_MATERIAL
        elif Rules.is_threefold_repetition(fens, repetition_mode):
            draw_reason = DrawReason.THREEFOLD_REPETITION

        return GameStatus(
            is_check=in_check,
            is_checkmate=checkmate,
            is_stalemate=stalemate,
            is_draw=draw_reason is not None,
            draw_reason=draw_reason,
        )

    @staticmethod
    def game_result(status: GameStatus, side_to_move: Color) -> GameResult:
        """Determine the game result from *status*."""
        if status.is_checkmate:
            return (
                GameResult.BLACK_WINS
                if side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if status.is_draw:
            return GameResult.DRAW
        return GameResult.IN_PROGRESS
