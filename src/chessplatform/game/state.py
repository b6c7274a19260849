"""Game state: immutable snapshots, move history and pure transitions."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from chessplatform.core.enums import (
    CastlingRights,
    CastlingSide,
    Color,
    DrawReason,
    GameResult,
    PieceType,
    RepetitionMode,
)
from chessplatform.core.move import Move
from chessplatform.core.notation import (
    STARTING_FEN,
    move_to_san,
    position_from_fen,
    position_to_fen,
)
from chessplatform.core.piece import Piece
from chessplatform.core.position import Position, en_passant_victim
from chessplatform.core.rules import GameStatus, Rules
from chessplatform.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single executed move in the history."""

    move: Move
    piece: Piece
    captured: Piece | None
    san: str
    fen_before: str
    fen_after: str
    timestamp: float

    @property
    def from_square(self) -> str:
        return square_name(self.move.from_sq)

    @property
    def to_square(self) -> str:
        return square_name(self.move.to_sq)

    @property
    def promotion(self) -> PieceType | None:
        return self.move.promotion

    @property
    def castling(self) -> CastlingSide | None:
        return self.move.castling_side

    @property
    def is_en_passant(self) -> bool:
        return self.move.is_en_passant

    def to_dict(self) -> dict[str, Any]:
        """Wire form; ``fen`` is the position before the move."""
        data: dict[str, Any] = {
            "from": self.from_square,
            "to": self.to_square,
            "piece": self.piece.to_dict(),
            "san": self.san,
            "fen": self.fen_before,
            "fenAfter": self.fen_after,
            "timestamp": self.timestamp,
        }
        if self.captured is not None:
            data["capturedPiece"] = self.captured.to_dict()
        if self.promotion is not None:
            data["promotion"] = str(self.promotion)
        if self.castling is not None:
            data["castling"] = self.castling.value
        if self.is_en_passant:
            data["enPassant"] = True
        return data


@dataclass(frozen=True, slots=True)
class NotationEntry:
    """One numbered row of the move list."""

    move_number: int
    white: str | None = None
    black: str | None = None


def _captured_piece(position: Position, move: Move) -> Piece | None:
    if move.is_en_passant:
        return position.board[en_passant_victim(move)]
    return position.board[move.to_sq]


@dataclass(frozen=True, slots=True)
class GameState:
    """Everything known about a game at one point in time.

    Instances are never mutated; :meth:`apply` and :meth:`undo` return the
    successor state.
    """

    position: Position
    start_fen: str = STARTING_FEN
    moves: tuple[MoveRecord, ...] = ()
    status: GameStatus = field(default_factory=GameStatus)
    fen: str = STARTING_FEN
    repetition_mode: RepetitionMode = RepetitionMode.POSITION

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def initial(
        cls,
        fen: str | None = None,
        repetition_mode: RepetitionMode = RepetitionMode.POSITION,
    ) -> GameState:
        """State for a fresh game from *fen* (or the standard start).

        Raises:
            FenParseError: *fen* is malformed.
        """
        start_fen = STARTING_FEN if fen is None else fen
        position = position_from_fen(start_fen)
        current_fen = position_to_fen(position)
        status = Rules.evaluate(position, (), repetition_mode, current_fen)
        return cls(
            position=position,
            start_fen=current_fen,
            moves=(),
            status=status,
            fen=current_fen,
            repetition_mode=repetition_mode,
        )

    # ── Transitions ──────────────────────────────────────────────────────

    def apply(self, move: Move, timestamp: float) -> GameState:
        """Execute a legal *move*; the new record is ``moves[-1]``.

        Caller is responsible for the legality check.
        """
        piece = self.position.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {square_name(move.from_sq)}")
        captured = _captured_piece(self.position, move)

        after = self.position.apply_move(move)
        fen_after = position_to_fen(after)
        record = MoveRecord(
            move=move,
            piece=piece,
            captured=captured,
            san=move_to_san(self.position, move, after),
            fen_before=self.fen,
            fen_after=fen_after,
            timestamp=timestamp,
        )
        moves = (*self.moves, record)
        return replace(
            self,
            position=after,
            moves=moves,
            status=self._evaluate(after, moves, fen_after),
            fen=fen_after,
        )

    def undo(self) -> GameState:
        """Drop the last move and restore the position before it."""
        if not self.moves:
            raise ValueError("No move to undo")
        record = self.moves[-1]
        position = position_from_fen(record.fen_before)
        moves = self.moves[:-1]
        return replace(
            self,
            position=position,
            moves=moves,
            status=self._evaluate(position, moves, record.fen_before),
            fen=record.fen_before,
        )

    def replay(self, index: int) -> Position | None:
        """Position after move *index* (``-1`` = start), rebuilt from the start.

        Returns ``None`` when *index* is out of range.
        """
        if index < -1 or index >= len(self.moves):
            return None
        position = position_from_fen(self.start_fen)
        for record in self.moves[: index + 1]:
            position = position.apply_move(record.move)
        return position

    def _evaluate(
        self, position: Position, moves: tuple[MoveRecord, ...], fen: str
    ) -> GameStatus:
        history = [r.fen_before for r in moves]
        return Rules.evaluate(position, history, self.repetition_mode, fen)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_check(self) -> bool:
        return self.status.is_check

    @property
    def is_checkmate(self) -> bool:
        return self.status.is_checkmate

    @property
    def is_stalemate(self) -> bool:
        return self.status.is_stalemate

    @property
    def is_draw(self) -> bool:
        return self.status.is_draw

    @property
    def draw_reason(self) -> DrawReason | None:
        return self.status.draw_reason

    @property
    def is_game_over(self) -> bool:
        return self.status.is_game_over

    @property
    def result(self) -> GameResult:
        return Rules.game_result(self.status, self.side_to_move)

    def piece_at(self, sq: Square) -> Piece | None:
        return self.position.board[sq]

    def notation_entries(self) -> list[NotationEntry]:
        """Moves grouped by move number, starting from the start FEN."""
        start = position_from_fen(self.start_fen)
        entries: list[NotationEntry] = []
        number = start.fullmove_number
        white_to_move = start.side_to_move == Color.WHITE
        pending_white: str | None = None
        for record in self.moves:
            if white_to_move:
                pending_white = record.san
            else:
                entries.append(NotationEntry(number, pending_white, record.san))
                pending_white = None
                number += 1
            white_to_move = not white_to_move
        if pending_white is not None:
            entries.append(NotationEntry(number, pending_white, None))
        return entries

    # ── Serialisation ────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly snapshot for the room layer."""
        castling = self.position.castling
        ep = self.position.en_passant
        return {
            "board": [
                [p.to_dict() if p is not None else None for p in row]
                for row in self.position.board.rows()
            ],
            "currentPlayer": str(self.side_to_move),
            "castlingRights": {
                "whiteKingside": bool(castling & CastlingRights.WHITE_KINGSIDE),
                "whiteQueenside": bool(castling & CastlingRights.WHITE_QUEENSIDE),
                "blackKingside": bool(castling & CastlingRights.BLACK_KINGSIDE),
                "blackQueenside": bool(castling & CastlingRights.BLACK_QUEENSIDE),
            },
            "enPassantTarget": square_name(ep) if ep is not None else None,
            "halfmoveClock": self.position.halfmove_clock,
            "fullmoveNumber": self.position.fullmove_number,
            "moves": [r.to_dict() for r in self.moves],
            "isCheck": self.is_check,
            "isCheckmate": self.is_checkmate,
            "isStalemate": self.is_stalemate,
            "isDraw": self.is_draw,
            "fen": self.fen,
        }
