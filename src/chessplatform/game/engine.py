"""ChessEngine: the facade the board UI, bot and room layer talk to.

Validates move requests, keeps the authoritative :class:`GameState` and
emits events via simple callbacks so collaborators / tests can subscribe.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import NamedTuple

from chessplatform.core.enums import Color, GameResult, MoveFlag, PieceType
from chessplatform.core.move import Move
from chessplatform.core.move_generator import MoveGenerator
from chessplatform.core.notation import (
    STARTING_FEN,
    build_pgn,
    pgn_date,
    pgn_result_token,
    position_from_fen,
    seven_tag_roster,
)
from chessplatform.core.piece import Piece
from chessplatform.core.position import Position
from chessplatform.core.types import Square, parse_square, square_name
from chessplatform.game.config import EngineConfig
from chessplatform.game.state import GameState, MoveRecord, NotationEntry

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameState], None]
UndoCallback = Callable[[MoveRecord, GameState], None]
GameOverCallback = Callable[[GameResult, GameState], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_undo: list[UndoCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


class LegalTarget(NamedTuple):
    """A destination reachable from a queried square."""

    to: str
    promotion: PieceType | None = None


# ── Engine ───────────────────────────────────────────────────────────────────


class ChessEngine:
    """Owns one game: validates requests, applies moves, answers queries.

    Single-threaded: the owning room serializes access.

    Raises:
        FenParseError: the start FEN is malformed.
    """

    __slots__ = ("_config", "_state", "events")

    def __init__(self, fen: str | None = None, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()
        self._state = GameState.initial(fen, self._config.repetition_mode)
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def position(self) -> Position:
        return self._state.position

    @property
    def current_player(self) -> Color:
        return self._state.side_to_move

    @property
    def moves(self) -> tuple[MoveRecord, ...]:
        return self._state.moves

    # ── Game lifecycle ───────────────────────────────────────────────────

    def new_game(self, fen: str | None = None) -> None:
        """Reset to *fen* (or the standard start)."""
        self._state = GameState.initial(fen, self._config.repetition_mode)
        _LOGGER.debug("New game from %s", self._state.fen)

    def make_move(
        self,
        from_square: str,
        to_square: str,
        promotion: PieceType | str | None = None,
    ) -> MoveRecord | None:
        """Execute the move if legal; ``None`` when it is refused."""
        if self._state.is_game_over:
            _LOGGER.debug("Rejected %s%s: game is over", from_square, to_square)
            return None

        move = self._resolve(from_square, to_square, promotion)
        if move is None:
            _LOGGER.debug(
                "Rejected %s%s (promotion=%s): not legal",
                from_square,
                to_square,
                promotion,
            )
            return None

        self._state = self._state.apply(move, self._config.time_source())
        record = self._state.moves[-1]
        _LOGGER.debug("Played %s (%s)", record.san, move.uci)

        for cb in self.events.on_move:
            cb(record, self._state)
        if self._state.is_game_over:
            self._emit_game_over()
        return record

    def undo_move(self) -> MoveRecord | None:
        """Take back the last move; refused once the game is over."""
        if self._state.is_game_over or not self._state.moves:
            return None
        record = self._state.moves[-1]
        self._state = self._state.undo()
        _LOGGER.debug("Undid %s", record.san)
        for cb in self.events.on_undo:
            cb(record, self._state)
        return record

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, square: str) -> Piece | None:
        sq = _parse(square)
        if sq is None:
            return None
        return self._state.piece_at(sq)

    def get_legal_moves(self, square: str) -> list[LegalTarget]:
        """Legal destinations from *square* for the side to move."""
        sq = _parse(square)
        if sq is None or self._state.is_game_over:
            return []
        gen = MoveGenerator(self._state.position)
        return [
            LegalTarget(square_name(m.to_sq), m.promotion)
            for m in gen.legal_moves_from(sq)
        ]

    def get_all_legal_moves(self) -> list[tuple[str, str, PieceType | None]]:
        """Every legal move as ``(from, to, promotion)``."""
        if self._state.is_game_over:
            return []
        gen = MoveGenerator(self._state.position)
        return [
            (square_name(m.from_sq), square_name(m.to_sq), m.promotion)
            for m in gen.generate_legal_moves()
        ]

    def is_in_check(self, color: Color | None = None) -> bool:
        """Whether *color* (default: side to move) is in check."""
        color = self.current_player if color is None else color
        return MoveGenerator(self._state.position).is_in_check(color)

    def is_game_over(self) -> bool:
        return self._state.is_game_over

    def get_game_result(self) -> GameResult:
        return self._state.result

    def get_fen(self) -> str:
        return self._state.fen

    # ── History / navigation ─────────────────────────────────────────────

    def go_to_move_index(self, index: int) -> Position | None:
        """Position after move *index* for display; the game is untouched."""
        return self._state.replay(index)

    def notation_entries(self) -> list[NotationEntry]:
        return self._state.notation_entries()

    def export_pgn(
        self,
        white: str | None = None,
        black: str | None = None,
        event: str | None = None,
        site: str | None = None,
        round_: str | None = None,
        date: dt.date | None = None,
    ) -> str:
        """PGN document for the game so far."""
        cfg = self._config
        token = pgn_result_token(self._state.result)
        headers = seven_tag_roster(
            event=event or cfg.event,
            site=site or cfg.site,
            date=pgn_date(date),
            round_=round_ or cfg.round_,
            white=white or cfg.white_name,
            black=black or cfg.black_name,
            result_token=token,
        )
        if self._state.start_fen != STARTING_FEN:
            headers["SetUp"] = "1"
            headers["FEN"] = self._state.start_fen

        start = position_from_fen(self._state.start_fen)
        return build_pgn(
            headers,
            [r.san for r in self._state.moves],
            token,
            first_move_number=start.fullmove_number,
            black_moves_first=start.side_to_move == Color.BLACK,
        )

    # ── Internal helpers ─────────────────────────────────────────────────

    def _resolve(
        self,
        from_square: str,
        to_square: str,
        promotion: PieceType | str | None,
    ) -> Move | None:
        """Match the request against the legal candidates."""
        from_sq = _parse(from_square)
        to_sq = _parse(to_square)
        if from_sq is None or to_sq is None:
            return None
        if isinstance(promotion, str):
            try:
                promotion = PieceType.parse(promotion)
            except ValueError:
                return None

        gen = MoveGenerator(self._state.position)
        for move in gen.legal_moves_from(from_sq):
            if move.to_sq != to_sq:
                continue
            if move.flag == MoveFlag.PROMOTION:
                if move.promotion == promotion:
                    return move
            elif promotion is None:
                return move
        return None

    def _emit_game_over(self) -> None:
        result = self._state.result
        reason = self._state.draw_reason
        if self._state.is_checkmate or reason is None:
            _LOGGER.info("Game over: %s by checkmate", result.label)
        else:
            _LOGGER.info("Game over: %s (%s)", result.label, reason.value)
        for cb in self.events.on_game_over:
            cb(result, self._state)


def _parse(square: object) -> Square | None:
    if not isinstance(square, str):
        return None
    try:
        return parse_square(square)
    except ValueError:
        return None
