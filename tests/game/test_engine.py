"""Tests for ChessEngine: the facade over GameState."""

import datetime as dt
import logging

import pytest

from chessplatform.core.enums import (
    Color,
    DrawReason,
    GameResult,
    PieceType,
    RepetitionMode,
)
from chessplatform.core.notation import STARTING_FEN, FenParseError, position_to_fen
from chessplatform.core.piece import Piece
from chessplatform.game.config import EngineConfig
from chessplatform.game.engine import ChessEngine, LegalTarget
from chessplatform.game.state import GameState, MoveRecord, NotationEntry

FOOLS_MATE = "f2f3 e7e5 g2g4 d8h4"
KNIGHTS_ONLY = "1n2k3/8/8/8/8/8/8/1N2K3 w - - 0 1"
SHUFFLE = "b1c3 b8c6 c3b1 c6b8"


class TestNewGame:
    def test_defaults(self, engine: ChessEngine) -> None:
        assert engine.get_fen() == STARTING_FEN
        assert engine.current_player == Color.WHITE
        assert engine.get_game_result() == GameResult.IN_PROGRESS
        assert not engine.is_game_over()

    def test_custom_fen(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        engine = ChessEngine(fen)
        assert engine.current_player == Color.BLACK
        assert engine.get_fen() == fen

    def test_bad_fen_raises(self) -> None:
        with pytest.raises(FenParseError):
            ChessEngine("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -")

    def test_empty_fen_raises(self, engine: ChessEngine) -> None:
        with pytest.raises(FenParseError):
            ChessEngine("")
        with pytest.raises(FenParseError):
            engine.new_game("")
        assert engine.get_fen() == STARTING_FEN

    def test_new_game_resets(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4 e7e5")
        engine.new_game()
        assert engine.get_fen() == STARTING_FEN
        assert engine.moves == ()

    def test_new_game_bad_fen_keeps_game(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4")
        fen = engine.get_fen()
        with pytest.raises(FenParseError):
            engine.new_game("8/8/8 w - - 0 1")
        assert engine.get_fen() == fen


class TestMakeMove:
    def test_legal_move(self, engine: ChessEngine) -> None:
        record = engine.make_move("e2", "e4")
        assert isinstance(record, MoveRecord)
        assert record.san == "e4"
        assert record.timestamp == 1000.0
        assert engine.current_player == Color.BLACK
        assert engine.piece_at("e4") == Piece(Color.WHITE, PieceType.PAWN)

    @pytest.mark.parametrize(
        ("src", "dst"),
        [
            ("e2", "e5"),  # three ranks
            ("e3", "e4"),  # empty source
            ("e7", "e5"),  # wrong side
            ("z9", "e4"),  # bad square
            ("e2", ""),
            ("e1", "e2"),  # own piece
        ],
    )
    def test_illegal_requests_return_none(
        self, engine: ChessEngine, src: str, dst: str
    ) -> None:
        assert engine.make_move(src, dst) is None
        assert engine.get_fen() == STARTING_FEN
        assert engine.moves == ()

    def test_move_into_check_rejected(self) -> None:
        engine = ChessEngine("4k3/8/8/8/8/8/4r3/3K4 w - - 0 1")
        assert engine.make_move("d1", "d2") is None
        assert engine.make_move("d1", "c1") is not None

    def test_promotion_by_name_and_letter(self) -> None:
        fen = "7k/4P3/8/8/8/8/8/4K3 w - - 0 1"
        engine = ChessEngine(fen)
        assert engine.make_move("e7", "e8", "queen").promotion == PieceType.QUEEN
        engine.new_game(fen)
        assert engine.make_move("e7", "e8", "N").promotion == PieceType.KNIGHT
        engine.new_game(fen)
        assert engine.make_move("e7", "e8", PieceType.ROOK).san == "e8=R+"

    def test_promotion_required_on_last_rank(self) -> None:
        engine = ChessEngine("7k/4P3/8/8/8/8/8/4K3 w - - 0 1")
        assert engine.make_move("e7", "e8") is None
        assert engine.make_move("e7", "e8", "king") is None
        assert engine.make_move("e7", "e8", "pawn") is None
        assert engine.make_move("e7", "e8", "dragon") is None

    def test_non_string_squares_rejected(self, engine: ChessEngine) -> None:
        assert engine.make_move(None, "e4") is None
        assert engine.make_move("e2", 36) is None
        assert engine.get_legal_moves(None) == []
        assert engine.piece_at(None) is None
        assert engine.moves == ()

    def test_promotion_rejected_elsewhere(self, engine: ChessEngine) -> None:
        assert engine.make_move("e2", "e4", "queen") is None

    def test_en_passant(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4 a7a6 e4e5 d7d5")
        record = engine.make_move("e5", "d6")
        assert record is not None and record.is_en_passant
        assert engine.piece_at("d5") is None

    def test_en_passant_window_expires(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4 a7a6 e4e5 d7d5 h2h3 h7h6")
        assert engine.make_move("e5", "d6") is None

    def test_castling_gated_from_start(self, engine: ChessEngine, play) -> None:
        assert engine.make_move("e1", "g1") is None
        play(engine, "e2e4 e7e5 g1f3 b8c6")
        assert engine.make_move("e1", "g1") is None  # f1 still occupied
        play(engine, "f1c4 g8f6")
        record = engine.make_move("e1", "g1")
        assert record is not None and record.san == "O-O"

    def test_castling(self) -> None:
        engine = ChessEngine("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        record = engine.make_move("e1", "g1")
        assert record.san == "O-O"
        assert engine.piece_at("f1") == Piece(Color.WHITE, PieceType.ROOK)
        assert engine.get_fen() == "r3k2r/8/8/8/8/8/8/R4RK1 b kq - 1 1"


class TestQueries:
    def test_legal_targets(self, engine: ChessEngine) -> None:
        assert sorted(engine.get_legal_moves("g1")) == [
            LegalTarget("f3"),
            LegalTarget("h3"),
        ]

    def test_legal_targets_empty_cases(self, engine: ChessEngine) -> None:
        assert engine.get_legal_moves("e4") == []
        assert engine.get_legal_moves("e7") == []
        assert engine.get_legal_moves("nope") == []

    def test_promotion_targets(self) -> None:
        engine = ChessEngine("7k/4P3/8/8/8/8/8/4K3 w - - 0 1")
        assert {t.promotion for t in engine.get_legal_moves("e7")} == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }

    def test_all_legal_moves(self, engine: ChessEngine) -> None:
        moves = engine.get_all_legal_moves()
        assert len(moves) == 20
        assert ("g1", "f3", None) in moves

    def test_is_in_check(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4 f7f6 d1h5")
        assert engine.is_in_check()
        assert engine.is_in_check(Color.BLACK)
        assert not engine.is_in_check(Color.WHITE)

    def test_piece_at_bad_square(self, engine: ChessEngine) -> None:
        assert engine.piece_at("i9") is None


class TestGameOver:
    def test_fools_mate(self, engine: ChessEngine, play) -> None:
        play(engine, FOOLS_MATE)
        assert engine.is_game_over()
        assert engine.state.is_checkmate
        assert engine.get_game_result() == GameResult.BLACK_WINS
        assert engine.get_all_legal_moves() == []

    def test_terminal_state_is_absorbing(self, engine: ChessEngine, play) -> None:
        play(engine, FOOLS_MATE)
        fen = engine.get_fen()
        assert engine.make_move("a2", "a3") is None
        assert engine.undo_move() is None
        assert engine.get_fen() == fen
        engine.new_game()
        assert not engine.is_game_over()

    def test_stalemate(self) -> None:
        engine = ChessEngine("7k/8/5K2/6Q1/8/8/8/8 w - - 0 1")
        engine.make_move("g5", "g6")
        assert engine.state.is_stalemate
        assert engine.state.draw_reason == DrawReason.STALEMATE
        assert engine.get_game_result() == GameResult.DRAW

    def test_insufficient_material_after_capture(self) -> None:
        engine = ChessEngine("4k3/8/8/8/8/8/4r3/4KB2 w - - 0 1")
        engine.make_move("e1", "e2")
        assert engine.state.draw_reason == DrawReason.INSUFFICIENT_MATERIAL
        assert engine.is_game_over()

    def test_fifty_move_rule_from_98(self) -> None:
        engine = ChessEngine("1n2k3/8/8/8/8/8/8/1N2K3 w - - 98 80")
        engine.make_move("b1", "c3")
        assert not engine.is_game_over()
        engine.make_move("b8", "c6")
        assert engine.state.draw_reason == DrawReason.FIFTY_MOVE_RULE

    def test_fifty_move_rule_by_shuffling(self, play) -> None:
        engine = ChessEngine(
            KNIGHTS_ONLY, EngineConfig(repetition_mode=RepetitionMode.FULL_FEN)
        )
        for _ in range(24):
            play(engine, SHUFFLE)
        assert not engine.is_game_over()
        play(engine, SHUFFLE)
        assert engine.state.position.halfmove_clock == 100
        assert engine.state.draw_reason == DrawReason.FIFTY_MOVE_RULE

    def test_threefold_repetition(self, engine: ChessEngine, play) -> None:
        engine.new_game(KNIGHTS_ONLY)
        play(engine, SHUFFLE)
        assert not engine.is_game_over()
        play(engine, SHUFFLE)
        assert engine.state.draw_reason == DrawReason.THREEFOLD_REPETITION
        assert engine.get_game_result() == GameResult.DRAW


class TestUndo:
    def test_undo_restores_previous_fen(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4 e7e5")
        before = engine.moves[-1].fen_before
        record = engine.undo_move()
        assert record is not None and record.san == "e5"
        assert engine.get_fen() == before
        assert len(engine.moves) == 1
        assert engine.current_player == record.piece.color

    def test_undo_empty(self, engine: ChessEngine) -> None:
        assert engine.undo_move() is None

    def test_undo_then_replay_same_move(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4")
        fen = engine.get_fen()
        engine.undo_move()
        play(engine, "e2e4")
        assert engine.get_fen() == fen


class TestNavigation:
    def test_go_to_move_index_leaves_game_untouched(
        self, engine: ChessEngine, play
    ) -> None:
        play(engine, "e2e4 e7e5 g1f3")
        state_before = engine.state
        pos = engine.go_to_move_index(0)
        assert pos is not None
        assert position_to_fen(pos) == engine.moves[0].fen_after
        assert engine.state is state_before
        assert engine.current_player == Color.BLACK

    def test_start_and_out_of_range(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4")
        assert position_to_fen(engine.go_to_move_index(-1)) == STARTING_FEN
        assert engine.go_to_move_index(1) is None
        assert engine.go_to_move_index(-5) is None

    def test_notation_entries(self, engine: ChessEngine, play) -> None:
        play(engine, "e2e4 e7e5 g1f3")
        assert engine.notation_entries() == [
            NotationEntry(1, "e4", "e5"),
            NotationEntry(2, "Nf3", None),
        ]


class TestExportPgn:
    def test_fools_mate_pgn(self, engine: ChessEngine, play) -> None:
        play(engine, FOOLS_MATE)
        text = engine.export_pgn(date=dt.date(2026, 2, 26))
        assert text.splitlines() == [
            '[Event "Chess Platform Game"]',
            '[Site "Chess Platform"]',
            '[Date "2026.02.26"]',
            '[Round "1"]',
            '[White "White Player"]',
            '[Black "Black Player"]',
            '[Result "0-1"]',
            "",
            "1. f3 e5 2. g4 Qh4# 0-1",
        ]

    def test_custom_names_and_unfinished_result(
        self, engine: ChessEngine, play
    ) -> None:
        play(engine, "e2e4")
        text = engine.export_pgn(white="Alice", black="Bob", date=dt.date(2026, 1, 2))
        assert '[White "Alice"]' in text
        assert '[Black "Bob"]' in text
        assert '[Result "*"]' in text
        assert text.rstrip().endswith("1. e4 *")

    def test_custom_start_adds_fen_tags(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        engine = ChessEngine(fen)
        engine.make_move("e7", "e5")
        text = engine.export_pgn(date=dt.date(2026, 1, 2))
        assert '[SetUp "1"]' in text
        assert f'[FEN "{fen}"]' in text
        assert text.rstrip().endswith("1... e5 *")


class TestEvents:
    def test_move_event(self, engine: ChessEngine) -> None:
        seen: list[tuple[str, str]] = []
        engine.events.on_move.append(lambda rec, st: seen.append((rec.san, st.fen)))
        engine.make_move("e2", "e4")
        assert seen == [("e4", engine.get_fen())]

    def test_rejected_move_emits_nothing(self, engine: ChessEngine) -> None:
        seen: list[MoveRecord] = []
        engine.events.on_move.append(lambda rec, st: seen.append(rec))
        engine.make_move("e2", "e5")
        assert seen == []

    def test_game_over_event(self, engine: ChessEngine, play) -> None:
        results: list[GameResult] = []
        engine.events.on_game_over.append(lambda res, st: results.append(res))
        play(engine, FOOLS_MATE)
        assert results == [GameResult.BLACK_WINS]

    def test_undo_event(self, engine: ChessEngine, play) -> None:
        undone: list[tuple[str, GameState]] = []
        engine.events.on_undo.append(lambda rec, st: undone.append((rec.san, st)))
        play(engine, "e2e4")
        engine.undo_move()
        assert len(undone) == 1
        assert undone[0][0] == "e4"
        assert undone[0][1].fen == STARTING_FEN


class TestLogging:
    def test_rejected_move_logged(
        self, engine: ChessEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="chessplatform.game.engine"):
            engine.make_move("e2", "e5")
        assert "Rejected e2e5" in caplog.text

    def test_game_over_logged_at_info(
        self, engine: ChessEngine, play, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="chessplatform.game.engine"):
            play(engine, FOOLS_MATE)
        records = [r for r in caplog.records if r.levelno == logging.INFO]
        assert len(records) == 1
        assert "black-wins by checkmate" in records[0].getMessage()
