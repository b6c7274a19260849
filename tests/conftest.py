"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from chessplatform.core.notation import STARTING_FEN, position_from_fen
from chessplatform.core.position import Position
from chessplatform.game.config import EngineConfig
from chessplatform.game.engine import ChessEngine


@pytest.fixture
def start_position() -> Position:
    return position_from_fen(STARTING_FEN)


@pytest.fixture
def fixed_clock() -> Callable[[], float]:
    """Deterministic move timestamps: 1000.0, 1001.0, ..."""
    ticks: Iterator[float] = iter(float(t) for t in range(1000, 10_000))
    return lambda: next(ticks)


@pytest.fixture
def engine(fixed_clock: Callable[[], float]) -> ChessEngine:
    return ChessEngine(config=EngineConfig(time_source=fixed_clock))


@pytest.fixture
def play() -> Callable[[ChessEngine, str], None]:
    """Play space-separated UCI moves, failing loudly on a rejected one."""

    def _play(engine: ChessEngine, moves: str) -> None:
        for uci in moves.split():
            promotion = uci[4:] or None
            record = engine.make_move(uci[:2], uci[2:4], promotion)
            assert record is not None, f"move {uci} rejected at {engine.get_fen()}"

    return _play
