"""Game management layer: engine facade, game state, configuration.

Quick start::

    from chessplatform.game import ChessEngine

    engine = ChessEngine()
    engine.make_move("e2", "e4")
    print(engine.get_fen())
"""

from chessplatform.game.config import EngineConfig
from chessplatform.game.engine import ChessEngine, GameEvents, LegalTarget
from chessplatform.game.state import GameState, MoveRecord, NotationEntry

__all__ = [
    "ChessEngine",
    "EngineConfig",
    "GameEvents",
    "GameState",
    "LegalTarget",
    "MoveRecord",
    "NotationEntry",
]
