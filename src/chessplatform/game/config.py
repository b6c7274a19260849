"""Engine configuration."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from chessplatform.core.enums import RepetitionMode


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Per-engine settings.

    Args:
        repetition_mode: How positions are compared for the repetition draw.
        time_source: Returns the timestamp stored on every executed move.
        event, site, white_name, black_name: PGN header defaults.
    """

    repetition_mode: RepetitionMode = RepetitionMode.POSITION
    time_source: Callable[[], float] = time.time
    event: str = "Chess Platform Game"
    site: str = "Chess Platform"
    round_: str = "1"
    white_name: str = "White Player"
    black_name: str = "Black Player"
