"""PGN export helpers."""

from __future__ import annotations

import datetime as dt

from chessplatform.core.enums import GameResult

SEVEN_TAG_ROSTER: tuple[str, ...] = (
    "Event",
    "Site",
    "Date",
    "Round",
    "White",
    "Black",
    "Result",
)


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    if result == GameResult.WHITE_WINS:
        return "1-0"
    if result == GameResult.BLACK_WINS:
        return "0-1"
    if result == GameResult.DRAW:
        return "1/2-1/2"
    return "*"


def pgn_date(day: dt.date | None = None) -> str:
    """PGN ``Date`` tag value, e.g. ``2026.02.26``."""
    day = day or dt.date.today()
    return day.strftime("%Y.%m.%d")


def seven_tag_roster(
    *,
    event: str,
    site: str,
    date: str,
    round_: str,
    white: str,
    black: str,
    result_token: str,
) -> dict[str, str]:
    """Mandatory PGN headers in their standard order."""
    values = (event, site, date, round_, white, black, result_token)
    return dict(zip(SEVEN_TAG_ROSTER, values))


def pgn_movetext_from_sans(
    sans: list[str],
    result_token: str,
    first_move_number: int = 1,
    black_moves_first: bool = False,
) -> str:
    """Build PGN movetext from SAN moves and a result token.

    Moves are grouped by move number (``1. e4 e5 2. Nf3``). A game that
    starts with Black to move opens with ``N...``.
    """
    parts: list[str] = []
    offset = 1 if black_moves_first else 0
    for idx, san in enumerate(sans):
        ply = idx + offset
        move_number = first_move_number + ply // 2
        if ply % 2 == 0:
            parts.append(f"{move_number}.")
        elif idx == 0:
            parts.append(f"{move_number}...")
        parts.append(san)
    parts.append(result_token)
    return " ".join(parts)


def build_pgn(
    headers: dict[str, str],
    sans: list[str],
    result_token: str,
    first_move_number: int = 1,
    black_moves_first: bool = False,
) -> str:
    """Build a single-game PGN document."""
    lines: list[str] = []
    for key, value in headers.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    lines.append("")
    lines.append(
        pgn_movetext_from_sans(sans, result_token, first_move_number, black_moves_first)
    )
    lines.append("")
    return "\n".join(lines)
