"""Square type alias and coordinate helpers.

Board layout (row-major, row 0 is rank 8, matching FEN order):
    a8=0,  b8=1,  ..., h8=7
    a7=8,  b7=9,  ..., h7=15
    ...
    a1=56, b1=57, ..., h1=63

``row`` grows as the rank drops; ``col`` is the file index (a=0).
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int  # 0–63

FILES = "abcdefgh"
RANKS = "12345678"


def row_of(sq: Square) -> int:
    """Row index 0–7 (0 = rank 8)."""
    return sq >> 3


def col_of(sq: Square) -> int:
    """Column index 0–7 (0 = file a)."""
    return sq & 7


def file_of(sq: Square) -> int:
    """File index 0–7 (a–h)."""
    return sq & 7


def rank_of(sq: Square) -> int:
    """Rank index 0–7 (1–8)."""
    return 7 - (sq >> 3)


def make_square(row: int, col: int) -> Square:
    """Create square from row (0 = rank 8) and column (0 = file a)."""
    return row * 8 + col


def square_from_file_rank(file: int, rank: int) -> Square:
    """Create square from file (0–7) and rank index (0–7)."""
    return make_square(7 - rank, file)


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. 0 → 'a8', 63 → 'h1'."""
    return FILES[file_of(sq)] + RANKS[rank_of(sq)]


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → 36."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    return square_from_file_rank(FILES.index(name[0]), RANKS.index(name[1]))


def square_to_index(name: str) -> tuple[int, int]:
    """Algebraic name → ``(row, col)``, e.g. 'a8' → (0, 0)."""
    sq = parse_square(name)
    return row_of(sq), col_of(sq)


def index_to_square(row: int, col: int) -> str:
    """``(row, col)`` → algebraic name, e.g. (7, 4) → 'e1'."""
    if not (0 <= row < 8 and 0 <= col < 8):
        raise ValueError(f"Invalid board index: {(row, col)!r}")
    return square_name(make_square(row, col))


# ── Named square constants ──────────────────────────────────────────────────

A8, B8, C8, D8, E8, F8, G8, H8 = range(0, 8)
A7, B7, C7, D7, E7, F7, G7, H7 = range(8, 16)
A6, B6, C6, D6, E6, F6, G6, H6 = range(16, 24)
A5, B5, C5, D5, E5, F5, G5, H5 = range(24, 32)
A4, B4, C4, D4, E4, F4, G4, H4 = range(32, 40)
A3, B3, C3, D3, E3, F3, G3, H3 = range(40, 48)
A2, B2, C2, D2, E2, F2, G2, H2 = range(48, 56)
A1, B1, C1, D1, E1, F1, G1, H1 = range(56, 64)
