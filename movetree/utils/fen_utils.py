"""Utility functions for reading move-number fields from FEN strings."""

from typing import Optional, Tuple


def parse_fen_move_fields(fen: str) -> Tuple[int, str]:
    """Read the active color and full move number of a FEN string.

    Only these two fields are inspected; the piece placement is not validated.

    Args:
        fen: FEN string (e.g., "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1").

    Returns:
        Tuple of (move_number, color_to_play) where color_to_play is "w" or "b".

    Raises:
        ValueError: If the FEN has fewer than six fields, an unknown color or
            a move number that is not a positive integer.
    """
    fields = fen.split()
    if len(fields) < 6:
        raise ValueError(f"FEN must have 6 fields, got {len(fields)}: {fen!r}")

    color = fields[1]
    if color not in ("w", "b"):
        raise ValueError(f"Invalid active color {color!r} in FEN: {fen!r}")

    try:
        move_number = int(fields[5])
    except ValueError:
        raise ValueError(f"Invalid move number {fields[5]!r} in FEN: {fen!r}") from None
    if move_number < 1:
        raise ValueError(f"Move number must be positive in FEN: {fen!r}")

    return move_number, color


def setup_ply_from_fen(fen: Optional[str]) -> int:
    """Return the ply of the first move played from a setup position.

    White to move gives an odd ply, black to move an even ply
    (e.g., black to move at move 10 is ply 20).

    Args:
        fen: Setup FEN, or None for the standard starting position.

    Returns:
        1-based ply number.
    """
    if not fen:
        return 1
    move_number, color = parse_fen_move_fields(fen)
    ply = 2 * move_number
    if color == "w":
        ply -= 1
    return ply
