"""Helper utilities for building parsed move records in tests."""

from typing import Any, Dict, List


def record(notation: str, *variations: List[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    """Create a parser-shaped move record.

    Args:
        notation: SAN text.
        variations: Alternative lines, each a list of records.
        fields: Optional parser fields (nag, commentMove, commentAfter, commentDiag, drawOffer).

    Returns:
        Dictionary in the shape produced by the PGN parser.
    """
    data = {"notation": {"notation": notation}, "variations": list(variations)}
    data.update(fields)
    return data


def line(*sans: str) -> List[Dict[str, Any]]:
    """Create a line of plain records from SAN strings."""
    return [record(san) for san in sans]


def sans(moves) -> List[str]:
    """Return the SAN strings of a list of moves."""
    return [move.san for move in moves]


def structure(moves) -> List[Any]:
    """Describe a line as nested SAN lists, e.g. ["e4", ["d4"], "e5"]."""
    result = []
    for move in moves:
        result.append(move.san)
        for variation in move.variations:
            result.append(structure(variation))
    return result
