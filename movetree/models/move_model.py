"""Move model for holding the nodes of a move history tree."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


# Notation accepted by the engine: SAN text or a {"from", "to", "promotion"} mapping
Notation = Union[str, Mapping[str, str]]

# Diagram comment keys used by the external PGN parser
KEY_COLOR_ARROWS = "colorArrows"
KEY_COLOR_FIELDS = "colorFields"
KEY_COMMENT = "comment"
KEY_CHESSCOM_HIGHLIGHT = "c_highlight"
KEY_CHESSCOM_ARROW = "c_arrow"


class PgnMoveFormatError(ValueError):
    """Raised when a parsed move record is missing required fields."""


@dataclass
class DiagramComment:
    """Structured comment directives attached to a move.

    Holds colored arrows ("Ge2e4") and colored fields ("Rd5"), the prose
    comment the parser found next to the directives, and any other
    [%key value] command (clk, eval, ...) in the order it was read.
    """
    color_arrows: List[str] = field(default_factory=list)
    color_fields: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    commands: Dict[str, str] = field(default_factory=dict)
    # Proprietary chess.com encodings, consumed by AnnotationService.normalize()
    highlight_encoding: Optional[str] = None
    arrow_encoding: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'DiagramComment':
        """Create a diagram comment from the parser's key/value map.

        Args:
            data: Mapping with optional colorArrows, colorFields, comment,
                c_highlight and c_arrow keys. Every other key is kept as a command.

        Returns:
            DiagramComment instance.
        """
        diag = cls()
        for key, value in data.items():
            if key == KEY_COLOR_ARROWS:
                diag.color_arrows = list(value or [])
            elif key == KEY_COLOR_FIELDS:
                diag.color_fields = list(value or [])
            elif key == KEY_COMMENT:
                diag.comment = value
            elif key == KEY_CHESSCOM_HIGHLIGHT:
                diag.highlight_encoding = value
            elif key == KEY_CHESSCOM_ARROW:
                diag.arrow_encoding = value
            elif value is not None:
                diag.commands[key] = str(value)
        return diag

    def has_proprietary_encoding(self) -> bool:
        """Return True if chess.com highlight or arrow data is still present."""
        return bool(self.highlight_encoding or self.arrow_encoding)

    def has_directives(self) -> bool:
        """Return True if anything besides prose would be rendered."""
        if self.color_arrows or self.color_fields:
            return True
        return any(value for value in self.commands.values())


@dataclass
class PgnMove:
    """A single move record as delivered by the PGN parser.

    `variations` holds alternative lines to this move, each an ordered
    list of PgnMove records starting at this move's ply.
    """
    notation: str
    variations: List[List['PgnMove']] = field(default_factory=list)
    draw_offer: bool = False
    nags: Optional[List[str]] = None
    comment_move: Optional[str] = None
    comment_after: Optional[str] = None
    comment_diag: Optional[DiagramComment] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PgnMove':
        """Create a move record from the parser's duck-typed dictionary shape.

        Args:
            data: Mapping with "notation" (either SAN text or {"notation": SAN}),
                "variations" and the optional drawOffer, nag, commentMove,
                commentAfter and commentDiag fields.

        Returns:
            PgnMove instance with nested variations converted recursively.

        Raises:
            PgnMoveFormatError: If the record carries no notation text.
        """
        if not isinstance(data, Mapping):
            raise PgnMoveFormatError(f"Move record must be a mapping, got {type(data).__name__}")

        notation = data.get("notation")
        if isinstance(notation, Mapping):
            notation = notation.get("notation")
        if not isinstance(notation, str) or not notation.strip():
            raise PgnMoveFormatError(f"Move record has no notation: {dict(data)!r}")

        nags = data.get("nag", data.get("nags"))
        comment_diag = data.get("commentDiag")
        if isinstance(comment_diag, Mapping):
            comment_diag = DiagramComment.from_dict(comment_diag)

        return cls(
            notation=notation.strip(),
            variations=[cls.from_records(line) for line in data.get("variations") or []],
            draw_offer=bool(data.get("drawOffer", False)),
            nags=list(nags) if nags else None,
            comment_move=data.get("commentMove"),
            comment_after=data.get("commentAfter"),
            comment_diag=comment_diag,
        )

    @classmethod
    def from_records(cls, records: Iterable[Union['PgnMove', Mapping[str, Any]]]) -> List['PgnMove']:
        """Convert a sequence of records (PgnMove or dict) into PgnMove instances."""
        return [record if isinstance(record, PgnMove) else cls.from_dict(record) for record in records]


@dataclass(eq=False)
class Move:
    """One ply in the move history tree.

    Position and derived state are fixed when the move is created. The tree
    linkage is mutated only by appending: `next` is written once, `variation`
    is the list this move belongs to (shared with its siblings) and
    `variations` holds the alternative lines branching after this move.
    """
    ply: int
    fen: str
    uci: str
    san: str
    color: str
    from_square: str
    to_square: str
    piece: str
    lan: str = ""
    before: str = ""
    captured: Optional[str] = None
    promotion: Optional[str] = None

    game_over: bool = False
    is_draw: bool = False
    is_stalemate: bool = False
    is_insufficient_material: bool = False
    is_threefold_repetition: bool = False
    is_checkmate: bool = False
    in_check: bool = False
    material_difference: int = 0

    draw_offer: bool = False
    nags: Optional[List[str]] = None
    comment_move: Optional[str] = None
    comment_after: Optional[str] = None
    comment_diag: Optional[DiagramComment] = None

    previous: Optional['Move'] = field(default=None, repr=False)
    next: Optional['Move'] = field(default=None, repr=False)
    variation: List['Move'] = field(default_factory=list, repr=False)
    variations: List[List['Move']] = field(default_factory=list, repr=False)

    def link_next(self, move: 'Move') -> bool:
        """Set the mainline continuation unless one is already set.

        Args:
            move: Candidate continuation.

        Returns:
            True if `move` became the continuation, False if one already existed.
        """
        if self.next is not None:
            return False
        self.next = move
        return True
