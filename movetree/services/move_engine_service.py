"""Move engine service wrapping python-chess for move validation."""

import re
from dataclasses import dataclass
from typing import Mapping, Optional

import chess

from movetree.models.move_model import Notation


# Move quality suffixes ("!", "?!") are not part of SAN
_ANNOTATION_SUFFIX_RE = re.compile(r"[?!]+$")
# Check, mate and annotation suffixes ignored when comparing SAN strictly
_SAN_SUFFIX_RE = re.compile(r"[+#]?[?!]*$")


class InvalidMoveError(ValueError):
    """Raised when a notation does not describe a legal move in the position."""


@dataclass
class MoveResult:
    """Result of applying one move to the engine."""
    color: str
    from_square: str
    to_square: str
    piece: str
    san: str
    lan: str
    before: str
    after: str
    captured: Optional[str] = None
    promotion: Optional[str] = None

    @property
    def uci(self) -> str:
        return self.from_square + self.to_square + (self.promotion or "")


def _strip_san(san: str) -> str:
    return _SAN_SUFFIX_RE.sub('', san).replace('=', '')


class MoveEngineService:
    """Stateful rules engine for a single line of play.

    Each instance owns its own chess.Board seeded at a position, so the
    repetition history it sees is the history of the moves applied to it.
    """

    def __init__(self, fen: Optional[str] = None) -> None:
        """Initialize the engine.

        Args:
            fen: Starting position, or None for the standard starting position.
        """
        self._board = chess.Board(fen) if fen else chess.Board()

    def fen(self) -> str:
        return self._board.fen()

    def load(self, fen: str) -> None:
        """Reset the engine to a position, discarding the move history.

        Args:
            fen: FEN string of the position.
        """
        self._board.set_fen(fen)

    def move(self, notation: Notation, strict: bool = True) -> MoveResult:
        """Apply a move given as SAN text or as a from/to/promotion mapping.

        Args:
            notation: SAN string (e.g., "Nf3") or mapping {"from": "g1", "to": "f3", "promotion": "q"}.
            strict: If True, SAN must match the engine's SAN exactly (ignoring
                check and annotation suffixes). If False, over-disambiguated SAN,
                "0-0" castling and UCI text ("e2e4") are accepted as well.

        Returns:
            MoveResult describing the applied move.

        Raises:
            InvalidMoveError: If the notation is malformed, ambiguous or illegal.
        """
        if isinstance(notation, Mapping):
            move = self._move_from_mapping(notation)
        else:
            san = _ANNOTATION_SUFFIX_RE.sub("", str(notation).strip())
            move = self._move_from_san(san, strict)

        board = self._board
        before = board.fen()
        moving_piece = board.piece_at(move.from_square)
        captured_type = None
        if board.is_en_passant(move):
            captured_type = chess.PAWN
        elif board.is_capture(move):
            captured_piece = board.piece_at(move.to_square)
            captured_type = captured_piece.piece_type if captured_piece else None

        san = board.san(move)
        lan = board.lan(move)
        board.push(move)

        return MoveResult(
            color="w" if moving_piece.color == chess.WHITE else "b",
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
            piece=chess.piece_symbol(moving_piece.piece_type),
            san=san,
            lan=lan,
            before=before,
            after=board.fen(),
            captured=chess.piece_symbol(captured_type) if captured_type else None,
            promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
        )

    def _move_from_san(self, san: str, strict: bool) -> chess.Move:
        """Resolve SAN (or UCI in lenient mode) to a legal move."""
        board = self._board
        try:
            move = board.parse_san(san)
        except ValueError as e:
            if strict:
                raise InvalidMoveError(f"Invalid move {san!r} in {board.fen()}: {e}") from e
            move = self._move_from_uci(san, e)

        if not move:
            raise InvalidMoveError(f"Null move {san!r} is not allowed")

        if strict and _strip_san(board.san(move)) != _strip_san(san):
            raise InvalidMoveError(
                f"Non-standard SAN {san!r} (expected {board.san(move)!r}) in {board.fen()}"
            )
        return move

    def _move_from_uci(self, text: str, san_error: ValueError) -> chess.Move:
        """Resolve lenient UCI text to a legal move."""
        try:
            return self._board.parse_uci(text.lower())
        except ValueError:
            raise InvalidMoveError(f"Invalid move {text!r} in {self._board.fen()}: {san_error}") from san_error

    def _move_from_mapping(self, notation: Mapping[str, str]) -> chess.Move:
        """Resolve a {"from", "to", "promotion"} mapping to a legal move."""
        try:
            from_square = chess.parse_square(notation["from"])
            to_square = chess.parse_square(notation["to"])
            promotion = notation.get("promotion")
            promotion_type = chess.PIECE_SYMBOLS.index(promotion.lower()) if promotion else None
        except (KeyError, ValueError, AttributeError) as e:
            raise InvalidMoveError(f"Invalid move descriptor {dict(notation)!r}: {e}") from e

        move = chess.Move(from_square, to_square, promotion=promotion_type)
        if not self._board.is_legal(move):
            raise InvalidMoveError(f"Illegal move {move.uci()} in {self._board.fen()}")
        return move

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self._board.is_stalemate()

    def is_insufficient_material(self) -> bool:
        return self._board.is_insufficient_material()

    def is_threefold_repetition(self) -> bool:
        return self._board.is_repetition(3)

    def in_check(self) -> bool:
        return self._board.is_check()

    def is_draw(self) -> bool:
        """Return True for fifty-move rule, stalemate, insufficient material or threefold repetition."""
        return (
            self._board.halfmove_clock >= 100
            or self.is_stalemate()
            or self.is_insufficient_material()
            or self.is_threefold_repetition()
        )

    def is_game_over(self) -> bool:
        return self.is_checkmate() or self.is_draw()
