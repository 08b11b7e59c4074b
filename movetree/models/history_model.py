"""History model holding the move tree of a single game."""

from PyQt6.QtCore import QObject, pyqtSignal
from typing import Any, List, Mapping, Optional, Sequence, Union

from movetree.models.move_model import Move, Notation, PgnMove
from movetree.services.logging_service import LoggingService
from movetree.services.move_engine_service import InvalidMoveError, MoveEngineService
from movetree.services.move_tree_builder import BuildError, MoveTreeBuilder
from movetree.services.movetext_renderer import MovetextRenderer
from movetree.utils.fen_utils import setup_ply_from_fen


class History(QObject):
    """Model representing the move history of a game as a tree.

    `moves` is the mainline; every move links to its continuation (`next`)
    and to the alternative lines branching after it (`variations`). Moves
    are added through add_move() and never removed, and the model emits
    signals so observers can follow edits.
    """

    # Signals emitted when the history changes
    move_added = pyqtSignal(object)  # Emitted after add_move() (Move)
    history_cleared = pyqtSignal()  # Emitted after clear()

    def __init__(self, moves: Optional[Sequence[Union[PgnMove, Mapping[str, Any]]]] = None,
                 setup_fen: Optional[str] = None, lenient: bool = False) -> None:
        """Build the history from parsed move records.

        Args:
            moves: Parsed move records with nested variations, or None for an empty history.
            setup_fen: Starting position, or None for the standard starting position.
            lenient: Accept non-standard SAN while building.

        Raises:
            ValueError: If setup_fen is malformed.
        """
        super().__init__()
        self.setup_fen = setup_fen
        self.setup_ply = setup_ply_from_fen(setup_fen)
        self.moves: List[Move] = []
        self.build_errors: List[BuildError] = []

        if moves:
            builder = MoveTreeBuilder(lenient=lenient)
            self.moves = builder.build(moves, setup_fen, self.setup_ply)
            self.build_errors = builder.errors

    def clear(self) -> None:
        """Remove all moves."""
        self.moves = []
        self.history_cleared.emit()

    def history_to_move(self, move: Move) -> List[Move]:
        """Get the moves leading to a move, which may be inside a variation.

        Args:
            move: Target move.

        Returns:
            Moves from the first move of the game up to and including `move`.
        """
        moves = [move]
        pointer = move
        while pointer.previous is not None:
            pointer = pointer.previous
            moves.append(pointer)
        moves.reverse()
        return moves

    def validate_move(self, notation: Notation, previous: Optional[Move] = None,
                      lenient: bool = True) -> Optional[Move]:
        """Check a move without adding it.

        Args:
            notation: SAN string or {"from", "to", "promotion"} mapping.
            previous: Move after which the move is played, or None for the setup position.
            lenient: Accept non-standard SAN.

        Returns:
            The unlinked Move if legal, None otherwise.
        """
        engine = MoveEngineService(previous.fen if previous is not None else self.setup_fen)
        try:
            result = engine.move(notation, strict=not lenient)
        except InvalidMoveError as e:
            LoggingService.get_instance().debug(f"Move validation failed: {e}")
            return None

        ply = previous.ply + 1 if previous is not None else self.setup_ply
        return MoveTreeBuilder.create_move(ply, result, engine)

    def add_move(self, notation: Notation, previous: Optional[Move] = None,
                 lenient: bool = True) -> Move:
        """Add a move after `previous`.

        If `previous` has no continuation the move extends its line. If it
        already has one, the move starts a new variation of that continuation.
        Without `previous` the move is the first move of the game, or an
        alternative first move when the history is not empty.

        Args:
            notation: SAN string or {"from", "to", "promotion"} mapping.
            previous: Move after which the move is played, or None.
            lenient: Accept non-standard SAN.

        Returns:
            The added Move.

        Raises:
            InvalidMoveError: If the move is not legal.
        """
        move = self.validate_move(notation, previous, lenient)
        if move is None:
            raise InvalidMoveError(f"invalid move: {notation!r}")

        move.previous = previous
        if previous is not None:
            if previous.next is not None:
                variation: List[Move] = []
                previous.next.variations.append(variation)
                move.variation = variation
            else:
                previous.next = move
                move.variation = previous.variation
        elif self.moves:
            variation = []
            self.moves[0].variations.append(variation)
            move.variation = variation
        else:
            move.variation = self.moves
        move.variation.append(move)

        self.move_added.emit(move)
        return move

    def render(self, render_comments: bool = True, render_nags: bool = True) -> str:
        """Render the whole tree as PGN movetext.

        Args:
            render_comments: Include comments and diagram annotations.
            render_nags: Include numeric annotation glyphs.

        Returns:
            Movetext string without tag pairs.
        """
        renderer = MovetextRenderer(render_comments=render_comments, render_nags=render_nags)
        return renderer.render(self.moves)
