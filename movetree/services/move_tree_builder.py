"""Builder that turns parsed PGN move records into a linked move tree."""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from movetree.models.move_model import Move, PgnMove
from movetree.services.annotation_service import AnnotationService
from movetree.services.logging_service import LoggingService
from movetree.services.move_engine_service import InvalidMoveError, MoveEngineService, MoveResult
from movetree.utils.material_tracker import calculate_material_difference


@dataclass
class BuildError:
    """A line that was discarded because one of its moves was illegal."""
    ply: int
    notation: str
    message: str


class MoveTreeBuilder:
    """Builds the mainline and all nested variations from parsed move records.

    Every line is replayed on its own MoveEngineService. A line containing an
    illegal move is dropped as a whole and reported in `errors`; its parent
    and sibling lines are still built.
    """

    def __init__(self, lenient: bool = False) -> None:
        """Initialize the builder.

        Args:
            lenient: Accept non-standard SAN (over-disambiguation, UCI text).
        """
        self.lenient = lenient
        self.errors: List[BuildError] = []

    def build(self, records: Sequence[Union[PgnMove, Mapping[str, Any]]],
              fen: Optional[str] = None, ply: int = 1) -> List[Move]:
        """Build the mainline for a sequence of move records.

        Args:
            records: Parsed move records (PgnMove instances or parser dictionaries).
            fen: Starting position, or None for the standard starting position.
            ply: Ply of the first move.

        Returns:
            The mainline moves (empty if the mainline itself contained an illegal move).
        """
        return self._traverse(PgnMove.from_records(records), fen, None, ply)

    def _traverse(self, records: List[PgnMove], fen: Optional[str],
                  parent: Optional[Move], ply: int) -> List[Move]:
        """Build one line, recursing into the variations of each record.

        Args:
            records: Records of this line.
            fen: Position before the first move of this line.
            parent: Move the line branches from (None at the start of the game).
            ply: Ply of the first move of this line.

        Returns:
            Moves of the line, or an empty list if any move was illegal.
        """
        moves: List[Move] = []
        engine = MoveEngineService(fen)
        previous = parent

        for record in records:
            try:
                result = engine.move(record.notation, strict=not self.lenient)
            except InvalidMoveError as e:
                self._report_failure(ply, record.notation, e)
                return []

            move = self.create_move(ply, result, engine, record)
            if previous is not None:
                move.previous = previous
                previous.link_next(move)

            if record.variations:
                # Variations replace this move, so they start from the position before it
                last_fen = moves[-1].fen if moves else fen
                for parsed_variation in record.variations:
                    variation = self._traverse(parsed_variation, last_fen, previous, ply)
                    if variation:
                        move.variations.append(variation)

            move.variation = moves
            moves.append(move)
            previous = move
            ply += 1

        return moves

    def _report_failure(self, ply: int, notation: str, error: InvalidMoveError) -> None:
        """Record and log a discarded line."""
        self.errors.append(BuildError(ply=ply, notation=notation, message=str(error)))
        logging_service = LoggingService.get_instance()
        logging_service.warning(f"Discarded line at ply {ply} ({notation}): {error}")

    @staticmethod
    def create_move(ply: int, result: MoveResult, engine: MoveEngineService,
                    record: Optional[PgnMove] = None) -> Move:
        """Create a move node with its derived state.

        Args:
            ply: Ply of the move.
            result: Result of applying the move to the engine.
            engine: Engine positioned after the move (queried for game state).
            record: Parsed record supplying comments, NAGs and draw offer, if any.

        Returns:
            Unlinked Move.
        """
        move = Move(
            ply=ply,
            fen=result.after,
            uci=result.uci,
            san=result.san,
            color=result.color,
            from_square=result.from_square,
            to_square=result.to_square,
            piece=result.piece,
            lan=result.lan,
            before=result.before,
            captured=result.captured,
            promotion=result.promotion,
            game_over=engine.is_game_over(),
            is_draw=engine.is_draw(),
            is_stalemate=engine.is_stalemate(),
            is_insufficient_material=engine.is_insufficient_material(),
            is_threefold_repetition=engine.is_threefold_repetition(),
            is_checkmate=engine.is_checkmate(),
            in_check=engine.in_check(),
            material_difference=calculate_material_difference(result.after),
        )

        if record is not None:
            move.draw_offer = record.draw_offer
            move.nags = list(record.nags) if record.nags else None
            move.comment_move = record.comment_move
            move.comment_after = record.comment_after
            move.comment_diag = AnnotationService.normalize(record.comment_diag)

        return move
