"""PGN parsing service converting movetext into parsed move records."""

import io
import re
from typing import List, Optional, Tuple

import chess.pgn

from movetree.models.history_model import History
from movetree.models.move_model import DiagramComment, PgnMove
from movetree.services.logging_service import LoggingService


# Matches embedded commands like [%clk 0:05:00], [%cal Ge2e4,Rd1d8]
_COMMAND_RE = re.compile(r'\[%(\w+)\s+([^\]]*)\]')


class MovetextParseResult:
    """Result of parsing PGN movetext."""

    def __init__(self, success: bool, moves: Optional[List[PgnMove]] = None,
                 errors: Optional[List[str]] = None, error_message: str = "") -> None:
        """Initialize parse result.

        Args:
            success: True if a game could be read, False otherwise.
            moves: Parsed mainline records with nested variations.
            errors: Errors python-chess reported while reading (e.g., illegal moves).
            error_message: Error message if parsing failed.
        """
        self.success = success
        self.moves = moves if moves is not None else []
        self.errors = errors if errors is not None else []
        self.error_message = error_message


class PgnService:
    """Service for turning PGN movetext into parsed move records.

    python-chess does the tokenizing; this service maps its game tree onto
    the record shape the move tree builder consumes.
    """

    @staticmethod
    def parse_movetext(movetext: str, setup_fen: Optional[str] = None) -> MovetextParseResult:
        """Parse movetext into move records.

        Args:
            movetext: PGN movetext (tag pairs are allowed but ignored).
            setup_fen: Starting position of the movetext, or None for the standard start.

        Returns:
            MovetextParseResult with the parsed records or an error message.
        """
        if movetext is None or not movetext.strip():
            return MovetextParseResult(True)

        pgn_text = movetext
        if setup_fen:
            pgn_text = f'[SetUp "1"]\n[FEN "{setup_fen}"]\n\n{movetext.strip()}'

        game = chess.pgn.read_game(io.StringIO(pgn_text))
        if game is None:
            return MovetextParseResult(False, error_message="No game found in movetext")

        errors = [str(error) for error in game.errors]
        if not game.variations:
            return MovetextParseResult(True, errors=errors)

        moves = PgnService._convert_line(game.variations[0], is_side_line=False,
                                         leading_comment=game.comment)
        return MovetextParseResult(True, moves=moves, errors=errors)

    @staticmethod
    def load_history(movetext: str, setup_fen: Optional[str] = None, lenient: bool = False) -> History:
        """Parse movetext and build a History from it.

        Args:
            movetext: PGN movetext.
            setup_fen: Starting position, or None for the standard start.
            lenient: Accept non-standard SAN while building.

        Returns:
            Built History.

        Raises:
            ValueError: If the movetext cannot be read at all.
        """
        result = PgnService.parse_movetext(movetext, setup_fen)
        if not result.success:
            raise ValueError(result.error_message)

        if result.errors:
            logging_service = LoggingService.get_instance()
            for error in result.errors:
                logging_service.warning(f"PGN reader error: {error}")

        return History(result.moves, setup_fen=setup_fen, lenient=lenient)

    @staticmethod
    def _convert_line(first: chess.pgn.ChildNode, is_side_line: bool,
                      leading_comment: str = "") -> List[PgnMove]:
        """Convert a line of nodes starting at `first` into records.

        Siblings of a main child become the variations of that child's record.
        The first node of a side line has its siblings handled by the main child.

        Args:
            first: First node of the line.
            is_side_line: True if `first` is not its parent's main child.
            leading_comment: Comment placed before the first move of the game.

        Returns:
            Records of the line.
        """
        records = []
        node = first
        while node is not None:
            record = PgnService._convert_node(node)
            if node is first:
                comment_move = node.starting_comment if is_side_line else leading_comment
                record.comment_move = comment_move or None
            if node is not first or not is_side_line:
                record.variations = [
                    PgnService._convert_line(sibling, is_side_line=True)
                    for sibling in node.parent.variations[1:]
                ]
            records.append(record)
            node = node.variations[0] if node.variations else None
        return records

    @staticmethod
    def _convert_node(node: chess.pgn.ChildNode) -> PgnMove:
        """Convert a single node (without variations) into a record."""
        comment_after, comment_diag = PgnService.split_comment(node.comment)
        nags = [f"${nag}" for nag in sorted(node.nags)]
        return PgnMove(
            notation=node.san(),
            nags=nags or None,
            comment_after=comment_after,
            comment_diag=comment_diag,
        )

    @staticmethod
    def split_comment(text: Optional[str]) -> Tuple[Optional[str], Optional[DiagramComment]]:
        """Separate [%key value] commands from the prose of a comment.

        Args:
            text: Raw comment text.

        Returns:
            Tuple of (prose or None, DiagramComment or None if there were no commands).
        """
        if not text:
            return None, None

        diag = DiagramComment()
        for match in _COMMAND_RE.finditer(text):
            key, value = match.group(1), match.group(2).strip()
            if key == 'cal':
                diag.color_arrows.extend(entry for entry in value.split(',') if entry)
            elif key == 'csl':
                diag.color_fields.extend(entry for entry in value.split(',') if entry)
            else:
                diag.commands[key] = value

        prose = ' '.join(_COMMAND_RE.sub(' ', text).split()) or None
        if not diag.has_directives():
            return prose, None

        diag.comment = prose
        return prose, diag
