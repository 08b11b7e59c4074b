"""Move history tree for chess games with PGN movetext rendering."""

from movetree.models.history_model import History
from movetree.models.move_model import DiagramComment, Move, PgnMove, PgnMoveFormatError
from movetree.services.move_engine_service import InvalidMoveError
from movetree.services.move_tree_builder import BuildError

__all__ = [
    'BuildError',
    'DiagramComment',
    'History',
    'InvalidMoveError',
    'Move',
    'PgnMove',
    'PgnMoveFormatError',
]
