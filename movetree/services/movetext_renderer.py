"""Renderer that serializes a move tree into PGN movetext."""

import re
from typing import List

from movetree.models.move_model import Move
from movetree.services.annotation_service import AnnotationService


_SPACE_BEFORE_CLOSE_RE = re.compile(r'\s+\)')
_MULTIPLE_SPACES_RE = re.compile(r' {2,}')


class MovetextRenderer:
    """Renders a line of moves with its variations, comments and NAGs.

    Black moves get an "N..." move number at the start of a line and after
    a text comment or a variation. Diagram commands do not interrupt the
    move sequence.
    """

    def __init__(self, render_comments: bool = True, render_nags: bool = True) -> None:
        """Initialize the renderer.

        Args:
            render_comments: Emit move comments and diagram comments.
            render_nags: Emit numeric annotation glyphs.
        """
        self.render_comments = render_comments
        self.render_nags = render_nags

    def render(self, moves: List[Move]) -> str:
        """Render a mainline (and everything branching from it) as movetext.

        Args:
            moves: Mainline moves.

        Returns:
            Movetext without tag pairs or result, e.g. "1. e4 e5 2. Nf3 (2. Bc4 Nc6) 2... Nc6".
        """
        result = self._render_line(moves)
        result = _SPACE_BEFORE_CLOSE_RE.sub(')', result)
        result = _MULTIPLE_SPACES_RE.sub(' ', result)
        return result.strip()

    def _render_line(self, line: List[Move]) -> str:
        """Render one line; variations recurse into this method."""
        result = ''
        need_reminder = False

        for move in line:
            if self.render_comments and move.comment_move:
                result += f"{{ {move.comment_move} }} "
                need_reminder = True

            if move.ply % 2 == 1:
                result += f"{move.ply // 2 + 1}. "
            elif not result or need_reminder:
                result += f"{move.ply // 2}... "
            need_reminder = False

            result += move.san + ' '

            if self.render_nags and move.nags:
                result += ' '.join(move.nags) + ' '

            if self.render_comments and move.comment_after:
                result += f"{{ {move.comment_after} }} "
                need_reminder = True

            if self.render_comments and move.comment_diag:
                result += AnnotationService.render_commands(move.comment_diag)

            for variation in move.variations:
                result += '(' + self._render_line(variation) + ') '
                need_reminder = True

            result += ' '

        return result
