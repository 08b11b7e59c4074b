"""Service for normalizing and rendering diagram comment annotations."""

from typing import Any, List, Mapping, Optional, Union

from movetree.models.move_model import DiagramComment


# chess.com stores the modifier key held while drawing; PGN uses a color letter
KEYPRESS_COLORS = {
    'shift': 'G',
    'ctrl': 'Y',
    'alt': 'B',
    'none': 'R',
}
DEFAULT_COLOR = 'R'

CLOCK_COMMAND = 'clk'


class AnnotationService:
    """Service for converting arrow/highlight annotations to and from PGN.

    The import direction turns chess.com "keypress" encoded highlights and
    arrows into canonical [%csl]/[%cal] entries. The render direction turns a
    canonical DiagramComment back into PGN brace-comment text.
    """

    @staticmethod
    def color_from_keypress(keypress: Optional[str]) -> str:
        """Map a chess.com modifier key to a color letter.

        Args:
            keypress: Modifier key token ("shift", "ctrl", "alt", "none") or None.

        Returns:
            Color letter (G, Y, B or R). Unknown tokens map to R.
        """
        return KEYPRESS_COLORS.get(keypress, DEFAULT_COLOR)

    @staticmethod
    def normalize(comment_diag: Optional[Union[DiagramComment, Mapping[str, Any]]]) -> Optional[DiagramComment]:
        """Translate proprietary highlight/arrow encodings into color fields and arrows.

        Entries are comma-separated, each "squares;<unused>;keypress". Square
        entries become "<color><square>" in color_fields, arrow entries become
        "<color><from><to>" in color_arrows. The proprietary fields are consumed:
        they are cleared once translated, so rendering never emits a raw
        [%c_highlight ...] or [%c_arrow ...] command next to the translated
        [%csl ...] and [%cal ...]. Everything else is left untouched.

        Args:
            comment_diag: DiagramComment, the parser's key/value map, or None.

        Returns:
            The normalized DiagramComment (the same instance when one was passed), or None.
        """
        if comment_diag is None:
            return None
        if not isinstance(comment_diag, DiagramComment):
            comment_diag = DiagramComment.from_dict(comment_diag)

        if not comment_diag.has_proprietary_encoding():
            return comment_diag

        if comment_diag.highlight_encoding:
            comment_diag.color_fields.extend(
                AnnotationService._decode_entries(comment_diag.highlight_encoding)
            )
        if comment_diag.arrow_encoding:
            comment_diag.color_arrows.extend(
                AnnotationService._decode_entries(comment_diag.arrow_encoding)
            )

        comment_diag.highlight_encoding = None
        comment_diag.arrow_encoding = None
        return comment_diag

    @staticmethod
    def _decode_entries(encoded: str) -> List[str]:
        """Decode one comma-separated chess.com list into color-prefixed entries."""
        entries = []
        for entry in encoded.split(','):
            tokens = entry.split(';')
            squares = tokens[0].strip()
            if not squares:
                continue
            keypress = tokens[2].strip() if len(tokens) > 2 else None
            entries.append(f"{AnnotationService.color_from_keypress(keypress)}{squares}")
        return entries

    @staticmethod
    def pad_clock(value: str) -> str:
        """Left-pad a colon-separated clock value to three components.

        Args:
            value: Clock string such as "5:30" or "1:05:30".

        Returns:
            Clock string with at least three components (e.g., "00:5:30").
        """
        tokens = value.split(':')
        while len(tokens) < 3:
            tokens.insert(0, '00')
        return ':'.join(tokens)

    @staticmethod
    def render_commands(comment_diag: Optional[DiagramComment]) -> str:
        """Render a diagram comment as a PGN brace comment.

        Emits [%cal ...] and [%csl ...] first, then every other command in
        insertion order. Prose comments are not rendered here; the caller
        emits them on their own.

        Args:
            comment_diag: Canonical diagram comment.

        Returns:
            Text like "{ [%cal Ge2e4][%clk 0:05:00] } ", or "" when there is no directive to render.
        """
        if comment_diag is None or not comment_diag.has_directives():
            return ''

        result = '{ '
        if comment_diag.color_arrows:
            result += f"[%cal {','.join(comment_diag.color_arrows)}]"
        if comment_diag.color_fields:
            result += f"[%csl {','.join(comment_diag.color_fields)}]"

        for key, value in comment_diag.commands.items():
            if not value:
                continue
            if key == CLOCK_COMMAND:
                value = AnnotationService.pad_clock(value)
            result += f"[%{key} {value}]"

        result += ' } '
        return result
