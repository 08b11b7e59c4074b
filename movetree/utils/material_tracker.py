"""Utility functions for tracking chess material balance."""

import chess


# Standard piece values (in pawns)
PIECE_VALUES = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0  # King has no material value
}


def calculate_material_balance(board: chess.BaseBoard) -> int:
    """Calculate material balance for a position.
    
    Args:
        board: Chess board position.
        
    Returns:
        Material balance in pawns (positive = white advantage, negative = black advantage).
    """
    balance = 0
    
    for piece_type, piece_value in PIECE_VALUES.items():
        if piece_type == chess.KING:
            continue
        
        white_count = len(board.pieces(piece_type, chess.WHITE))
        black_count = len(board.pieces(piece_type, chess.BLACK))
        balance += (white_count - black_count) * piece_value
    
    return balance


def calculate_material_difference(fen: str) -> int:
    """Calculate material balance from the piece placement field of a FEN.
    
    Args:
        fen: Full FEN string or just its piece placement field.
        
    Returns:
        Material balance in pawns from white's (uppercase pieces') perspective.
    """
    board = chess.BaseBoard(fen.split(" ")[0])
    return calculate_material_balance(board)
