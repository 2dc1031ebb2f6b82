"""
Type definitions used across layers
"""

from enum import StrEnum

# --- The domain layer has its own Side and Piece enums (src/checkers/pieces.py).
# --- These are the string versions sent across the API boundary. Same names, convert using `.name`


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceKind(StrEnum):
    MAN = "man"
    KING = "king"


class RouteKind(StrEnum):
    MOVEMENT = "movement"
    TAKING = "taking"
