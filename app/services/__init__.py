"""Services package - expose all concrete services from one import."""
from .exceptions import GameNotFoundError
from .game_service import GameService
from .ordering import MAX_POSITION, Position, heal_positions

__all__ = [
    'GameNotFoundError',
    'GameService',
    'MAX_POSITION',
    'Position',
    'heal_positions',
]
