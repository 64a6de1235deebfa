"""Repository package - expose all concrete repositories from one import."""
from .game_repository import GameRepository

__all__ = [
    'GameRepository',
]
