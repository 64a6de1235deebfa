"""Exceptions raised by the catalog services."""


class GameNotFoundError(LookupError):
    """Raised when an operation targets a game id that does not exist."""

    def __init__(self, game_id) -> None:
        self.game_id = game_id
        super().__init__(f"Game not found with id: {game_id}")
