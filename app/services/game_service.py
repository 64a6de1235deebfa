"""Business logic for the ordered game catalog."""
import logging
from typing import Dict, Iterable, List, Optional

from database import Game
from ..repositories.game_repository import GameRepository
from .exceptions import GameNotFoundError
from .ordering import Position, heal_positions


class GameService:
    """Maintains the catalog and owns the display-order policy, delegating
    persistence to
    :class:`~app.repositories.game_repository.GameRepository`.

    Rules
    -----
    * A game added without a position is appended at the end: its
      ``sort_order`` is the number of games that existed before it.
    * ``update`` replaces every field.  Omitted fields are cleared.
    * ``list`` heals unassigned positions in display order; ``search``
      never writes.
    * ``reorder`` skips unknown ids and leaves unmentioned games untouched.
    * Deleting a game does not renumber the others.

    Title uniqueness is a store constraint: a duplicate surfaces as the
    store's ``IntegrityError`` and is not translated here.
    """

    def __init__(self, repository: GameRepository) -> None:
        self._repo = repository
        self._log = logging.getLogger('gamelibrary.service.GameService')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, fields: Dict, position: Optional[int] = None) -> Game:
        """Create a game from *fields*.

        Args:
            fields:   Game fields keyed by :data:`database.GAME_FIELDS` name.
                      A ``sort_order`` key is used when *position* is
                      ``None``.
            position: Explicit display position.  When both this and
                      ``fields['sort_order']`` are absent the game is
                      appended at the end.

        Returns:
            The stored game, including its generated id.
        """
        requested = position if position is not None else fields.get('sort_order')
        if requested is None:
            requested = self._repo.count()
        slot = Position(requested)
        values = dict(fields)
        values['sort_order'] = slot.value
        game = self._repo.create(values)
        self._log.info("Added game %s %r at position %s", game.id, game.title, slot.value)
        return game

    def update(self, game_id: int, fields: Dict) -> Game:
        """Replace every field of *game_id* with *fields*.

        Raises:
            GameNotFoundError: when no game has *game_id*.
        """
        game = self._repo.find_by_id(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        Position(fields.get('sort_order'))  # rejects negative or non-integer positions
        game.assign(fields)
        return self._repo.save(game)

    def list(self) -> List[Game]:
        """Return every game in display order, assigning missing positions.

        Unassigned games sort last; each one receives its zero-based index
        in that scan and is saved immediately.  When anything was assigned
        the catalog is fetched again so the result shows the healed order.
        """
        games = self._repo.find_all_ordered()
        healed = heal_positions(Position(g.sort_order) for g in games)
        for index, position in healed:
            game = games[index]
            game.sort_order = position.value
            self._repo.save(game)
        if healed:
            self._log.info("Assigned positions to %d unplaced game(s)", len(healed))
            games = self._repo.find_all_ordered()
        return games

    def get(self, game_id: int) -> Game:
        """Return the game with *game_id*.

        Raises:
            GameNotFoundError: when no game has *game_id*.
        """
        game = self._repo.find_by_id(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game

    def search(self, query: Optional[str]) -> List[Game]:
        """Return games whose title contains *query*, ignoring case.

        Results follow display order.  Missing positions are not repaired.
        """
        return self._repo.find_by_title_containing(query or '')

    def reorder(self, game_ids: Iterable[int]) -> int:
        """Place each listed game at its index in *game_ids*.

        Unknown ids are skipped without error.  Games not listed keep their
        current position.

        Returns:
            Number of games whose position was written.
        """
        applied = 0
        for index, game_id in enumerate(game_ids):
            game = self._repo.find_by_id(game_id)
            if game is None:
                self._log.debug("Reorder skipped unknown game %s", game_id)
                continue
            game.sort_order = index
            self._repo.save(game)
            applied += 1
        self._log.info("Reordered %d game(s)", applied)
        return applied

    def delete(self, game_id: int) -> None:
        """Remove *game_id* together with its genres, platforms and screenshots.

        Raises:
            GameNotFoundError: when no game has *game_id*.
        """
        if not self._repo.exists_by_id(game_id):
            raise GameNotFoundError(game_id)
        self._repo.delete_by_id(game_id)
        self._log.info("Deleted game %s", game_id)
