"""Repository for catalog games and their ordered collections."""
from typing import Dict, List, Optional

from sqlalchemy import func, select

from database import Game
from .base import BaseRepository

# Ids outside this range cannot be stored, so they never match a row.
MAX_ID = 2 ** 63 - 1


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so *text* matches literally."""
    return text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class GameRepository(BaseRepository):
    """Persists :class:`~database.Game` rows through a SQLAlchemy session.

    Ordered queries sort by ``sort_order`` ascending with ``NULL`` last,
    then by ``id`` ascending.  Each write is committed on its own.
    """

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def _ordered(stmt):
        return stmt.order_by(Game.sort_order.asc().nulls_last(), Game.id.asc())

    def find_by_id(self, game_id: int) -> Optional[Game]:
        """Return the game with *game_id*, or ``None``."""
        if not 0 < game_id <= MAX_ID:
            return None
        return self._session.get(Game, game_id)

    def exists_by_id(self, game_id: int) -> bool:
        if not 0 < game_id <= MAX_ID:
            return False
        stmt = select(Game.id).where(Game.id == game_id)
        return self._session.execute(stmt).first() is not None

    def count(self) -> int:
        return self._session.execute(select(func.count(Game.id))).scalar_one()

    def find_all_ordered(self) -> List[Game]:
        """Return every game in display order."""
        return list(self._session.scalars(self._ordered(select(Game))))

    def find_by_title_containing(self, text: str) -> List[Game]:
        """Return games whose title contains *text*, ignoring case, in display order."""
        pattern = f"%{_escape_like(text)}%"
        stmt = self._ordered(select(Game).where(Game.title.ilike(pattern, escape='\\')))
        return list(self._session.scalars(stmt))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, fields: Dict) -> Game:
        """Insert a new game built from *fields* and return it with its id."""
        game = Game()
        game.assign(fields)
        self._session.add(game)
        self._commit()
        self._session.refresh(game)
        self._log.debug("Created game %s (%r)", game.id, game.title)
        return game

    def save(self, game: Game) -> Game:
        """Persist pending changes on *game*."""
        self._session.add(game)
        self._commit()
        return game

    def delete_by_id(self, game_id: int) -> None:
        """Delete the game and its collections.  The game must exist."""
        game = self._session.get(Game, game_id)
        self._session.delete(game)
        self._commit()
        self._log.debug("Deleted game %s", game_id)
