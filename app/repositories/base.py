"""Repository base class used by all concrete repositories."""
import logging


class BaseRepository:
    """Provides SQLAlchemy session handling for a single aggregate.

    Sub-classes query through ``self._session`` and call :meth:`_commit`
    after every write.  A failed commit rolls the session back before the
    original exception is re-raised, so the session stays usable for the
    next request and the caller still sees the store's own error.
    """

    def __init__(self, session) -> None:
        self._session = session
        self._log = logging.getLogger(f'gamelibrary.repository.{type(self).__name__}')

    def _commit(self) -> None:
        """Commit the current unit of work, rolling back on failure."""
        try:
            self._session.commit()
        except Exception as exc:
            self._log.warning("Commit failed, rolling back: %s", exc)
            self._session.rollback()
            raise
