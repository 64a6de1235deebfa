"""
Game library application package.

Introduces a layered architecture:

  app/repositories/: pure I/O: reading and writing catalog rows through a
                       SQLAlchemy session.
  app/services/:     business logic: display-order policy, healing of
                       unplaced games, search, reorder.

``game_library_gui.py`` is the integration point: each request opens a
session, wraps it in a :class:`~app.repositories.GameRepository` and hands
that to a :class:`~app.services.GameService`.  Route handlers only translate
between JSON and service calls.
"""
