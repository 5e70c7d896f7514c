"""
standapp application package.

Layered the same way for both front ends:

  app/models.py     : immutable records parsed from the server's JSON.
  app/repositories/ : pure I/O: the persisted session and local preferences.
  app/services/     : one service per screen (page state, parallel page
                       loads, create/edit/delete) plus login and theme.

``standapp.py`` (terminal) and ``stand_gui.py`` (Flask) build an
:class:`~app.services.AuthService`, take its authenticated client and hand it
to the page services; they only render ``service.state``.
"""
