"""Built-in CLI commands for tokenexchange.

* :mod:`~tokenexchange.commands.token` -- ``app-token``, ``user-token`` and
  ``refresh``, one per supported grant.
* :mod:`~tokenexchange.commands.authorize` -- ``authorize-url``, the browser
  step that precedes ``user-token``.

Each module exports plain callback functions registered directly on the root
app in :mod:`tokenexchange.app`.
"""
