"""Built-in CLI commands for openapi-explorer.

* :mod:`~openapi_explorer.commands.inspect` -- one-shot queries over the
  index: ``fields``, ``field``, ``schemas``, ``endpoints``, ``stats`` and
  ``validate``.
* :mod:`~openapi_explorer.commands.browse` -- the interactive ``browse``
  loop.
* :mod:`~openapi_explorer.commands.config` -- view and modify the user
  configuration.

Single commands are plain callbacks registered on the root app; the
``config`` group is a :class:`typer.Typer` sub-application.
"""
