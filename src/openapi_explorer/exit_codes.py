"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi_explorer.exceptions.ExplorerError` subclass.

Example::

    $ openapi-explorer --spec missing.json fields
    $ echo $?
    4   # EXIT_SOURCE_NOT_FOUND -- the document could not be located
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or without a document source."""

EXIT_SOURCE_NOT_FOUND = 4
"""The document location did not resolve (missing file, HTTP 404, network failure)."""

EXIT_MALFORMED_DOCUMENT = 7
"""The document could not be parsed or is not a structurally valid OpenAPI 3.x document."""
