"""Exception hierarchy for openapi-explorer.

All exceptions inherit from :class:`ExplorerError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`openapi_explorer.exit_codes`. Failures while starting up abort the
process through :func:`openapi_explorer.app.main`; failures after startup
(reloads) are caught by :class:`~openapi_explorer.session.Session` and kept
as a displayable message instead.

Subclass hierarchy::

    ExplorerError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- SourceNotFoundError     (exit 4)
    +-- MalformedDocumentError  (exit 7)
    +-- ReloadError             (exit 1)
    +-- ConfigError             (exit 1)

A ``$ref`` that points at a schema which does not exist is deliberately *not*
part of this hierarchy: the resolver degrades it to an empty node.
"""

from openapi_explorer.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MALFORMED_DOCUMENT,
    EXIT_SOURCE_NOT_FOUND,
)


class ExplorerError(Exception):
    """Base exception for all openapi-explorer errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ExplorerError):
    """Raised for invalid CLI arguments or when no document source is configured."""

    exit_code = EXIT_INVALID_USAGE


class SourceNotFoundError(ExplorerError):
    """Raised when the document location does not resolve (file, URL or stdin)."""

    exit_code = EXIT_SOURCE_NOT_FOUND


class MalformedDocumentError(ExplorerError):
    """Raised when the document cannot be parsed or fails structural validation."""

    exit_code = EXIT_MALFORMED_DOCUMENT


class ReloadError(ExplorerError):
    """Raised when re-fetching or rebuilding the index during a reload fails.

    Wraps a :class:`SourceNotFoundError` or :class:`MalformedDocumentError`
    (available as ``__cause__``) or reports that the current snapshot has no
    source to reload from.
    """

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(ExplorerError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
