"""Exception hierarchy for taxos.

All exceptions inherit from :class:`TaxosError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`taxos.exit_codes`.
The top-level error handler in :func:`taxos.app.main` catches
``TaxosError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    TaxosError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- SpecParseError               (exit 7)
    |   +-- MalformedReferenceError
    |   +-- UnresolvedReferenceError
    |   +-- InvalidParameterError
    +-- ConfigError                  (exit 1)
    +-- OutputError                  (exit 8)

Every ``SpecParseError`` is fatal: normalization either succeeds for the
whole document or fails before any file is written.
"""

from taxos.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_OUTPUT_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class TaxosError(Exception):
    """Base exception for all taxos errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`taxos.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TaxosError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(TaxosError):
    """Raised when the input document cannot be parsed or violates the expected shape."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class MalformedReferenceError(SpecParseError):
    """Raised for a ``$ref`` that is not an internal pointer of a supported form."""


class UnresolvedReferenceError(SpecParseError):
    """Raised for a ``$ref`` whose target does not exist in the document."""


class InvalidParameterError(SpecParseError):
    """Raised for a parameter with an unrecognised ``in`` location."""


class ConfigError(TaxosError):
    """Raised for configuration problems (invalid ``taxos.json``, bad overrides)."""

    exit_code = EXIT_GENERIC_FAILURE


class OutputError(TaxosError):
    """Raised when IR or generated source files cannot be written or read back."""

    exit_code = EXIT_OUTPUT_ERROR
