"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~taxos.exceptions.TaxosError` subclass.
Build scripts can inspect the exit code to tell a broken input document
apart from a misconfigured invocation without parsing stderr.

Example::

    $ taxos convert broken.json
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document could not be normalized
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API specification could not be parsed or normalized."""

EXIT_OUTPUT_ERROR = 8
"""Generated files could not be written to disk."""
