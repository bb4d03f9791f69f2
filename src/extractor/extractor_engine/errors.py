"""Error hierarchy for timetable extraction.

Structural failures (missing input, unreadable workbook) abort a request
before any strategy runs. Recognition failures are never raised: they lower
confidence or drop a single entry instead.
"""


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    pass


class InputError(ExtractionError):
    """The request itself is unusable (no file, wrong file type)."""

    pass


class MissingInputError(InputError):
    """No workbook was provided."""

    pass


class UnsupportedFileError(InputError):
    """File extension is not a supported workbook format."""

    pass


class MalformedWorkbookError(ExtractionError):
    """Workbook bytes could not be read as a spreadsheet.

    Surfaced to the caller with a message; no entries are returned.
    """

    pass


class DiagnosticUnavailableError(ExtractionError):
    """The optional diagnostic service could not produce commentary.

    Raised inside the diagnostic client only and always recovered there.
    """

    pass
