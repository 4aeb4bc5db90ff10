"""
File sorting error hierarchy.

All errors are non-fatal to the service. They are recovered where they
occur and turned into log lines; entries that could not be moved stay put.
"""


class SortingError(Exception):
    """Base exception for file sorting failures."""

    pass


class TaxonomyError(SortingError, ValueError):
    """Category table is malformed (duplicate names, overlapping extensions)."""

    pass


class ScanError(SortingError):
    """Watched root could not be listed; the current run is abandoned."""

    pass


class ProvisionError(SortingError):
    """Category folder could not be created for a reason other than existing."""

    pass


class MoveConflict(SortingError):
    """An entry with the same name already occupies the destination."""

    pass


class MoveTransient(SortingError):
    """Move failed for a reason expected to clear up on retry."""

    MISSING_FOLDER = "missing_folder"
    BUSY = "busy"

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class RetryExhausted(SortingError):
    """Transient failure persisted past the retry budget."""

    def __init__(self, message: str, attempts: int, last_error: BaseException | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error
