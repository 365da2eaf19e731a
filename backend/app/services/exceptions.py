class RecordHistoryError(Exception):
    """Base class for version history exceptions; carries the HTTP status to surface."""
    status_code: int = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class VersionNotProvided(RecordHistoryError):
    """Raised when the version parameter is missing or not a version number."""
    status_code = 404

class RecordNotVersioned(RecordHistoryError):
    """Raised when the record type keeps no version history."""
    status_code = 404

class VersionNotFound(RecordHistoryError):
    """Raised when the record has no snapshot with the requested number."""
    status_code = 404

class RecordNotFound(RecordHistoryError):
    """Raised when no record exists for the requested id."""
    status_code = 404

class AccessDenied(RecordHistoryError):
    """Raised when the principal lacks view or edit capability."""
    status_code = 403

class CannotRollbackLatest(RecordHistoryError):
    """Raised when a rollback targets the version that is already current."""
    status_code = 403

class RestoreFailed(RecordHistoryError):
    """Raised when the store could not restore the record; nothing is reported as success."""
    status_code = 500

class StoreError(Exception):
    """Raised by the record store when a read or write cannot be completed."""
