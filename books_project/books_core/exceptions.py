class BooksError(Exception):
    """Base for every error that is reported to API clients as JSON.

    Each subclass carries a machine-readable ``code`` and the HTTP
    ``status`` the request boundary should answer with.
    """

    code = "INTERNAL_ERROR"
    status = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message=None, code=None, status=None):
        self.message = str(message or self.default_message)
        if code:
            self.code = code
        if status:
            self.status = status
        super().__init__(self.message)

    def as_dict(self):
        return {"code": self.code, "message": self.message}


class ValidationFailed(BooksError):
    """Missing or malformed input."""

    code = "VALIDATION_ERROR"
    status = 400
    default_message = "Invalid request data."


class NotFound(BooksError):
    code = "NOT_FOUND"
    status = 404
    default_message = "Record not found."


class StateConflict(BooksError):
    """Operation not allowed in the record's current lifecycle state."""

    code = "INVALID_STATE"
    status = 400
    default_message = "Operation invalid for the current status."


class AlreadyPosted(StateConflict):
    code = "ALREADY_POSTED"
    status = 409
    default_message = "Bill is already posted."


class NotPosted(StateConflict):
    code = "NOT_POSTED"
    default_message = "Bill must be posted before payment."


class NotDraft(StateConflict):
    code = "NOT_DRAFT"
    default_message = "Only draft bills can be changed."


class Overpayment(StateConflict):
    code = "OVERPAYMENT"
    default_message = "Payment exceeds balance due."


class ConfigurationError(BooksError):
    """The tenant's chart of accounts is missing something a posting needs."""

    code = "CONFIGURATION_ERROR"
    status = 400
    default_message = "Ledger configuration is incomplete."


class UnbalancedJournalError(BooksError):
    """Raised when a JournalEntry fails double-entry balance check."""

    code = "UNBALANCED_ENTRY"
    status = 500
    default_message = "Journal entry debits and credits do not balance."


class RecordLocked(BooksError):
    code = "RECORD_LOCKED"
    status = 409
    default_message = "Record is locked by another user."

    def __init__(self, lock, message=None):
        self.lock = lock
        holder = lock.get("user_name") or lock.get("user_id")
        super().__init__(message or f"Record locked by {holder}")

    def as_dict(self):
        data = super().as_dict()
        data["locked_by"] = self.lock
        return data
