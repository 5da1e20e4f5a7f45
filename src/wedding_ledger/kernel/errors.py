"""
Custom exceptions for Wedding Ledger

The aggregation core is total and never raises for empty or zero input.
These errors belong to the layers around it: the row store, the facade,
the CSV importers and the template catalog.
"""


class LedgerError(Exception):
    """Base exception for all Wedding Ledger errors"""

    pass


class StoreError(LedgerError):
    """Base class for row store errors"""

    pass


class EventNotFound(LedgerError):
    """Raised when an event does not exist"""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class BudgetEntryNotFound(LedgerError):
    """Raised when a budget entry does not exist"""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Budget entry {entry_id} not found")


class GuestNotFound(LedgerError):
    """Raised when a guest does not exist"""

    def __init__(self, guest_id: str) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest {guest_id} not found")


class InvalidAmount(LedgerError):
    """Raised when a payment or budget amount is not acceptable"""

    def __init__(self, amount: int, reason: str) -> None:
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid amount {amount}: {reason}")


# Import Errors


class GuestImportError(LedgerError):
    """Base class for CSV import errors"""

    pass


class InvalidImportFile(GuestImportError):
    """
    Raised when an uploaded CSV cannot be processed at all

    Row-level problems never raise - those rows are counted as skipped.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid import file: {reason}")


class MissingImportColumn(GuestImportError):
    """Raised when a required CSV header is absent"""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Missing required column: {column}")


# Template Errors


class TemplateNotFound(LedgerError):
    """Raised when a reminder or invitation template id is unknown"""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template {template_id} not found")


class TemplateRenderError(LedgerError):
    """Raised when a template placeholder has no value in the render context"""

    def __init__(self, template_id: str, placeholder: str) -> None:
        self.template_id = template_id
        self.placeholder = placeholder
        super().__init__(
            f"Template {template_id} needs a value for '{{{placeholder}}}'"
        )
