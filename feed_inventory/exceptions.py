"""
Feed ledger errors.

Each carries the client-facing message and the HTTP status the API
returns for it.
"""


class FeedLedgerError(Exception):
    """Base class for feed stock / usage rule violations."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InsufficientStockError(FeedLedgerError):
    """Requested quantity exceeds what the stock bucket holds."""


class NoActiveStockError(FeedLedgerError):
    """No Active stock bucket exists for the usage's feed type and month."""


class DuplicateUsageError(FeedLedgerError):
    """A usage record already exists for the feed type and date."""


class DuplicateStockError(FeedLedgerError):
    """A concurrent upsert created the bucket first."""


class StockNotFoundError(FeedLedgerError):
    status_code = 404


class UsageNotFoundError(FeedLedgerError):
    status_code = 404
