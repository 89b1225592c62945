"""
Feed inventory services.
"""
from .ledger import FeedLedgerService
from .automation import FeedAutomationScheduler, UnknownJobError

__all__ = ['FeedLedgerService', 'FeedAutomationScheduler', 'UnknownJobError']
