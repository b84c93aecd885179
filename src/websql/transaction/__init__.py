"""
Transaction machinery: statement queueing, execution and settlement.
"""

from .executor import StatementExecutor
from .interfaces import Outcome, TransactionState
from .scheduler import TransactionScheduler
from .transaction import Transaction

__all__ = [
    "Outcome",
    "StatementExecutor",
    "Transaction",
    "TransactionScheduler",
    "TransactionState",
]
