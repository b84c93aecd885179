from enum import Enum


class TransactionState(Enum):
    """Transaction state machine states"""

    BUILDING = "building"  # Builder is queueing statements
    EXECUTING = "executing"  # Statements are running against the engine
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"

    @property
    def is_settled(self) -> bool:
        return self in (
            TransactionState.COMMITTED,
            TransactionState.ROLLED_BACK,
        )


class Outcome(Enum):
    """Aggregate result of draining a transaction's statement queue"""

    COMMIT = "commit"
    ROLLBACK = "rollback"
