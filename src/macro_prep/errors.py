"""Error types raised by the ledger engine."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class NotFoundError(LedgerError):
    """A referenced entity does not exist."""


class InsufficientInventoryError(LedgerError):
    """A requested portion exceeds what is available."""

    def __init__(self, message: str, ceiling: float) -> None:
        super().__init__(message)
        self.ceiling = ceiling


class NoSolutionError(LedgerError):
    """A goal portion cannot be solved because the protein reference is zero."""


class InvalidPortionError(LedgerError):
    """A portion or finished mass is not positive."""


class TransactionFailedError(LedgerError):
    """The store could not apply an atomic write; nothing was changed."""


class MalformedBackupError(LedgerError):
    """A backup file failed validation."""


class DuplicateNameError(LedgerError):
    """Another catalog entry already uses this name."""
