"""Error taxonomy raised by ledger services.

The HTTP layer maps each class to a status code in ``ledger.main``.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""

    status_code = 500


class InvalidInputError(LedgerError):
    """Request rejected before any write happened."""

    status_code = 400


class NotFoundError(LedgerError):
    """Target row does not exist."""

    status_code = 404


class ConflictError(LedgerError):
    """Write would violate a uniqueness rule."""

    status_code = 409
