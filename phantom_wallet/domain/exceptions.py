"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class Unauthenticated(DomainException):
    """No acting user was supplied"""

    def __init__(self, message: str = "not authenticated"):
        super().__init__(message)


class NotFound(DomainException):
    """Loan or savings account id is unknown for this user"""

    pass


class IneligibleForLoan(DomainException):
    """Loan eligibility rules failed; carries the first failing reason"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AmountExceedsLimit(DomainException):
    """Amount above the eligible maximum, the remaining balance, or available funds"""

    pass


class InvalidInput(DomainException):
    """Non-positive amount, unsupported lock period, or an invalid state for the action"""

    pass


class CollateralInUse(DomainException):
    """Savings withdrawal would leave an outstanding loan under-collateralized"""

    pass


class WalletServiceError(DomainException):
    """Wallet service returned an error or is unavailable"""

    pass


class LedgerServiceError(DomainException):
    """Revenue ledger could not record an event"""

    pass
