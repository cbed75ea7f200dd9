"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecordError(DomainException):
    """A stored or submitted record failed validation at the boundary"""

    pass


class InvalidPurchaseError(InvalidRecordError):
    """Purchase has a bad amount, installment count or first installment date"""

    pass


class InvalidPaymentRecordError(InvalidRecordError):
    """Payment record has a bad month, amount or payment date"""

    pass


class InvalidMonthError(DomainException, ValueError):
    """Month reference is not a valid 'YYYY-MM' value"""

    pass


class NotFoundError(DomainException):
    """Requested entity does not exist in the loaded snapshot"""

    pass
