"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException, ValueError):
    """Caller supplied a value outside the calculation's contract"""

    pass


class InvalidRecordError(DomainException):
    """Persistence record is malformed or violates a record invariant"""

    pass
