"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction, budget or goal record is malformed or invalid"""

    pass
