"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NetworkError(DomainException):
    """Remote scoring service returned an error or is unreachable"""

    pass


class InvalidSummaryError(DomainException):
    """Summary input is malformed or inconsistent"""

    pass
