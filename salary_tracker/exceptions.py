# salary_tracker/exceptions.py


class PayrollError(Exception):
    """Base class for domain errors raised outside the HTTP layer."""


class InvalidInputError(PayrollError):
    """Bad input values (negative money, tax outside 0-100, bad period...)."""


class NotFoundError(PayrollError):
    """A referenced employee or salary record does not exist."""
