# expense_tracker/errors.py
"""Exceptions raised by the stores and services.

Each carries the HTTP status the API answers with and a message that is safe
to show to the client.
"""


class ExpenseTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
        self.message = message


class ValidationError(ExpenseTrackerError):
    status_code = 400


class DuplicateEmail(ExpenseTrackerError):
    status_code = 400

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class Unauthorized(ExpenseTrackerError):
    status_code = 401


class TokenExpired(Unauthorized):
    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class TokenInvalid(Unauthorized):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenMalformed(Unauthorized):
    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)


class Forbidden(ExpenseTrackerError):
    status_code = 403


class NotFound(ExpenseTrackerError):
    status_code = 404
