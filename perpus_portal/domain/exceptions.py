"""Domain-specific exceptions

Every failure the portal reports carries a stable ``code`` so API clients
can branch on it without parsing the human-readable message.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    code = "domain_error"
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


# Validation (rejected before any store request)


class ValidationError(DomainException):
    code = "validation_error"
    default_message = "Invalid input"


class PasswordMismatchError(ValidationError):
    code = "password_mismatch"
    default_message = "Passwords do not match"


class InvalidTransitionError(ValidationError):
    code = "invalid_transition"
    default_message = "Action not allowed from the current view"


# Not found


class NotFoundError(DomainException):
    code = "not_found"
    default_message = "Not found"


class NoMembersError(NotFoundError):
    code = "no_members"
    default_message = "No member data available"


class EmailNotFoundError(NotFoundError):
    code = "email_not_found"
    default_message = "Email not found"


class MemberNotFoundError(NotFoundError):
    code = "member_not_found"
    default_message = "Member not found"


# Authentication


class AuthError(DomainException):
    code = "auth_error"
    default_message = "Authentication failed"


class WrongPasswordError(AuthError):
    code = "wrong_password"
    default_message = "Wrong password"


class WrongOldPasswordError(AuthError):
    code = "wrong_old_password"
    default_message = "Old password is incorrect"


class NotAuthenticatedError(AuthError):
    code = "not_authenticated"
    default_message = "Login required"


# Conflicts


class ConflictError(DomainException):
    code = "conflict"
    default_message = "Conflict"


class EmailTakenError(ConflictError):
    code = "email_taken"
    default_message = "Email is already registered"


class RequestInProgressError(ConflictError):
    code = "request_in_progress"
    default_message = "Another request is still being processed"


# Transport


class TransportError(DomainException):
    """Remote data store returned an error or is unavailable"""

    code = "transport_error"
    default_message = "Data store unavailable"
