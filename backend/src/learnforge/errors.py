"""Error taxonomy shared by the auth services and the HTTP layer.

Every error carries the HTTP status it maps to. The API layer turns these
into ``{"message": ...}`` responses; see ``learnforge.api.errors``.
"""


class LearnForgeError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(LearnForgeError):
    """Bad or missing input (400)."""

    status_code = 400


class ConflictError(LearnForgeError):
    """Duplicate resource, e.g. an email that is already registered (400)."""

    status_code = 400


class UnauthenticatedError(LearnForgeError):
    """No usable credential was presented (401)."""

    status_code = 401


class TokenMissingError(UnauthenticatedError):
    """No token in the cookie slots for the expected role."""

    def __init__(self, role: str | None = None):
        if role:
            message = f"{role.title()} access token missing"
        else:
            message = "Access token missing"
        super().__init__(message)
        self.role = role


class TokenInvalidError(LearnForgeError):
    """A token was presented but its signature, payload or expiry is bad (403)."""

    status_code = 403

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class RoleMismatchError(LearnForgeError):
    """Valid token, but issued for a different role than the route expects (403)."""

    status_code = 403

    def __init__(self, expected: str, actual: str):
        super().__init__(f"Token role {actual} does not match required role {expected}")
        self.expected = expected
        self.actual = actual


class ForbiddenError(LearnForgeError):
    """Authenticated principal lacks an allowed role (403)."""

    status_code = 403

    def __init__(self, allowed: tuple[str, ...]):
        super().__init__(f"Forbidden: requires one of roles {', '.join(allowed)}")
        self.allowed = allowed


class NotFoundError(LearnForgeError):
    """Requested resource does not exist (404)."""

    status_code = 404


class InfrastructureError(LearnForgeError):
    """A backing service failed (500). The message is never sent to clients."""

    status_code = 500


class DirectoryUnavailableError(InfrastructureError):
    """The user directory could not be read or written."""
