class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class SessionError(DomainError):
    """Precondition violation on the work session lifecycle.

    Raised before any state is touched; the caller may retry with corrected input.
    """


class NoProjectSelected(SessionError):
    """Raised when a session is started without a project."""


class SessionAlreadyRunning(SessionError):
    """Raised when the actor already has an open session."""


class ProjectNotFound(SessionError):
    """Raised when the project id does not resolve."""


class NoActiveSession(SessionError):
    """Raised when an operation needs an open session and there is none."""


class InvalidStateTransition(SessionError):
    """Raised for pause while paused or resume while running."""


class StoreError(Exception):
    """Raised when the record store or the snapshot store fails.

    The operation was not applied; the caller may retry.
    """


class RecordNotOpen(StoreError):
    """Raised when finalizing a record that is missing or already finalized.

    The store is authoritative here; retrying cannot succeed.
    """
