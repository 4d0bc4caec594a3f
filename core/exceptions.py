"""Custom exceptions for the application."""


class NotFoundError(Exception):
    """Raised when a requested resource is not found."""
    code = 404


class ValidationError(Exception):
    """Raised when data validation fails."""
    code = 400


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    code = 401


class PermissionDeniedError(Exception):
    """Raised when the acting user's role or ownership does not allow the action."""
    code = 403


class GoalWorkflowError(Exception):
    """Base class for blocked goal transitions."""
    code = 409


class InvalidTransitionError(GoalWorkflowError):
    """Raised when a goal is not in a status the transition accepts."""


class DeadlineError(GoalWorkflowError):
    """Raised when the goal space window is closed for the action."""


class WeightageError(GoalWorkflowError):
    """Raised when approved weightages do not add up to the required total."""

    def __init__(self, total: int, required: int):
        self.total = total
        self.required = required
        super().__init__(
            f"Total weightage of approved goals must be {required}%. "
            f"Current total: {total}%"
        )


# Everything the services raise on purpose; endpoints map these to error envelopes.
SERVICE_ERRORS = (
    NotFoundError,
    ValidationError,
    AuthenticationError,
    PermissionDeniedError,
    GoalWorkflowError,
)
