class AppError(Exception):
    """Base error carrying the HTTP status and the message shown to clients."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class Unauthenticated(AppError):
    status_code = 401
    message = "Unauthorized"


class ValidationFailure(AppError):
    status_code = 400
    message = "Invalid request"


class NotFound(AppError):
    # Absent and not-owned records share this error.
    status_code = 404
    message = "Interview not found"


class Conflict(AppError):
    status_code = 409
    message = "Conflict"


class StaleSubmission(Conflict):
    message = "Answer does not match the current question"


class GenerationFailure(AppError):
    message = "Could not generate interview questions"
