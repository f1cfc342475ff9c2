from fastapi import status


class TaskflowError(Exception):
    """Base class for errors reported back to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers = None

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class ValidationError(TaskflowError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidStatus(ValidationError):
    def __init__(self, message: str = "Invalid status"):
        super().__init__(message)


class AuthenticationError(TaskflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(TaskflowError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(TaskflowError):
    status_code = status.HTTP_404_NOT_FOUND


class NotFoundOrUnauthorized(NotFoundError):
    def __init__(self, message: str = "Task not found or unauthorized"):
        super().__init__(message)


class DuplicateEmailError(TaskflowError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Email already exists"):
        super().__init__(message)


class StoreError(TaskflowError):
    # The message is logged, never sent to the client.
    public_message = "Database error"
