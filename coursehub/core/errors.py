"""
Error taxonomy for submission and grading operations.

Services raise these; `coursehub.main` renders every one of them as
``{"error": message}`` with the class' status code.
"""

from fastapi import status


class LmsError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LmsError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(LmsError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(LmsError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(LmsError):
    status_code = status.HTTP_404_NOT_FOUND


class SubmissionClosedError(LmsError):
    status_code = status.HTTP_409_CONFLICT
