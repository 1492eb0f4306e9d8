"""
Service errors - failures the HTTP layer turns into plain-text responses.

Every request failure ends in one of these. Only BadRequestError and
UnauthorizedError are distinguishable to clients; everything that went
wrong downstream is an InternalError.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class carrying the HTTP status code and client-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
