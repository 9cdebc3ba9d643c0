"""Error taxonomy of the service layer.

Services raise these, ``main.py`` renders them as ``{"detail": ...}`` with
the matching status code. Only ``detail`` ever reaches the client.
"""
from fastapi import status


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __init__(self, detail=None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    """Malformed or missing input, reported per field."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__(errors)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]})


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "This action is unauthorized."

    def __init__(self):
        super().__init__()


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Conflict"


class StorageError(ServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "File storage is unavailable"
