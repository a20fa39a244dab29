from rest_framework import status


class ServiceError(Exception):
    """Base class for errors raised by the service layer.

    Each subclass carries the HTTP status the views answer with, so the
    mapping from error kind to response code lives in one place.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConstraintViolationError(ServiceError):
    """A uniqueness constraint failed at the storage boundary."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, field):
        self.field = field
        super().__init__(f"Unique constraint failed on {field}")
