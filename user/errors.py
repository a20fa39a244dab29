from rest_framework import status

from core.errors import ServiceError


class UserNotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class InvalidCredentialsError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class UsernameAlreadyExistsError(ServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, username):
        super().__init__(f"Account with the username @{username} already exists")


class EmailAlreadyExistsError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, email):
        super().__init__(f"Account with the email {email} already exists")
