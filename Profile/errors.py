from rest_framework import status

from core.errors import ServiceError


class FollowSelfError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Cannot follow self"


class FollowUserError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NoFollowRelationshipError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "No follows relationship with this user found, could not update status"


class InvalidUpdateStatusActionError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Failed to update follow status. Expected existing status to be {expected}, but got {actual}"
        )
