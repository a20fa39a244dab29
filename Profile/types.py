from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .models import Follow, FollowStatus


class FollowRelation(str, Enum):
    FOLLOWED_BY = 'followedBy'
    FOLLOWING = 'following'


class FollowAction(str, Enum):
    ACCEPT = 'accept'
    REJECT = 'reject'
    REMOVE = 'remove'
    CANCEL = 'cancel'
    UNFOLLOW = 'unfollow'


@dataclass(frozen=True)
class Transition:
    from_status: FollowStatus
    to_status: FollowStatus
    message: str


# action -> (required current status, new status, confirmation)
STATUS_TRANSITIONS = {
    FollowAction.ACCEPT: Transition(FollowStatus.PENDING, FollowStatus.ACCEPTED, "Successfully accepted follow request"),
    FollowAction.REJECT: Transition(FollowStatus.PENDING, FollowStatus.NOT_FOLLOWING, "Successfully rejected follow request"),
    FollowAction.REMOVE: Transition(FollowStatus.ACCEPTED, FollowStatus.NOT_FOLLOWING, "Successfully removed follower"),
    FollowAction.CANCEL: Transition(FollowStatus.PENDING, FollowStatus.NOT_FOLLOWING, "Successfully cancelled follow request"),
    FollowAction.UNFOLLOW: Transition(FollowStatus.ACCEPTED, FollowStatus.NOT_FOLLOWING, "Successfully unfollowed user"),
}

# actions where the actor manages their own outgoing edge
OUTGOING_ACTIONS = frozenset({FollowAction.CANCEL, FollowAction.UNFOLLOW})


@dataclass
class PermissionResult:
    has_permission: bool
    reason: Optional[str] = None


@dataclass
class FollowListResult:
    users: list
    has_more: bool


@dataclass
class FollowUserResult:
    follow: Follow
    is_new_relationship: bool


@dataclass
class UpdateFollowResult:
    follow: Follow
    message: str


@dataclass
class ProfileResult:
    user: dict
    is_self: bool
    followed_by_count: int
    following_count: int
    # left unset when viewing self; "not following" is FollowStatus.NOT_FOLLOWING
    follow_status: Optional[FollowStatus] = None

    def as_dict(self) -> dict[str, Any]:
        data = {
            "user": self.user,
            "is_self": self.is_self,
            "followed_by_count": self.followed_by_count,
            "following_count": self.following_count,
        }
        if self.follow_status is not None:
            data["follow_status"] = str(self.follow_status)
        return data
