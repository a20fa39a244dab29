import asyncio
import logging

from django.conf import settings

from core.errors import ConstraintViolationError
from user.errors import UserNotFoundError
from user.utils import sanitize_user, user_key
from .errors import (
    FollowSelfError,
    FollowUserError,
    InvalidUpdateStatusActionError,
    NoFollowRelationshipError,
)
from .models import FollowStatus
from .types import (
    OUTGOING_ACTIONS,
    STATUS_TRANSITIONS,
    FollowAction,
    FollowListResult,
    FollowRelation,
    FollowUserResult,
    PermissionResult,
    ProfileResult,
    UpdateFollowResult,
)

logger = logging.getLogger(__name__)


class FollowService:
    """
    Owns the directed follow edges and their status transitions.

    An edge (followed_by -> following) is created on the first follow
    attempt and afterwards only moves between pending, accepted and
    notFollowing.
    """

    def __init__(self, identity_store, follow_store, page_size=None):
        self.identity_store = identity_store
        self.follow_store = follow_store
        self.page_size = page_size or settings.FOLLOW_PAGE_SIZE

    async def get_follow_list(self, target_user_id, relation_type, load_index=0) -> FollowListResult:
        """
        Accepted followers (followedBy) or followees (following) of a user,
        newest first. One extra row is fetched to tell whether more remain.
        """
        relation_type = FollowRelation(relation_type)
        offset = max(0, load_index) * self.page_size

        if relation_type == FollowRelation.FOLLOWED_BY:
            where_key, related = 'following_id', 'followed_by'
        else:
            where_key, related = 'followed_by_id', 'following'

        edges = await self.follow_store.list_edges(
            {where_key: target_user_id, 'status': FollowStatus.ACCEPTED, f'{related}__is_deleted': False},
            order_by=('-updated_at', '-id'),
            offset=offset,
            limit=self.page_size + 1,
            related=(related,),
        )

        users = [sanitize_user(getattr(edge, related)) for edge in edges[:self.page_size]]
        return FollowListResult(users=users, has_more=len(edges) > self.page_size)

    async def follow_user(self, actor_id, target_id) -> FollowUserResult:
        if actor_id == target_id:
            raise FollowSelfError()

        target = await self.identity_store.find_by_id(target_id)
        if target is None:
            raise UserNotFoundError()

        new_status = FollowStatus.PENDING if target.is_private else FollowStatus.ACCEPTED

        existing = await self.follow_store.find_edge(actor_id, target_id)
        if existing is None:
            try:
                follow = await self.follow_store.create_edge(actor_id, target_id, new_status)
            except ConstraintViolationError:
                # a concurrent request created the pair first; treat it as found
                existing = await self.follow_store.find_edge(actor_id, target_id)
                if existing is None:
                    raise
                logger.info(f"Follow {actor_id} -> {target_id} already created concurrently")
            else:
                logger.info(f"Follow {actor_id} -> {target_id} created with status {new_status}")
                return FollowUserResult(follow=follow, is_new_relationship=True)

        if existing.status == FollowStatus.ACCEPTED:
            raise FollowUserError("You already follow this user")
        if existing.status == FollowStatus.PENDING:
            raise FollowUserError("You have already requested to follow this user")

        follow = await self.follow_store.update_edge(actor_id, target_id, new_status)
        logger.info(f"Follow {actor_id} -> {target_id} renewed with status {new_status}")
        return FollowUserResult(follow=follow, is_new_relationship=False)

    async def update_follow_status(self, actor_id, target_id, action) -> UpdateFollowResult:
        action = FollowAction(action)

        # accept/reject/remove manage an incoming edge, cancel/unfollow an outgoing one
        if action in OUTGOING_ACTIONS:
            followed_by_id, following_id = actor_id, target_id
        else:
            followed_by_id, following_id = target_id, actor_id

        existing = await self.follow_store.find_edge(followed_by_id, following_id)
        if existing is None:
            raise NoFollowRelationshipError()
        # edges to soft-deleted users are history only
        if await self.identity_store.find_by_id(target_id) is None:
            raise NoFollowRelationshipError()

        transition = STATUS_TRANSITIONS[action]
        if existing.status != transition.from_status:
            raise InvalidUpdateStatusActionError(transition.from_status, existing.status)

        follow = await self.follow_store.update_edge(followed_by_id, following_id, transition.to_status)
        logger.info(f"Follow {followed_by_id} -> {following_id}: {action.value} ({existing.status} -> {transition.to_status})")
        return UpdateFollowResult(follow=follow, message=transition.message)

    async def get_pending_follow_requests(self, actor_id):
        return await self.follow_store.list_edges(
            {'following_id': actor_id, 'status': FollowStatus.PENDING, 'followed_by__is_deleted': False},
            order_by=('-updated_at', '-id'),
            related=('followed_by',),
        )

    async def get_follow_status(self, actor_id, target_id):
        # self has no relationship, which is different from notFollowing
        if actor_id == target_id:
            return None

        target = await self.identity_store.find_by_id(target_id)
        if target is None:
            raise UserNotFoundError()

        follow = await self.follow_store.find_edge(actor_id, target_id)
        return FollowStatus(follow.status) if follow else FollowStatus.NOT_FOLLOWING

    async def get_follow_count(self, target_id, relation_type) -> int:
        relation_type = FollowRelation(relation_type)
        if relation_type == FollowRelation.FOLLOWED_BY:
            id_key, other = 'following_id', 'followed_by'
        else:
            id_key, other = 'followed_by_id', 'following'
        return await self.follow_store.count_edges(
            {id_key: target_id, 'status': FollowStatus.ACCEPTED, f'{other}__is_deleted': False}
        )


class PermissionService:
    """Decides whether an actor may see a target's profile details and follow lists."""

    def __init__(self, identity_store, follow_store):
        self.identity_store = identity_store
        self.follow_store = follow_store

    async def check_viewing_permission(self, actor_id, target_id) -> PermissionResult:
        if actor_id == target_id:
            return PermissionResult(has_permission=True)

        target = await self.identity_store.find_by_id(target_id)
        if target is None:
            raise UserNotFoundError()

        if not target.is_private:
            return PermissionResult(has_permission=True)

        follow = await self.follow_store.find_edge(actor_id, target_id)
        if follow is not None and follow.status == FollowStatus.ACCEPTED:
            return PermissionResult(has_permission=True)

        return PermissionResult(has_permission=False, reason="private")


class ProfileService:
    def __init__(self, identity_store, follow_service, user_cache):
        self.identity_store = identity_store
        self.follow_service = follow_service
        self.user_cache = user_cache

    async def get_profile(self, current_user, target_id) -> ProfileResult:
        is_self = current_user.pk == target_id

        if is_self:
            target = current_user
        else:
            target = await self._load_user(target_id)

        if target is None or target.is_deleted:
            raise UserNotFoundError()

        if is_self:
            followed_by_count, following_count = await asyncio.gather(
                self.follow_service.get_follow_count(target_id, FollowRelation.FOLLOWED_BY),
                self.follow_service.get_follow_count(target_id, FollowRelation.FOLLOWING),
            )
            follow_status = None
        else:
            followed_by_count, following_count, follow_status = await asyncio.gather(
                self.follow_service.get_follow_count(target_id, FollowRelation.FOLLOWED_BY),
                self.follow_service.get_follow_count(target_id, FollowRelation.FOLLOWING),
                self.follow_service.get_follow_status(current_user.pk, target_id),
            )

        return ProfileResult(
            user=sanitize_user(target, include_email=is_self),
            is_self=is_self,
            followed_by_count=followed_by_count,
            following_count=following_count,
            follow_status=follow_status,
        )

    async def _load_user(self, user_id):
        key = user_key(user_id)
        user = await self.user_cache.get(key)
        if user is not None:
            return user

        user = await self.identity_store.find_by_id(user_id)
        if user is not None:
            await self.user_cache.set_with_ttl(key, user)
        return user
