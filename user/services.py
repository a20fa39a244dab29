import logging

from asgiref.sync import sync_to_async

from core.errors import ConstraintViolationError
from .errors import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    UsernameAlreadyExistsError,
    UserNotFoundError,
)
from .utils import sanitize_user, user_key

logger = logging.getLogger(__name__)


class UserService:
    """Account management on top of the identity store and the user cache."""

    def __init__(self, identity_store, user_cache):
        self.identity_store = identity_store
        self.user_cache = user_cache

    async def register(self, username, email, password):
        if await self.identity_store.find_by_email(email):
            raise EmailAlreadyExistsError(email)
        if await self.identity_store.find_by_username(username):
            raise UsernameAlreadyExistsError(username)
        try:
            user = await self.identity_store.create(username=username, email=email, password=password)
        except ConstraintViolationError as exc:
            if exc.field == 'email':
                raise EmailAlreadyExistsError(email) from exc
            raise UsernameAlreadyExistsError(username) from exc
        logger.info(f"User '{user.username}' registered")
        return user

    async def authenticate(self, identifier, password):
        identifier = identifier.strip().lower()
        if '@' in identifier:
            user = await self.identity_store.find_by_email(identifier)
        else:
            user = await self.identity_store.find_by_username(identifier)
        if user is None or not user.is_active:
            raise InvalidCredentialsError()
        if not await sync_to_async(user.check_password)(password):
            raise InvalidCredentialsError()
        return user

    async def check_username_availability(self, username, current_username):
        """Returns (available, reason) where reason is "current", "taken" or None."""
        normalized = username.lower()
        if normalized == current_username.lower():
            return False, "current"

        user = await self.identity_store.find_by_username(normalized)
        return user is None, ("taken" if user else None)

    async def update_profile(self, current_user, name=None, username=None, bio=None):
        normalized_username = username.lower() if username is not None else None

        # only send the fields that actually change
        updates = {}
        if name is not None and name != current_user.name:
            updates['name'] = name
        if normalized_username is not None and normalized_username != current_user.username:
            updates['username'] = normalized_username
        if bio is not None and bio != current_user.bio:
            updates['bio'] = bio

        if not updates:
            return sanitize_user(current_user, include_email=True)

        try:
            updated_user = await self.identity_store.update(current_user.pk, **updates)
        except ConstraintViolationError as exc:
            if exc.field == 'username':
                raise UsernameAlreadyExistsError(normalized_username) from exc
            raise
        if updated_user is None:
            raise UserNotFoundError()

        await self.user_cache.set_with_ttl(user_key(updated_user.pk), updated_user)
        logger.info(f"Profile updated for user {updated_user.pk}: {sorted(updates)}")
        return sanitize_user(updated_user, include_email=True)

    async def update_privacy(self, current_user, toggle_option):
        is_private = toggle_option == "private"
        if is_private == current_user.is_private:
            return sanitize_user(current_user, include_email=True)

        updated_user = await self.identity_store.update(current_user.pk, is_private=is_private)
        if updated_user is None:
            raise UserNotFoundError()

        await self.user_cache.set_with_ttl(user_key(updated_user.pk), updated_user)
        logger.info(f"User {updated_user.pk} is now {toggle_option}")
        return sanitize_user(updated_user, include_email=True)

    async def soft_delete(self, current_user, password):
        if not await sync_to_async(current_user.check_password)(password):
            raise InvalidCredentialsError()

        deleted_user = await self.identity_store.soft_delete(current_user.pk)
        if deleted_user is None:
            raise UserNotFoundError()

        await self.user_cache.delete(user_key(deleted_user.pk))
        return sanitize_user(deleted_user, include_email=True)
