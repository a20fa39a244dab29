import logging

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.errors import ConstraintViolationError
from .models import User

logger = logging.getLogger(__name__)


class IdentityStore:
    """
    Async access to User rows. Lookups never return soft-deleted users, and
    uniqueness failures surface as ConstraintViolationError naming the field.
    """

    async def find_by_id(self, user_id):
        return await User.objects.live().filter(pk=user_id).afirst()

    async def find_by_username(self, username):
        return await User.objects.live().filter(username__iexact=username).afirst()

    async def find_by_email(self, email):
        return await User.objects.live().filter(email__iexact=email).afirst()

    async def create(self, *, username, email, password, **extra_fields):
        try:
            return await sync_to_async(self._create_user)(username, email, password, extra_fields)
        except IntegrityError as exc:
            raise ConstraintViolationError(await self._conflicting_field(username=username, email=email)) from exc

    async def update(self, user_id, **fields):
        fields.setdefault('updated_at', timezone.now())
        try:
            await sync_to_async(self._update_user)(user_id, fields)
        except IntegrityError as exc:
            raise ConstraintViolationError(
                await self._conflicting_field(user_id, username=fields.get('username'), email=fields.get('email'))
            ) from exc
        return await self.find_by_id(user_id)

    async def soft_delete(self, user_id):
        user = await self.find_by_id(user_id)
        if user is None:
            return None
        user.is_deleted = True
        await user.asave(update_fields=['is_deleted', 'updated_at'])
        logger.info(f"User {user_id} soft deleted")
        return user

    def _create_user(self, username, email, password, extra_fields):
        # savepoint keeps an outer transaction usable after an IntegrityError
        with transaction.atomic():
            return User.objects.create_user(username=username, email=email, password=password, **extra_fields)

    def _update_user(self, user_id, fields):
        with transaction.atomic():
            User.objects.filter(pk=user_id, is_deleted=False).update(**fields)

    async def _conflicting_field(self, user_id=None, username=None, email=None):
        # uniqueness spans soft-deleted rows too, so search all users
        others = User.objects.exclude(pk=user_id) if user_id is not None else User.objects.all()
        if username and await others.filter(username__iexact=username).aexists():
            return 'username'
        if email and await others.filter(email__iexact=email).aexists():
            return 'email'
        return 'unknown'
