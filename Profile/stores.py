from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.errors import ConstraintViolationError
from .models import Follow


class FollowStore:
    """Async access to follow edges keyed by the ordered (followed_by, following) pair."""

    async def find_edge(self, followed_by_id, following_id):
        # no edge can exist between a user and themselves
        if followed_by_id == following_id:
            return None
        return await Follow.objects.filter(
            followed_by_id=followed_by_id, following_id=following_id
        ).afirst()

    async def create_edge(self, followed_by_id, following_id, status):
        try:
            return await sync_to_async(self._create)(followed_by_id, following_id, status)
        except IntegrityError as exc:
            raise ConstraintViolationError('followed_by, following') from exc

    async def update_edge(self, followed_by_id, following_id, status):
        edge = await self.find_edge(followed_by_id, following_id)
        if edge is None:
            return None
        edge.status = status
        edge.updated_at = timezone.now()
        await edge.asave(update_fields=['status', 'updated_at'])
        return edge

    async def list_edges(self, filters, order_by=('-updated_at', '-id'), offset=0, limit=None, related=()):
        queryset = Follow.objects.filter(**filters).order_by(*order_by)
        if related:
            queryset = queryset.select_related(*related)
        if limit is not None:
            queryset = queryset[offset:offset + limit]
        elif offset:
            queryset = queryset[offset:]
        return [edge async for edge in queryset]

    async def count_edges(self, filters):
        return await Follow.objects.filter(**filters).acount()

    def _create(self, followed_by_id, following_id, status):
        # savepoint keeps an outer transaction usable after an IntegrityError
        with transaction.atomic():
            return Follow.objects.create(
                followed_by_id=followed_by_id, following_id=following_id, status=status
            )
