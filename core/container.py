from dataclasses import dataclass

from django.core.cache import caches

from Profile.services import FollowService, PermissionService, ProfileService
from Profile.stores import FollowStore
from user.services import UserService
from user.stores import IdentityStore
from .cache import UserCache


@dataclass
class Services:
    identity_store: IdentityStore
    follow_store: FollowStore
    user_cache: UserCache
    follow: FollowService
    permission: PermissionService
    profile: ProfileService
    users: UserService


def build_services(cache_backend=None, identity_store=None, follow_store=None):
    """Wire the service graph for one request; nothing here is shared between requests."""
    identity_store = identity_store or IdentityStore()
    follow_store = follow_store or FollowStore()
    user_cache = UserCache(cache_backend if cache_backend is not None else caches['default'])

    follow = FollowService(identity_store, follow_store)
    return Services(
        identity_store=identity_store,
        follow_store=follow_store,
        user_cache=user_cache,
        follow=follow,
        permission=PermissionService(identity_store, follow_store),
        profile=ProfileService(identity_store, follow, user_cache),
        users=UserService(identity_store, user_cache),
    )


class ServicesMixin:
    """APIView mixin handing each request its own service container."""
    services_factory = staticmethod(build_services)

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.services = self.services_factory()
