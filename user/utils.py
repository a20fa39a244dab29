from hashlib import md5

from .serializers import SanitizedUserSerializer


def user_key(user_id):
    """Generate the cache key for a specific user id."""
    raw = f"user_cache:v1:{user_id}"
    return md5(raw.encode("utf-8")).hexdigest()


def sanitize_user(user, include_email=False):
    """
    Public representation of a user: never the password hash, and the
    email only when the caller is looking at their own account.
    """
    return SanitizedUserSerializer(user, context={'include_email': include_email}).data
