from django.conf import settings
from django.db import models


class FollowStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    NOT_FOLLOWING = 'notFollowing', 'Not following'


class Follow(models.Model):
    """
    One directed edge: `followed_by` follows (or asked to follow) `following`.
    Rows are never deleted; status moves between the three states instead.
    """
    followed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='following_edges'
    )
    following = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='followed_by_edges'
    )
    status = models.CharField(max_length=16, choices=FollowStatus.choices, default=FollowStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Follow({self.followed_by_id} -> {self.following_id}, {self.status})"

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['followed_by', 'following'], name='unique_follow_pair'),
            models.CheckConstraint(condition=~models.Q(followed_by=models.F('following')), name='no_self_follow'),
        ]
        # list/count queries filter one side plus status and order by recency
        indexes = [
            models.Index(fields=['following', 'status', '-updated_at'], name='follow_following_status_idx'),
            models.Index(fields=['followed_by', 'status', '-updated_at'], name='follow_followedby_status_idx'),
        ]
