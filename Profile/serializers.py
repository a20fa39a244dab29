from rest_framework import serializers

from user.utils import sanitize_user
from .models import Follow
from .types import FollowAction, FollowRelation


class FollowSerializer(serializers.ModelSerializer):
    followed_by_id = serializers.IntegerField(read_only=True)
    following_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Follow
        fields = ['followed_by_id', 'following_id', 'status', 'created_at', 'updated_at']
        read_only_fields = fields


# Pending requests also carry who asked, so the list can render without extra lookups
class FollowRequestSerializer(FollowSerializer):
    followed_by = serializers.SerializerMethodField()

    class Meta(FollowSerializer.Meta):
        fields = FollowSerializer.Meta.fields + ['followed_by']
        read_only_fields = fields

    def get_followed_by(self, obj):
        return sanitize_user(obj.followed_by)


class UpdateFollowStatusSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=[a.value for a in FollowAction])


class FollowListQuerySerializer(serializers.Serializer):
    relation_type = serializers.ChoiceField(choices=[r.value for r in FollowRelation])
    loadIndex = serializers.IntegerField(required=False, default=0)

    def validate_loadIndex(self, value):
        return max(0, value)
