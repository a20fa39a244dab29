import re

from rest_framework import serializers

from .models import User

USERNAME_RE = re.compile(r'^(?!_+$)[a-z0-9_]+$')


def _normalize_username(value):
    value = value.strip().lower()
    if not USERNAME_RE.match(value):
        raise serializers.ValidationError(
            "Username can only contain letters, numbers, and underscores; and cannot contain only underscores"
        )
    return value


# Public user shape; email only when the context asks for it
class SanitizedUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'bio', 'profile_pic', 'is_private', 'email']
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get('include_email', False):
            data.pop('email', None)
        return data


class SignupSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=30, trim_whitespace=True)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, max_length=128, write_only=True)

    def validate_username(self, value):
        return _normalize_username(value)

    def validate_email(self, value):
        return value.strip().lower()


# Login accepts either the username or the email in "identifier"
class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=254, trim_whitespace=True)
    password = serializers.CharField(max_length=128, write_only=True)


class CheckUsernameSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=30, trim_whitespace=True)

    def validate_username(self, value):
        return _normalize_username(value)


class UpdateProfileSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=30, required=False, trim_whitespace=True)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    bio = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_username(self, value):
        return _normalize_username(value)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("You must update at least one field")
        return attrs


class UpdatePrivacySerializer(serializers.Serializer):
    toggle_option = serializers.ChoiceField(choices=['private', 'public'])


class DeleteAccountSerializer(serializers.Serializer):
    password = serializers.CharField(min_length=8, max_length=128, write_only=True)
