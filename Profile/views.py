import logging

from asgiref.sync import async_to_sync
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.container import ServicesMixin
from core.errors import ServiceError
from core.utils import error_response, internal_server_error
from user.authentication import CookieJWTAuthentication
from .serializers import (
    FollowListQuerySerializer,
    FollowRequestSerializer,
    FollowSerializer,
    UpdateFollowStatusSerializer,
)

logger = logging.getLogger(__name__)


class ProfileDetailsView(ServicesMixin, APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id):
        try:
            profile = async_to_sync(self.services.profile.get_profile)(request.user, user_id)
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "ProfileDetailsView")

        return Response(profile.as_dict(), status=status.HTTP_200_OK)


@method_decorator(never_cache, name="dispatch")
class FollowView(ServicesMixin, APIView):
    """Follow a public user, or send a follow request to a private one."""
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request, user_id):
        try:
            result = async_to_sync(self.services.follow.follow_user)(request.user.pk, user_id)
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "FollowView")

        follow = result.follow
        message = "Successfully followed user" if follow.status == "accepted" else "Follow request sent"
        return Response(
            {"message": message, "follow": FollowSerializer(follow).data},
            status=status.HTTP_201_CREATED if result.is_new_relationship else status.HTTP_200_OK,
        )


@method_decorator(never_cache, name="dispatch")
class FollowStatusView(ServicesMixin, APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id):
        try:
            follow_status = async_to_sync(self.services.follow.get_follow_status)(request.user.pk, user_id)
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "FollowStatusView.get")

        if follow_status is None:
            return Response(
                {"error": "You do not have a follow relationship with yourself"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response({"follow_status": str(follow_status)}, status=status.HTTP_200_OK)

    def patch(self, request, user_id):
        # accept|reject|remove act on the caller's followers, cancel|unfollow on who they follow
        serializer = UpdateFollowStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = async_to_sync(self.services.follow.update_follow_status)(
                request.user.pk, user_id, serializer.validated_data['action']
            )
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "FollowStatusView.patch")

        return Response(
            {"message": result.message, "follow": FollowSerializer(result.follow).data},
            status=status.HTTP_200_OK,
        )


@method_decorator(never_cache, name="dispatch")
class PendingRequestsView(ServicesMixin, APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            pending = async_to_sync(self.services.follow.get_pending_follow_requests)(request.user.pk)
        except Exception as e:
            return internal_server_error(e, "PendingRequestsView")

        return Response(
            {"pending_requests": FollowRequestSerializer(pending, many=True).data},
            status=status.HTTP_200_OK,
        )


class FollowListView(ServicesMixin, APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id, relation_type):
        serializer = FollowListQuerySerializer(data={**request.query_params.dict(), 'relation_type': relation_type})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        load_index = serializer.validated_data['loadIndex']

        try:
            permission = async_to_sync(self.services.permission.check_viewing_permission)(request.user.pk, user_id)
            if not permission.has_permission:
                return Response(
                    {"error": "This account is private", "reason": permission.reason},
                    status=status.HTTP_403_FORBIDDEN,
                )
            result = async_to_sync(self.services.follow.get_follow_list)(user_id, relation_type, load_index)
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "FollowListView")

        return Response(
            {"users": result.users, "has_more": result.has_more, "load_index": load_index},
            status=status.HTTP_200_OK,
        )
