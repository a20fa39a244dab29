import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.container import ServicesMixin
from core.errors import ServiceError
from core.utils import clear_auth_cookies, error_response, internal_server_error, set_auth_cookies
from .authentication import CookieJWTAuthentication
from .serializers import (
    CheckUsernameSerializer,
    DeleteAccountSerializer,
    LoginSerializer,
    SignupSerializer,
    UpdatePrivacySerializer,
    UpdateProfileSerializer,
)
from .utils import sanitize_user

logger = logging.getLogger(__name__)


@method_decorator(never_cache, name="dispatch")
class SignupView(ServicesMixin, APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = async_to_sync(self.services.users.register)(**serializer.validated_data)
        except ServiceError as e:
            logger.warning(f"Signup rejected: {e.message}")
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "SignupView")

        refresh = RefreshToken.for_user(user)
        response = Response({
            "message": "Signup successful!",
            "user": sanitize_user(user, include_email=True),
        }, status=status.HTTP_201_CREATED)
        return set_auth_cookies(response, refresh.access_token, refresh)


@method_decorator(never_cache, name='dispatch')
class LoginView(ServicesMixin, APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = async_to_sync(self.services.users.authenticate)(
                serializer.validated_data['identifier'],
                serializer.validated_data['password'],
            )
        except ServiceError as e:
            logger.warning(f"Login failed for {serializer.validated_data['identifier']}")
            return Response({"error": e.message}, status=status.HTTP_401_UNAUTHORIZED)
        except Exception as e:
            return internal_server_error(e, "LoginView")

        refresh = RefreshToken.for_user(user)
        logger.info(f"User {user.username} logged in")
        response = Response({
            "message": "Login successful!",
            "user": sanitize_user(user, include_email=True),
        }, status=status.HTTP_200_OK)
        return set_auth_cookies(response, refresh.access_token, refresh)


@method_decorator(never_cache, name="dispatch")
class LogoutView(APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def post(self, request):
        raw_refresh = request.COOKIES.get(settings.AUTH_COOKIE_REFRESH)
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError as e:
                logger.debug(f"Refresh token already invalid on logout: {e}")

        logger.info(f"User {request.user.username} logged out")
        response = Response({"message": "Logged out successfully"}, status=status.HTTP_200_OK)
        return clear_auth_cookies(response)


@method_decorator(never_cache, name="dispatch")
class CheckUsernameView(ServicesMixin, APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = CheckUsernameSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        username = serializer.validated_data['username']
        try:
            available, reason = async_to_sync(self.services.users.check_username_availability)(
                username, request.user.username
            )
        except Exception as e:
            return internal_server_error(e, "CheckUsernameView")

        if available:
            return Response({
                "message": f"The username {username} is available",
                "available": True,
            }, status=status.HTTP_200_OK)
        return Response({
            "message": f"The username {username} is already taken",
            "available": False,
            "reason": reason,
        }, status=status.HTTP_409_CONFLICT)


@method_decorator(never_cache, name="dispatch")
class MeView(ServicesMixin, APIView):
    """Edit or delete the authenticated user's own account."""
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        serializer = UpdateProfileSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = async_to_sync(self.services.users.update_profile)(request.user, **serializer.validated_data)
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "MeView.patch")

        return Response({"user": user}, status=status.HTTP_200_OK)

    def delete(self, request):
        serializer = DeleteAccountSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = async_to_sync(self.services.users.soft_delete)(request.user, serializer.validated_data['password'])
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "MeView.delete")

        response = Response({"message": "Account deleted", "user": user}, status=status.HTTP_200_OK)
        return clear_auth_cookies(response)


@method_decorator(never_cache, name="dispatch")
class PrivacyView(ServicesMixin, APIView):
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        serializer = UpdatePrivacySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = async_to_sync(self.services.users.update_privacy)(
                request.user, serializer.validated_data['toggle_option']
            )
        except ServiceError as e:
            return error_response(e)
        except Exception as e:
            return internal_server_error(e, "PrivacyView")

        return Response({"user": user}, status=status.HTTP_200_OK)
