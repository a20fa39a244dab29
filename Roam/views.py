import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.utils import set_auth_cookies
from user.authentication import CookieJWTAuthentication
from user.utils import sanitize_user

logger = logging.getLogger(__name__)


@method_decorator(never_cache, name="dispatch")
class CookieTokenRefreshView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        raw_refresh = request.COOKIES.get(settings.AUTH_COOKIE_REFRESH)
        if not raw_refresh:
            logger.warning("Refresh token missing in cookies")
            return Response({"error": "Refresh token missing"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            refresh = RefreshToken(raw_refresh)
        except TokenError as e:
            logger.warning(f"Refresh token rejected: {e}")
            return Response({"error": "Invalid or expired refresh token"}, status=status.HTTP_401_UNAUTHORIZED)

        User = get_user_model()
        user = User.objects.live().only("id", "username").filter(id=refresh.get("user_id")).first()
        if not user:
            return Response({"error": "Invalid or expired refresh token"}, status=status.HTTP_401_UNAUTHORIZED)

        # rotate: the old refresh token can't be replayed
        refresh.blacklist()
        new_refresh = RefreshToken.for_user(user)

        logger.info(f"Refreshed tokens for user: {user.username}")
        response = Response({"message": "Tokens refreshed successfully"}, status=status.HTTP_200_OK)
        return set_auth_cookies(response, new_refresh.access_token, new_refresh)


@method_decorator(never_cache, name="dispatch")
class MeApiView(APIView):
    """Sanitized record of the cookie-authenticated user, email included."""
    authentication_classes = [CookieJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"user": sanitize_user(request.user, include_email=True)}, status=status.HTTP_200_OK)
