import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def error_response(exc):
    """Answer a ServiceError with its own status code."""
    return Response({"error": exc.message}, status=exc.status_code)


def internal_server_error(exc, location):
    """Log an unexpected failure and answer 500, exposing detail only in DEBUG."""
    logger.error(f"Error in {location}: {exc}", exc_info=exc)
    data = {"error": "Internal server error"}
    if settings.DEBUG:
        data["detail"] = str(exc)
    return Response(data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def set_auth_cookies(response, access_token, refresh_token):
    """Attach both JWTs as HttpOnly cookies with the configured lifetimes."""
    jwt_settings = settings.SIMPLE_JWT
    response.set_cookie(
        key=settings.AUTH_COOKIE_ACCESS,
        value=str(access_token),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="None" if settings.COOKIE_SECURE else "Lax",
        max_age=int(jwt_settings['ACCESS_TOKEN_LIFETIME'].total_seconds()),
    )
    response.set_cookie(
        key=settings.AUTH_COOKIE_REFRESH,
        value=str(refresh_token),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="None" if settings.COOKIE_SECURE else "Lax",
        max_age=int(jwt_settings['REFRESH_TOKEN_LIFETIME'].total_seconds()),
    )
    return response


def clear_auth_cookies(response):
    response.delete_cookie(settings.AUTH_COOKIE_ACCESS, samesite="None" if settings.COOKIE_SECURE else "Lax")
    response.delete_cookie(settings.AUTH_COOKIE_REFRESH, samesite="None" if settings.COOKIE_SECURE else "Lax")
    return response
