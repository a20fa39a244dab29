from django.contrib import admin
from django.urls import path, include
from user.urls import account_urlpatterns
from Profile.urls import profile_urlpatterns
from .views import CookieTokenRefreshView, MeApiView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('user.urls')),
    path('api/auth/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('api/auth/me/', MeApiView.as_view(), name='me'),
    path('api/users/', include(account_urlpatterns)),
    path('api/users/', include(profile_urlpatterns)),
    path('api/follows/', include('Profile.urls')),
]
