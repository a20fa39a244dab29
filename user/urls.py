from django.urls import path
from .views import SignupView, LoginView, LogoutView, CheckUsernameView, MeView, PrivacyView

urlpatterns = [
    path('signup/', SignupView.as_view(), name='signup'),
    path('login/', LoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
]

account_urlpatterns = [
    path('check-username/', CheckUsernameView.as_view(), name='check_username'),
    path('me/', MeView.as_view(), name='me_account'),
    path('privacy/', PrivacyView.as_view(), name='privacy'),
]
