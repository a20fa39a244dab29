from django.urls import path
from .views import FollowView, FollowStatusView, PendingRequestsView, FollowListView, ProfileDetailsView

urlpatterns = [
    path('requests/', PendingRequestsView.as_view(), name='follow_requests'),
    path('<int:user_id>/', FollowView.as_view(), name='follow_user'),
    path('<int:user_id>/status/', FollowStatusView.as_view(), name='follow_status'),
    path('<int:user_id>/<str:relation_type>/', FollowListView.as_view(), name='follow_list'),
]

profile_urlpatterns = [
    path('<int:user_id>/', ProfileDetailsView.as_view(), name='profile_details'),
]
