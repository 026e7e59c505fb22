from django.urls import include, path
from rest_framework import routers

from .views import AccountViewSet, DonationRequestViewSet, DonorViewSet, FundViewSet, StatsAPI

# Router for API endpoints
router = routers.DefaultRouter()
# account emails end in ".com" etc., which would read as a format suffix
router.include_format_suffixes = False
router.register('users', AccountViewSet, basename='users')
router.register('donors', DonorViewSet, basename='donors')
router.register('donation-requests', DonationRequestViewSet, basename='donation-requests')
router.register('funds', FundViewSet, basename='funds')

urlpatterns = [
    path('', include(router.urls)),
    path('stats/', StatsAPI.as_view(), name='stats'),
]
