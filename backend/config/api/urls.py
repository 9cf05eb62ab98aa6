"""
API URL configuration.
"""
from django.urls import path

from .views import health_check
from .viewsets import ProductsViewSet, WidgetsViewSet

urlpatterns = [
    path('health/', health_check, name='health-check'),

    # Editor popup
    path('products', ProductsViewSet.as_view({'post': 'create'}), name='products'),
    path('products/nonce', ProductsViewSet.as_view({'get': 'nonce'}), name='products-nonce'),
    path('products/pending', ProductsViewSet.as_view({'get': 'pending'}), name='products-pending'),

    # Widget rendering
    path('widgets/resolve', WidgetsViewSet.as_view({'post': 'resolve'}), name='widgets-resolve'),
    path('widgets/assignment', WidgetsViewSet.as_view({'get': 'assignment'}), name='widgets-assignment'),
]
