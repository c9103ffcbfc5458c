"""
URL configuration for the Inventory Dashboard.
"""
from django.urls import path, include
from django.http import JsonResponse


def health_check(request):
    """Health check endpoint for container orchestration."""
    return JsonResponse({'status': 'healthy', 'service': 'inventory-dashboard'})


urlpatterns = [
    path('health/', health_check, name='health-check'),
    path('api/', include('inventory.urls')),
]
