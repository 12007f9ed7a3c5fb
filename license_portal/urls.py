"""
URL configuration for license_portal project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('accounts.urls')),
    path('dashboard/api/', include('clinics.api_urls')),
    path('', include('clinics.urls')),
]

# Custom error handlers
handler404 = 'license_portal.views.custom_404'
handler500 = 'license_portal.views.custom_500'
handler403 = 'license_portal.views.custom_403'
