from django.urls import path
from . import verification_views
from . import views

app_name = 'clinics'

urlpatterns = [
    # Public verification
    path('', verification_views.verify_page, name='verify_page'),
    path('verify/', verification_views.verify_license_api, name='verify_license'),
    path('specializations/', verification_views.active_specializations, name='active_specializations'),
    path('site-settings/', verification_views.public_site_settings, name='public_site_settings'),

    # Scheduled jobs
    path('api/cron/expire-licenses/', views.cron_expire_licenses, name='cron_expire_licenses'),
]
