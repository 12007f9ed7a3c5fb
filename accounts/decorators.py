from functools import wraps
from django.conf import settings
from django.shortcuts import redirect
from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.http import JsonResponse
import logging

logger = logging.getLogger(__name__)


def _wants_json(request):
    accept = request.headers.get('Accept', '')
    return request.path.startswith('/dashboard/api/') or 'application/json' in accept


def staff_required(view_func):
    """
    Decorator that requires an authenticated staff user.
    JSON callers get 401/403 envelopes, browsers are sent to the login page
    with the 'next' parameter preserved.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not request.user.is_authenticated:
            if _wants_json(request):
                return JsonResponse({
                    'success': False,
                    'message': 'Authentication required',
                    'error_code': 'NOT_AUTHENTICATED'
                }, status=401)
            return redirect_to_login(request.get_full_path())

        if not request.user.is_staff:
            if _wants_json(request):
                return JsonResponse({
                    'success': False,
                    'message': 'Access denied. Staff privileges required.',
                    'error_code': 'FORBIDDEN'
                }, status=403)
            messages.error(request, 'Access denied. Staff privileges required.')
            return redirect('clinics:verify_page')

        return view_func(request, *args, **kwargs)
    return _wrapped_view


def cron_secret_required(view_func):
    """
    Require 'Authorization: Bearer <CRON_SECRET>'.
    Without a configured CRON_SECRET the job is only open when DEBUG is on.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        expected_secret = getattr(settings, 'CRON_SECRET', '')
        if not expected_secret:
            if not settings.DEBUG:
                logger.error("Cron request refused: CRON_SECRET is not configured")
                return JsonResponse({
                    'success': False,
                    'error': 'Unauthorized'
                }, status=401)
        elif request.headers.get('Authorization', '') != f'Bearer {expected_secret}':
            logger.warning("Unauthorized cron request attempted")
            return JsonResponse({
                'success': False,
                'error': 'Unauthorized'
            }, status=401)

        return view_func(request, *args, **kwargs)
    return _wrapped_view
