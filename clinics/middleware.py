"""
Response header middleware for the admin dashboard
"""
import logging

logger = logging.getLogger(__name__)


class NoCacheMiddleware:
    """
    Disable caching on dashboard and admin pages so clinic records
    and verification counts are always fresh.
    """

    NO_CACHE_PATHS = [
        '/dashboard/',
        '/admin/',
        '/accounts/',
    ]

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if any(request.path.startswith(path) for path in self.NO_CACHE_PATHS):
            response['Cache-Control'] = 'no-cache, no-store, must-revalidate, max-age=0, private'
            response['Pragma'] = 'no-cache'
            response['Expires'] = '0'
            response['X-Accel-Expires'] = '0'

            logger.debug(f"Applied no-cache headers to: {request.path}")

        return response
