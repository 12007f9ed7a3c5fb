from django.db import DatabaseError
import logging

from .models import SiteSetting

logger = logging.getLogger(__name__)


def site_settings(request):
    """Footer text and other editable site settings for every template"""
    try:
        return {'site_settings': SiteSetting.as_dict()}
    except DatabaseError as e:
        logger.error(f"Error loading site settings: {str(e)}")
        return {'site_settings': {}}
