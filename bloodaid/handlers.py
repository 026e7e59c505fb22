import logging

from django.db import DatabaseError
from rest_framework.views import exception_handler

from .exceptions import UpstreamFailure, error_kind

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Render every API error as ``{"error": <kind>, "detail": ...}``."""
    if isinstance(exc, DatabaseError):
        logger.exception("Database error while handling %s", context.get('view'))
        exc = UpstreamFailure('The document store is unavailable.')

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and set(data) == {'detail'}:
        data = data['detail']
    response.data = {'error': error_kind(exc), 'detail': data}
    return response
