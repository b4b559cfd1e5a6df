"""
API error types and the unified DRF exception handler.

Every error response has the shape ``{"error": <message>}``; field-level
serializer errors additionally carry ``"details"``.  Exceptions that DRF
does not know about become a 500 with the underlying message embedded.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback

logger = logging.getLogger(__name__)


class BadRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request'
    default_code = 'bad_request'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'
    default_code = 'conflict'


class PersistenceError(APIException):
    """The store rejected a write that passed validation."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Server error'
    default_code = 'persistence_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.error('Unhandled exception in %s: %s', _where(context), exc, exc_info=exc)
        set_rollback()
        return Response({'error': f'Server error: {exc}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if resp.status_code >= 500:
        logger.error('Request failed in %s: %s', _where(context), exc)
    # normalize response
    data = resp.data
    if isinstance(data, dict) and 'detail' in data:
        body = {'error': data['detail']}
    elif isinstance(data, list):
        body = {'error': data[0] if len(data) == 1 else data}
    else:
        body = {'error': 'Invalid request', 'details': data}
    return Response(body, status=resp.status_code, headers=_passthrough_headers(resp))


def _where(context) -> str:
    request = (context or {}).get('request')
    if request is None:
        return 'unknown request'
    return f'{request.method} {request.path}'


def _passthrough_headers(resp) -> dict:
    return {k: v for k, v in resp.items() if k in ('Retry-After', 'Allow', 'WWW-Authenticate')}
