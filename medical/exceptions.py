import logging

from django.http import JsonResponse
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class InsufficientStock(APIException):
    """Raised inside the submission transaction to force a rollback."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = 'insufficient_stock'

    def __init__(self, medicine: str):
        self.medicine = medicine
        super().__init__(f'Not enough stock for {medicine}.')


class DuplicateCertificate(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict: A certificate with this serial number already exists.'
    default_code = 'duplicate_certificate'


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for key, value in detail.items():
            msg = _first_message(value)
            return msg if key in ('detail', 'non_field_errors') else f'{key}: {msg}'
    if isinstance(detail, (list, tuple)) and detail:
        return _first_message(detail[0])
    return str(detail)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'view', exc_info=exc)
        return Response({'success': False, 'error': 'Internal Server Error'}, status=500)
    # normalize response
    if isinstance(exc, ValidationError):
        payload = {'success': False, 'error': _first_message(resp.data), 'fields': resp.data}
    elif isinstance(resp.data, dict) and 'detail' in resp.data:
        payload = {'success': False, 'error': str(resp.data['detail'])}
    else:
        payload = {'success': False, 'error': _first_message(resp.data)}
    if isinstance(exc, InsufficientStock):
        payload['medicine'] = exc.medicine
    return Response(payload, status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp):
    headers = {}
    for name in ('WWW-Authenticate', 'Retry-After'):
        if resp.has_header(name):
            headers[name] = resp[name]
    return headers


def not_found(request, exception=None):
    return JsonResponse({'success': False, 'error': 'Not Found'}, status=404)


def server_error(request):
    return JsonResponse({'success': False, 'error': 'Internal Server Error'}, status=500)
