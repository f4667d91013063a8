import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'
    default_code = 'conflict'


def _message(data) -> str:
    if isinstance(data, dict):
        detail = data.get('detail', data)
        return str(detail) if not isinstance(detail, (dict, list)) else 'Request failed'
    if isinstance(data, list):
        return str(data[0]) if data else 'Request failed'
    return str(data)


def _translate(exc):
    """Map store-level errors onto API exceptions; None when not recognised."""
    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return ValidationError(errors)
    if isinstance(exc, ProtectedError):
        return Conflict('Record is still referenced by dependent records')
    if isinstance(exc, IntegrityError):
        return Conflict('Duplicate field value')
    return None


def api_exception_handler(exc, context):
    exc = _translate(exc) or exc
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error in %s', context.get('view').__class__.__name__, exc_info=exc)
        body = {'success': False, 'message': 'Internal Server Error'}
        if settings.DEBUG:
            body['error'] = repr(exc)
        return Response(body, status=500)

    body = {'success': False}
    if isinstance(exc, ValidationError):
        body['message'] = 'Validation Error'
        body['errors'] = resp.data
    else:
        body['message'] = _message(resp.data)
    resp.data = body
    return resp
