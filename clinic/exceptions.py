"""
API error types and the project wide DRF exception handler.

Every error leaves the API as ``{"ok": false, "error": {"code", "message"}}``
so that clients can render an inline message next to the control that
triggered it.
"""
import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class InvalidCredentials(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid email or password.'
    default_code = 'invalid_credentials'


class AccountInactive(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Account is deactivated. Please contact administrator.'
    default_code = 'account_inactive'


class AccountNotFound(exceptions.NotFound):
    default_detail = 'No account is registered with this email.'
    default_code = 'not_found'


class AccessDenied(exceptions.PermissionDenied):
    """The role may not open this screen at all."""
    default_detail = "You don't have permission to access this page."
    default_code = 'access_denied'


class PatientProfileNotFound(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Patient Profile Not Found. Please contact the administrator to link your account.'
    default_code = 'profile_not_found'


class DuplicateSubmission(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'An identical request is already being processed.'
    default_code = 'duplicate_submission'


class BackendUnavailable(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'The data store is temporarily unavailable. Please retry.'
    default_code = 'backend_unavailable'


_CODES = {
    exceptions.ValidationError: 'validation_error',
    exceptions.ParseError: 'validation_error',
    exceptions.NotFound: 'not_found',
    exceptions.PermissionDenied: 'permission_denied',
    exceptions.NotAuthenticated: 'not_authenticated',
    exceptions.AuthenticationFailed: 'authentication_failed',
    exceptions.MethodNotAllowed: 'method_not_allowed',
    exceptions.Throttled: 'throttled',
}


def _error_code(exc) -> str:
    code = getattr(exc, 'default_code', None)
    for klass, mapped in _CODES.items():
        if type(exc) is klass:
            return mapped
    return code or 'api_error'


def error_body(code: str, message) -> dict:
    return {'ok': False, 'error': {'code': code, 'message': message}}


def api_exception_handler(exc, context):
    # Imported lazily: rest_framework.views loads the DRF auth settings,
    # which import clinic.authentication -> clinic.exceptions (cycle).
    from rest_framework.views import exception_handler as drf_exception_handler

    if isinstance(exc, DatabaseError):
        logger.exception('database error in %s', context.get('view'))
        exc = BackendUnavailable()
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view'), exc_info=exc)
        return Response(error_body('server_error', 'Internal server error.'), status=500)
    if isinstance(resp.data, dict) and set(resp.data) == {'detail'}:
        detail = resp.data['detail']
    else:
        detail = resp.data
    resp.data = error_body(_error_code(exc), detail)
    return resp
