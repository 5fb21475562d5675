"""
Error types raised by the services and the DRF exception handler that
turns every API error into ``{"ok": false, "error": {"code", "message"}}``.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """Invalid status transition or other business-rule violation."""


class ConflictError(Exception):
    """The record would duplicate an existing one (email, invite code)."""


class InsurerError(Exception):
    """An insurer API call failed or answered with an error status."""


class InsurerConfigError(InsurerError):
    """Insurer credentials are not configured on this server."""


_DOMAIN_ERRORS = (
    (InsurerConfigError, 'insurer_not_configured', status.HTTP_503_SERVICE_UNAVAILABLE),
    (InsurerError, 'insurer_error', status.HTTP_502_BAD_GATEWAY),
    (WorkflowError, 'workflow_error', status.HTTP_400_BAD_REQUEST),
    (ConflictError, 'conflict', status.HTTP_409_CONFLICT),
)


def api_exception_handler(exc, context):
    for exc_type, code, http_status in _DOMAIN_ERRORS:
        if isinstance(exc, exc_type):
            return Response({'ok': False, 'error': {'code': code, 'message': str(exc)}}, status=http_status)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("unhandled error in %s", context.get('view').__class__.__name__)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', None) or 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
