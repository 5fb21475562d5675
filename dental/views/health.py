import logging

from django.db import connection
from django.db.utils import DatabaseError
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def healthz(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        logger.error("health check: database unreachable", exc_info=True)
        return Response({'ok': False, 'db': 'down'}, status=503)
    return Response({'ok': True, 'db': 'up'})
