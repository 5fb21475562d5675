from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.services import notifications as notification_svc


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notifications(request):
    qs = notification_svc.notifications_for(request.user)
    if request.query_params.get('unread') in ('1', 'true'):
        qs = qs.filter(read=False)
    rows = [notification_svc.serialize_notification(n) for n in qs[:200]]
    return Response({'ok': True, 'data': rows, 'unread': sum(1 for r in rows if not r['read'])})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk: int):
    if not notification_svc.mark_read(request.user, pk):
        return Response({'ok': False, 'detail': 'Not found'}, status=404)
    return Response({'ok': True})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notifications_mark_all_read(request):
    return Response({'ok': True, 'updated': notification_svc.mark_all_read(request.user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notifications_mark_unread(request):
    ids = request.data.get('ids') or []
    if not isinstance(ids, list):
        return Response({'ok': False, 'detail': 'ids must be a list'}, status=400)
    try:
        ids = [int(i) for i in ids]
    except (TypeError, ValueError):
        return Response({'ok': False, 'detail': 'ids must be integers'}, status=400)
    return Response({'ok': True, 'updated': notification_svc.mark_unread(request.user, ids)})
