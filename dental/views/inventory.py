from __future__ import annotations

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.models import InventoryItem
from dental.serializers.inventory import (
    InventoryItemSerializer,
    StockMovementCreateSerializer,
    StockMovementSerializer,
)
from dental.services import inventory as inventory_svc


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_items(request):
    if request.method == 'GET':
        qs = InventoryItem.objects.all().order_by('name')
        q = (request.query_params.get('q') or '').strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(brand__icontains=q) | Q(supplier__icontains=q))
        category = request.query_params.get('category')
        if category:
            qs = qs.filter(category=category)
        return Response({'ok': True, 'data': InventoryItemSerializer(qs, many=True).data})

    s = InventoryItemSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    item = s.save()
    return Response({'ok': True, 'data': InventoryItemSerializer(item).data}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_item_detail(request, pk: int):
    item = get_object_or_404(InventoryItem, pk=pk)
    if request.method == 'GET':
        return Response({'ok': True, 'data': InventoryItemSerializer(item).data})
    if request.method == 'DELETE':
        item.delete()
        return Response({'ok': True})
    # stock levels only change through movements
    data = {k: v for k, v in request.data.items() if k != 'current_stock'}
    s = InventoryItemSerializer(item, data=data, partial=True)
    s.is_valid(raise_exception=True)
    s.save()
    return Response({'ok': True, 'data': s.data})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def stock_movements(request):
    if request.method == 'GET':
        qs = inventory_svc.movements(request.query_params.get('itemId'))
        return Response({'ok': True, 'data': StockMovementSerializer(qs[:500], many=True).data})

    s = StockMovementCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    item = get_object_or_404(InventoryItem, pk=v['itemId'])
    try:
        movement = inventory_svc.record_stock_movement(
            item=item,
            type=v['type'],
            quantity=v['quantity'],
            performed_by=request.user.display_name,
            reason=v.get('reason', ''),
            supplier=v.get('supplier', ''),
            brand=v.get('brand', ''),
            expiry_date=v.get('expiryDate'),
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': StockMovementSerializer(movement).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def low_stock(request):
    return Response({'ok': True, 'data': InventoryItemSerializer(inventory_svc.low_stock(), many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def expiring(request):
    try:
        days = int(request.query_params.get('days', 30))
    except ValueError:
        return Response({'ok': False, 'detail': 'days must be an integer'}, status=400)
    qs = inventory_svc.expiring_within(days)
    return Response({'ok': True, 'data': InventoryItemSerializer(qs, many=True).data})
