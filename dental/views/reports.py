"""
Read-only report endpoints. ``?year=`` defaults to the current year.
"""
from __future__ import annotations

import datetime

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.permissions import IsFinanceRole
from dental.services import reports as report_svc


def _year(request) -> int:
    try:
        return int(request.query_params.get('year') or timezone.localdate().year)
    except ValueError:
        return timezone.localdate().year


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def financial_report(request):
    rows = report_svc.monthly_financials(_year(request))
    return Response({'ok': True, 'data': rows, 'totals': report_svc.financial_totals(rows)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_report(request):
    year = _year(request)
    return Response({
        'ok': True,
        'data': report_svc.monthly_patients(year),
        'retentionRate': report_svc.retention_rate(year),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def treatment_report(request):
    return Response({'ok': True, 'data': report_svc.treatment_report(_year(request))})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    day = None
    if request.query_params.get('date'):
        try:
            day = datetime.date.fromisoformat(request.query_params['date'])
        except ValueError:
            return Response({'ok': False, 'detail': 'Invalid date'}, status=400)
    return Response({'ok': True, 'data': report_svc.cached_dashboard_stats(day)})
