"""
Aggregates for the reports page and the staff dashboard.
"""
from __future__ import annotations

import calendar
import datetime
from typing import Dict, List, Optional

from django.core.cache import cache
from django.db.models import Count, F, Max, Sum
from django.utils import timezone

from dental.models import Appointment, Consultation, InventoryItem, Patient, Payment

MONTHS = [calendar.month_abbr[m] for m in range(1, 13)]

DASHBOARD_CACHE_KEY = 'dashboard:{day}'
DASHBOARD_CACHE_TTL = 60


def monthly_financials(year: int) -> List[Dict]:
    """Revenue per month from collected payments.

    There is no expense ledger, so expenses are always reported as 0.
    """
    revenue = {m: 0 for m in range(1, 13)}
    rows = (
        Payment.objects.filter(payment_date__year=year)
        .values('payment_date__month')
        .annotate(total=Sum('amount_paid'))
    )
    for row in rows:
        revenue[row['payment_date__month']] = row['total'] or 0
    return [{'month': MONTHS[m - 1], 'revenue': revenue[m], 'expenses': 0} for m in range(1, 13)]


def financial_totals(rows: List[Dict]) -> Dict[str, int]:
    revenue = sum(r['revenue'] for r in rows)
    expenses = sum(r['expenses'] for r in rows)
    return {'revenue': revenue, 'expenses': expenses, 'netProfit': revenue - expenses}


def monthly_patients(year: int) -> List[Dict]:
    new = {m: 0 for m in range(1, 13)}
    for row in (
        Patient.objects.filter(created_at__year=year)
        .values('created_at__month')
        .annotate(n=Count('id'))
    ):
        new[row['created_at__month']] = row['n']

    returning = {m: 0 for m in range(1, 13)}
    for row in (
        Appointment.objects.filter(date__year=year, patient__isnull=False)
        .values('patient_id')
        .annotate(n=Count('id'), last=Max('date'))
        .filter(n__gt=1)
    ):
        returning[row['last'].month] += 1

    return [
        {'month': MONTHS[m - 1], 'newPatients': new[m], 'returning': returning[m]}
        for m in range(1, 13)
    ]


def retention_rate(year: int) -> float:
    """Share of patients seen this year who came back more than once, in percent."""
    per_patient = (
        Appointment.objects.filter(date__year=year, patient__isnull=False)
        .values('patient_id')
        .annotate(n=Count('id'))
    )
    seen = 0
    returning = 0
    for row in per_patient:
        seen += 1
        if row['n'] > 1:
            returning += 1
    if not seen:
        return 0.0
    return round(returning * 100 / seen, 1)


def treatment_report(year: int) -> List[Dict]:
    rows = (
        Payment.objects.filter(created_at__year=year)
        .values('treatment_name')
        .annotate(count=Count('id'), revenue=Sum('amount_paid'))
        .order_by('-count', 'treatment_name')
    )
    return [
        {'treatment': r['treatment_name'], 'count': r['count'], 'revenue': r['revenue'] or 0}
        for r in rows
    ]


def dashboard_stats(day: Optional[datetime.date] = None) -> Dict:
    day = day or timezone.localdate()
    by_status = {
        row['status']: row['n']
        for row in Appointment.objects.filter(date=day).values('status').annotate(n=Count('id'))
    }
    month_revenue = (
        Payment.objects.filter(payment_date__gte=day.replace(day=1), payment_date__lte=day)
        .aggregate(total=Sum('amount_paid'))['total']
    ) or 0
    return {
        'date': day.isoformat(),
        'appointmentsToday': sum(by_status.values()),
        'appointmentsByStatus': by_status,
        'totalPatients': Patient.objects.count(),
        'consultationsInProgress': Consultation.objects.filter(status=Consultation.STATUS_IN_PROGRESS).count(),
        'waitingXray': Consultation.objects.filter(status=Consultation.STATUS_WAITING_XRAY).count(),
        'lowStock': InventoryItem.objects.filter(current_stock__lte=F('reorder_level')).count(),
        'monthRevenue': month_revenue,
    }


def cached_dashboard_stats(day: Optional[datetime.date] = None, *, refresh: bool = False) -> Dict:
    day = day or timezone.localdate()
    key = DASHBOARD_CACHE_KEY.format(day=day.isoformat())
    data = None if refresh else cache.get(key)
    if data is None:
        data = dashboard_stats(day)
        cache.set(key, data, DASHBOARD_CACHE_TTL)
    return data
