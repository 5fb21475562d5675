"""
Payments, insurance claims, treatment prices and the copayment calculator.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from dental.models import Appointment, InsuranceClaim, Patient, Payment, TreatmentPricing
from dental.permissions import ADMIN_ROLES, IsFinanceRole, has_role
from dental.serializers.billing import (
    ClaimStatusSerializer,
    ClaimSubmitSerializer,
    CopaymentRequestSerializer,
    InsuranceClaimSerializer,
    PaymentCreateSerializer,
    PaymentSerializer,
    RecordPaymentSerializer,
    TreatmentPricingSerializer,
)
from dental.services import billing as billing_svc
from dental.services.copayment import calculate_copayment, items_total, payment_plan, validate_coverage


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def payments(request):
    if request.method == 'GET':
        qs = Payment.objects.prefetch_related('items').order_by('-created_at')
        params = request.query_params
        if params.get('patientId'):
            qs = qs.filter(patient_id=params['patientId'])
        if params.get('status'):
            qs = qs.filter(payment_status=params['status'])
        if params.get('dateFrom'):
            qs = qs.filter(payment_date__gte=params['dateFrom'])
        if params.get('dateTo'):
            qs = qs.filter(payment_date__lte=params['dateTo'])
        return Response({'ok': True, 'data': PaymentSerializer(qs[:500], many=True).data})

    s = PaymentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    patient = get_object_or_404(Patient, pk=v['patientId'])
    appointment = None
    if v.get('appointmentId'):
        appointment = get_object_or_404(Appointment, pk=v['appointmentId'])
    try:
        payment = billing_svc.create_payment(
            patient=patient,
            treatment_name=v['treatmentName'],
            total_amount=v['totalAmount'],
            discount_percent=v.get('discountPercent', 0),
            items=v.get('items'),
            appointment=appointment,
            payment_method=v.get('paymentMethod', 'cash'),
            insurance_provider=(v.get('insuranceProvider') or '').upper(),
            notes=v.get('notes', ''),
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': PaymentSerializer(payment).data}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def payment_detail(request, pk: int):
    payment = get_object_or_404(Payment, pk=pk)
    return Response({'ok': True, 'data': PaymentSerializer(payment).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def payment_record(request, pk: int):
    payment = get_object_or_404(Payment, pk=pk)
    s = RecordPaymentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    try:
        payment = billing_svc.record_payment(
            payment,
            amount=v['amount'],
            method=v.get('method', 'cash'),
            collected_by=v.get('collectedBy') or request.user.display_name,
            notes=v.get('notes', ''),
        )
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': PaymentSerializer(payment).data})


# ---------------------------------------------------------------------
# Insurance claims
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def claims(request):
    qs = InsuranceClaim.objects.all().order_by('-created_at')
    params = request.query_params
    if params.get('status'):
        qs = qs.filter(claim_status=params['status'])
    if params.get('provider'):
        qs = qs.filter(insurance_provider=params['provider'].upper())
    if params.get('patientId'):
        qs = qs.filter(patient_id=params['patientId'])
    return Response({'ok': True, 'data': InsuranceClaimSerializer(qs[:500], many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def claim_detail(request, pk: int):
    claim = get_object_or_404(InsuranceClaim, pk=pk)
    return Response({'ok': True, 'data': InsuranceClaimSerializer(claim).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def claim_submit(request, pk: int):
    claim = get_object_or_404(InsuranceClaim, pk=pk)
    s = ClaimSubmitSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        claim = billing_svc.submit_claim(claim, signature=s.validated_data['signature'])
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': InsuranceClaimSerializer(claim).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsFinanceRole])
def claim_set_status(request, pk: int):
    claim = get_object_or_404(InsuranceClaim, pk=pk)
    s = ClaimStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    claim = billing_svc.set_claim_status(claim, s.validated_data['status'], reason=s.validated_data.get('reason', ''))
    return Response({'ok': True, 'data': InsuranceClaimSerializer(claim).data})


# ---------------------------------------------------------------------
# Treatment prices
# ---------------------------------------------------------------------
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def pricing(request):
    if request.method == 'GET':
        qs = TreatmentPricing.objects.all().order_by('category', 'name')
        params = request.query_params
        if params.get('active', 'true').lower() != 'all':
            qs = qs.filter(is_active=True)
        if 'provider' in params:
            qs = qs.filter(insurance_provider=params['provider'].strip().upper())
        if params.get('category'):
            qs = qs.filter(category=params['category'])
        return Response({'ok': True, 'data': TreatmentPricingSerializer(qs, many=True).data})

    if not has_role(request.user, ADMIN_ROLES):
        return Response({'ok': False, 'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    s = TreatmentPricingSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    row = s.save()
    return Response({'ok': True, 'data': TreatmentPricingSerializer(row).data}, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def pricing_detail(request, pk: int):
    if not has_role(request.user, ADMIN_ROLES):
        return Response({'ok': False, 'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    row = get_object_or_404(TreatmentPricing, pk=pk)
    if request.method == 'DELETE':
        # prices stay on record for old bills
        row.is_active = False
        row.save(update_fields=['is_active', 'updated_at'])
        return Response({'ok': True})
    s = TreatmentPricingSerializer(row, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    s.save()
    return Response({'ok': True, 'data': s.data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def copayment_calculator(request):
    s = CopaymentRequestSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    items = v.get('items') or []
    total = v['total'] if v.get('total') is not None else items_total(items)
    result = calculate_copayment(
        total,
        v.get('provider'),
        copayment_pct=v.get('copaymentPercentage'),
        deductible=v.get('deductible'),
    )
    coverage = validate_coverage(items, v.get('provider'))
    return Response({
        'ok': True,
        'data': {
            'copayment': result.as_dict(),
            'coverage': {
                'isValid': coverage.is_valid,
                'coveredItems': coverage.covered_items,
                'uncoveredItems': coverage.uncovered_items,
                'warnings': coverage.warnings,
            },
            'paymentPlan': payment_plan(
                result.patient_copayment,
                installments=v.get('installments', 3),
                down_payment_pct=v.get('downPaymentPercentage', 30),
            ),
        },
    })
