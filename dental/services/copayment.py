"""
Patient/insurer split of a treatment bill.

Amounts are whole Tanzanian shillings.  Provider codes match
``Patient.insurance`` (``GA``, ``JUBILEE``, ``NHIF``); anything else is
treated as a cash bill.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Iterable, List, Optional

GA_COPAY_PCT = 20
JUBILEE_COPAY_PCT = 10
JUBILEE_DEDUCTIBLE = 5000
NHIF_PREAUTH_THRESHOLD = 100000
INSTALLMENT_THRESHOLD = 50000


def format_tsh(amount: int) -> str:
    return f"{amount:,} Tsh"


def items_total(items: Iterable[dict]) -> int:
    total = 0
    for item in items or []:
        qty = item.get('quantity') or 1
        total += int(item.get('cost') or 0) * int(qty)
    return total


@dataclass
class Breakdown:
    subtotal: int
    deductible: int
    copayment_amount: int
    insurance_amount: int
    patient_owes: int


@dataclass
class CopaymentResult:
    total_amount: int
    insurance_covered: int
    patient_copayment: int
    copayment_percentage: int
    insurance_provider: str
    breakdown: Breakdown
    deductible_amount: Optional[int] = None

    def summary(self) -> str:
        b = self.breakdown
        if self.insurance_provider == 'CASH':
            return f"Cash payment: {format_tsh(b.patient_owes)}"
        parts = [f"{self.insurance_provider} covers: {format_tsh(b.insurance_amount)}"]
        if b.deductible > 0:
            parts.append(f"Deductible: {format_tsh(b.deductible)}")
        if b.copayment_amount > 0:
            parts.append(f"Copayment: {format_tsh(b.copayment_amount)}")
        parts.append(f"Patient pays: {format_tsh(b.patient_owes)}")
        return " | ".join(parts)

    def as_dict(self) -> dict:
        data = asdict(self)
        data['summary'] = self.summary()
        return data


def calculate_copayment(total: int, provider: Optional[str], *,
                        copayment_pct: Optional[int] = None,
                        deductible: Optional[int] = None) -> CopaymentResult:
    total = max(int(total or 0), 0)
    code = (provider or '').strip().upper()

    if code == 'GA':
        pct = GA_COPAY_PCT if copayment_pct is None else copayment_pct
        patient = math.floor(total * pct / 100)
        return CopaymentResult(
            total_amount=total,
            insurance_covered=total - patient,
            patient_copayment=patient,
            copayment_percentage=pct,
            insurance_provider='GA',
            breakdown=Breakdown(total, 0, patient, total - patient, patient),
        )

    if code == 'JUBILEE':
        pct = JUBILEE_COPAY_PCT if copayment_pct is None else copayment_pct
        ded = min(JUBILEE_DEDUCTIBLE if deductible is None else deductible, total)
        copay = math.floor((total - ded) * pct / 100)
        patient = ded + copay
        return CopaymentResult(
            total_amount=total,
            insurance_covered=total - patient,
            patient_copayment=patient,
            copayment_percentage=pct,
            insurance_provider='JUBILEE',
            breakdown=Breakdown(total, ded, copay, total - patient, patient),
            deductible_amount=ded,
        )

    if code == 'NHIF':
        return CopaymentResult(
            total_amount=total,
            insurance_covered=total,
            patient_copayment=0,
            copayment_percentage=0,
            insurance_provider='NHIF',
            breakdown=Breakdown(total, 0, 0, total, 0),
        )

    return CopaymentResult(
        total_amount=total,
        insurance_covered=0,
        patient_copayment=total,
        copayment_percentage=100,
        insurance_provider='CASH',
        breakdown=Breakdown(total, 0, total, 0, total),
    )


@dataclass
class CoverageCheck:
    is_valid: bool
    covered_items: List[dict] = field(default_factory=list)
    uncovered_items: List[dict] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_coverage(items: Iterable[dict], provider: Optional[str]) -> CoverageCheck:
    code = (provider or '').strip().upper()
    covered, uncovered, warnings = [], [], []
    for item in items or []:
        name = str(item.get('name') or '')
        qty = int(item.get('quantity') or 1)
        cost = int(item.get('cost') or 0)
        ok = True
        if code == 'GA':
            lowered = name.lower()
            if 'bleaching' in lowered or 'whitening' in lowered:
                ok = False
                warnings.append(f"{name} may not be covered by GA insurance")
        elif code == 'JUBILEE':
            if qty > 2:
                warnings.append(f"{name} quantity ({qty}) may exceed Jubilee limits")
        elif code == 'NHIF':
            if cost > NHIF_PREAUTH_THRESHOLD:
                warnings.append(f"{name} may require pre-authorization from NHIF")
        (covered if ok else uncovered).append(item)
    return CoverageCheck(is_valid=not uncovered, covered_items=covered,
                         uncovered_items=uncovered, warnings=warnings)


def payment_plan(copayment: int, *, installments: int = 3, down_payment_pct: int = 30) -> dict:
    """Full payment, plus an installment plan for copayments above 50,000 Tsh."""
    plan = {'fullPayment': copayment}
    if copayment > INSTALLMENT_THRESHOLD and installments > 0:
        down = math.floor(copayment * down_payment_pct / 100)
        monthly = math.ceil((copayment - down) / installments)
        plan['installmentPlan'] = {
            'downPayment': down,
            'monthlyPayment': monthly,
            'numberOfMonths': installments,
            'totalWithInterest': down + monthly * installments,
        }
    return plan
