"""
Database models for the dental clinic backend.

The tables mirror the records the clinic front desk, dentists, radiology
and finance staff work with: staff accounts and invite codes, patients
and their medical history, appointments, consultations with X-ray
results, payments and insurance claims, inventory and the bookkeeping
rows written by the insurer integrations.
"""
from __future__ import annotations

import datetime
import os
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Clinic staff account.

    The role decides which parts of the API a user may reach; see
    :mod:`dental.permissions`.
    """
    ROLE_ADMIN = 'admin'
    ROLE_DENTIST = 'dentist'
    ROLE_RECEPTIONIST = 'receptionist'
    ROLE_ASSISTANT = 'dental_assistant'
    ROLE_TECHNICIAN = 'technician'
    ROLE_RADIOLOGIST = 'radiologist'
    ROLE_FINANCE = 'finance_manager'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DENTIST, 'Dentist'),
        (ROLE_RECEPTIONIST, 'Receptionist'),
        (ROLE_ASSISTANT, 'Dental assistant'),
        (ROLE_TECHNICIAN, 'Technician'),
        (ROLE_RADIOLOGIST, 'Radiologist'),
        (ROLE_FINANCE, 'Finance manager'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_RECEPTIONIST, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    specialization = models.CharField(max_length=128, blank=True)
    license_number = models.CharField(max_length=64, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username


class InviteCode(models.Model):
    """Registration token deciding which role a new staff account gets."""
    code = models.CharField(max_length=64, unique=True)
    role = models.CharField(max_length=20, choices=User.ROLE_CHOICES)
    max_uses = models.PositiveIntegerField(default=1)
    uses_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='invite_codes')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.code} -> {self.role} ({self.uses_count}/{self.max_uses})"


class Patient(models.Model):
    TYPE_CASH = 'cash'
    TYPE_INSURANCE = 'insurance'
    TYPE_CHOICES = ((TYPE_CASH, 'cash'), (TYPE_INSURANCE, 'insurance'))

    # Clinic file number, e.g. SD-00042
    patient_id = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=255, db_index=True)
    gender = models.CharField(max_length=16, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    phone = models.CharField(max_length=32, blank=True, db_index=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    emergency_contact = models.CharField(max_length=255, blank=True)
    emergency_phone = models.CharField(max_length=32, blank=True)
    patient_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default=TYPE_CASH, db_index=True)
    insurance = models.CharField(max_length=32, blank=True)
    insurance_member_id = models.CharField(max_length=64, blank=True)
    smart_patient_number = models.CharField(max_length=64, blank=True)
    last_visit = models.DateField(null=True, blank=True)
    next_appointment = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.patient_id})"


class MedicalRecord(models.Model):
    """An entry in a patient's medical history."""
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='medical_records')
    condition = models.CharField(max_length=255)
    date = models.DateField()
    description = models.TextField(blank=True)
    doctor = models.CharField(max_length=255, blank=True)
    treatment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.condition} ({self.patient_id})"


class TreatmentNote(models.Model):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='treatment_notes')
    date = models.DateField()
    doctor = models.CharField(max_length=255)
    procedure = models.CharField(max_length=255)
    notes = models.TextField(blank=True)
    follow_up = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.procedure} by {self.doctor} on {self.date}"


class Appointment(models.Model):
    STATUS_PENDING = 'Pending'
    STATUS_APPROVED = 'Approved'
    STATUS_CONFIRMED = 'Confirmed'
    STATUS_CHECKED_IN = 'Checked In'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, STATUS_PENDING),
        (STATUS_APPROVED, STATUS_APPROVED),
        (STATUS_CONFIRMED, STATUS_CONFIRMED),
        (STATUS_CHECKED_IN, STATUS_CHECKED_IN),
        (STATUS_IN_PROGRESS, STATUS_IN_PROGRESS),
        (STATUS_COMPLETED, STATUS_COMPLETED),
        (STATUS_CANCELLED, STATUS_CANCELLED),
    ]

    # Null for website bookings until the front desk links a patient file
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    patient_name = models.CharField(max_length=255)
    patient_phone = models.CharField(max_length=32, blank=True)
    patient_email = models.EmailField(blank=True)
    date = models.DateField(db_index=True)
    time = models.CharField(max_length=16)
    treatment = models.CharField(max_length=255, default='General Consultation')
    dentist = models.CharField(max_length=255, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    patient_type = models.CharField(max_length=16, blank=True)
    insurance = models.CharField(max_length=32, blank=True)
    insurance_member_id = models.CharField(max_length=64, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['date', 'dentist'], name='appt_date_dentist_idx'),
            models.Index(fields=['patient', 'date'], name='appt_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_name} {self.date} {self.time} ({self.status})"


class ScheduleNote(models.Model):
    """Free-form note on a dentist's weekly schedule (leave, blocked slot, …)."""
    date = models.DateField(db_index=True)
    time_slot = models.CharField(max_length=32)
    doctor_name = models.CharField(max_length=255, blank=True)
    note = models.TextField()
    type = models.CharField(max_length=32, default='note')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.date} {self.time_slot}: {self.note[:30]}"


class LeaveRequest(models.Model):
    """Staff request for time off, reviewed by an administrator."""
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'pending'),
        (STATUS_APPROVED, 'approved'),
        (STATUS_REJECTED, 'rejected'),
    )
    TYPE_CHOICES = (
        ('annual', 'Annual'),
        ('sick', 'Sick'),
        ('maternity', 'Maternity'),
        ('paternity', 'Paternity'),
        ('compassionate', 'Compassionate'),
        ('study', 'Study'),
        ('unpaid', 'Unpaid'),
        ('other', 'Other'),
    )

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='leave_requests')
    leave_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    reviewed_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL,
                                    related_name='reviewed_leave_requests')
    reviewed_at = models.DateTimeField(null=True, blank=True)
    review_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.user_id} {self.leave_type} {self.start_date}..{self.end_date} ({self.status})"

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class Consultation(models.Model):
    STATUS_IN_PROGRESS = 'in-progress'
    STATUS_WAITING_XRAY = 'waiting-xray'
    STATUS_XRAY_DONE = 'xray-done'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = (
        (STATUS_IN_PROGRESS, 'in-progress'),
        (STATUS_WAITING_XRAY, 'waiting-xray'),
        (STATUS_XRAY_DONE, 'xray-done'),
        (STATUS_COMPLETED, 'completed'),
        (STATUS_CANCELLED, 'cancelled'),
    )
    ACTIVE_STATUSES = (STATUS_IN_PROGRESS, STATUS_WAITING_XRAY, STATUS_XRAY_DONE)

    DIAGNOSIS_CLINICAL = 'clinical'
    DIAGNOSIS_XRAY = 'xray'
    DIAGNOSIS_CHOICES = ((DIAGNOSIS_CLINICAL, 'clinical'), (DIAGNOSIS_XRAY, 'xray'))

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='consultations')
    doctor = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='consultations')
    doctor_name = models.CharField(max_length=255)
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='consultations'
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_IN_PROGRESS, db_index=True)

    symptoms = models.TextField(blank=True)
    examination = models.TextField(blank=True)
    vital_signs = models.JSONField(default=dict, blank=True)
    diagnosis = models.TextField(blank=True)
    diagnosis_type = models.CharField(max_length=16, choices=DIAGNOSIS_CHOICES, blank=True)
    treatment_plan = models.TextField(blank=True)
    prescriptions = models.TextField(blank=True)
    follow_up_instructions = models.TextField(blank=True)
    next_appointment = models.DateField(null=True, blank=True)

    estimated_cost = models.PositiveIntegerField(null=True, blank=True)
    discount_percent = models.PositiveSmallIntegerField(default=0)
    treatment_items = models.JSONField(default=list, blank=True)
    xray_result = models.JSONField(null=True, blank=True)

    started_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'started_at'], name='consult_patient_started_idx'),
            models.Index(fields=['status', 'started_at'], name='consult_status_started_idx'),
        ]

    def __str__(self) -> str:
        return f"consult {self.id} p={self.patient_id} ({self.status})"


def _xray_upload(instance, filename: str) -> str:
    ext = os.path.splitext(filename)[1]
    stamp = datetime.datetime.now().strftime('%Y%m%d%H%M%S')
    return f"xray/{instance.consultation_id}/{stamp}-{uuid.uuid4().hex[:8]}{ext}"


class XRayImage(models.Model):
    consultation = models.ForeignKey(Consultation, on_delete=models.CASCADE, related_name='xray_images')
    file = models.FileField(upload_to=_xray_upload, max_length=512)
    content_type = models.CharField(max_length=128, blank=True)
    size = models.PositiveIntegerField(default=0)
    uploaded_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"xray {self.id} consult={self.consultation_id}"


class TreatmentPricing(models.Model):
    """Price list row; ``insurance_provider`` empty means the cash price."""
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=64, db_index=True)
    base_price = models.PositiveIntegerField()
    duration = models.PositiveIntegerField(default=30, help_text="minutes")
    description = models.TextField(blank=True)
    insurance_provider = models.CharField(max_length=32, blank=True, db_index=True)
    is_active = models.BooleanField(default=True)
    smart_item_code = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} [{self.insurance_provider or 'CASH'}] {self.base_price}"


class Payment(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_PARTIAL = 'partial'
    STATUS_PAID = 'paid'
    STATUS_CHOICES = ((STATUS_PENDING, 'pending'), (STATUS_PARTIAL, 'partial'), (STATUS_PAID, 'paid'))

    METHOD_CHOICES = (
        ('cash', 'cash'),
        ('card', 'card'),
        ('bank_transfer', 'bank_transfer'),
        ('insurance', 'insurance'),
    )

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='payments')
    patient_name = models.CharField(max_length=255)
    treatment_name = models.CharField(max_length=255)
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='payments')
    consultation = models.ForeignKey(
        Consultation, null=True, blank=True, on_delete=models.CASCADE, related_name='payments'
    )
    total_amount = models.PositiveIntegerField()
    discount_percent = models.PositiveSmallIntegerField(default=0)
    discount_amount = models.PositiveIntegerField(default=0)
    final_total = models.PositiveIntegerField(default=0)
    amount_paid = models.PositiveIntegerField(default=0)
    payment_status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_method = models.CharField(max_length=16, choices=METHOD_CHOICES, default='cash')
    insurance_provider = models.CharField(max_length=32, blank=True)
    collected_by = models.CharField(max_length=255, blank=True)
    payment_date = models.DateField(null=True, blank=True, db_index=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.patient_name}: {self.amount_paid}/{self.final_total} ({self.payment_status})"


class PaymentItem(models.Model):
    payment = models.ForeignKey(Payment, on_delete=models.CASCADE, related_name='items')
    item_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.PositiveIntegerField()
    total_price = models.PositiveIntegerField()

    def __str__(self) -> str:
        return f"{self.item_name} x{self.quantity}"


class InsuranceClaim(models.Model):
    STATUS_DRAFT = 'draft'
    STATUS_SUBMITTED = 'submitted'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_PAID = 'paid'
    STATUS_CHOICES = (
        (STATUS_DRAFT, 'draft'),
        (STATUS_SUBMITTED, 'submitted'),
        (STATUS_APPROVED, 'approved'),
        (STATUS_REJECTED, 'rejected'),
        (STATUS_PAID, 'paid'),
    )

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='insurance_claims')
    patient_name = models.CharField(max_length=255)
    consultation = models.OneToOneField(
        Consultation, null=True, blank=True, on_delete=models.SET_NULL, related_name='insurance_claim'
    )
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL)
    insurance_provider = models.CharField(max_length=32)
    treatment_details = models.JSONField(default=dict)
    patient_signature = models.TextField(blank=True)
    claim_status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    claim_number = models.CharField(max_length=64, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"claim {self.claim_number or self.id} {self.insurance_provider} ({self.claim_status})"


class InventoryItem(models.Model):
    name = models.CharField(max_length=255, db_index=True)
    category = models.CharField(max_length=64, db_index=True)
    current_stock = models.IntegerField(default=0)
    unit = models.CharField(max_length=32)
    reorder_level = models.IntegerField(default=0)
    supplier = models.CharField(max_length=255, blank=True)
    brand = models.CharField(max_length=255, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name}: {self.current_stock} {self.unit}"


class StockMovement(models.Model):
    TYPE_IN = 'stock_in'
    TYPE_OUT = 'stock_out'
    TYPE_TAKE = 'stock_take'
    TYPE_CHOICES = ((TYPE_IN, 'stock_in'), (TYPE_OUT, 'stock_out'), (TYPE_TAKE, 'stock_take'))

    item = models.ForeignKey(InventoryItem, null=True, on_delete=models.SET_NULL, related_name='movements')
    item_name = models.CharField(max_length=255)
    type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    quantity = models.IntegerField()
    remaining_stock = models.IntegerField()
    performed_by = models.CharField(max_length=255)
    reason = models.CharField(max_length=255, blank=True)
    supplier = models.CharField(max_length=255, blank=True)
    brand = models.CharField(max_length=255, blank=True)
    expiry_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['item', 'created_at'], name='stockmove_item_created_idx')]

    def __str__(self) -> str:
        return f"{self.type} {self.quantity} {self.item_name}"


class Notification(models.Model):
    type = models.CharField(max_length=32, default='info')
    title = models.CharField(max_length=255)
    message = models.TextField()
    target_role = models.CharField(max_length=20, blank=True)
    target_doctor_name = models.CharField(max_length=255, blank=True)
    target_user = models.ForeignKey(User, null=True, blank=True, on_delete=models.CASCADE, related_name='notifications')
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL)
    read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.type}: {self.title}"


class EmailNotification(models.Model):
    STATUS_SENT = 'sent'
    STATUS_FAILED = 'failed'

    recipient_email = models.EmailField()
    subject = models.CharField(max_length=255)
    email_type = models.CharField(max_length=32)
    status = models.CharField(max_length=16)
    error_message = models.TextField(blank=True)
    appointment = models.ForeignKey(Appointment, null=True, blank=True, on_delete=models.SET_NULL)
    sent_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.email_type} -> {self.recipient_email} ({self.status})"


# ---------------------------------------------------------------------------
# Insurer integration bookkeeping
# ---------------------------------------------------------------------------

class InsurerToken(models.Model):
    """Cached bearer token for an insurer API, one row per provider."""
    PROVIDER_JUBILEE = 'jubilee'
    PROVIDER_SMART = 'smart'
    PROVIDER_CHOICES = ((PROVIDER_JUBILEE, 'Jubilee'), (PROVIDER_SMART, 'SMART/GA'))

    provider = models.CharField(max_length=16, choices=PROVIDER_CHOICES, unique=True)
    access_token = models.TextField()
    token_type = models.CharField(max_length=32, default='Bearer')
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.provider} token until {self.expires_at:%F %T}"


class JubileeVerification(models.Model):
    member_no = models.CharField(max_length=64, db_index=True)
    verification_status = models.CharField(max_length=16)
    authorization_no = models.CharField(max_length=64, blank=True)
    daily_limit = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    benefits = models.JSONField(default=list, blank=True)
    verification_response = models.JSONField(default=dict)
    member_details = models.JSONField(default=dict)
    verified_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"verify {self.member_no} ({self.verification_status})"


class JubileeItemVerification(models.Model):
    member_no = models.CharField(max_length=64, db_index=True)
    benefit_code = models.CharField(max_length=32)
    procedure_code = models.CharField(max_length=32)
    items = models.JSONField(default=list)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    verification_status = models.CharField(max_length=16, blank=True)
    verification_response = models.JSONField(default=dict)
    verified_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"items {self.member_no} ({self.verification_status})"


class JubileeSubmission(models.Model):
    TYPE_PREAUTH = 'preauth'
    TYPE_CLAIM = 'claim'
    TYPE_CHOICES = ((TYPE_PREAUTH, 'preauth'), (TYPE_CLAIM, 'claim'))

    member_no = models.CharField(max_length=64, db_index=True)
    authorization_no = models.CharField(max_length=64)
    submission_type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    bill_no = models.CharField(max_length=64)
    folio_no = models.CharField(max_length=64)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    patient_data = models.JSONField(default=dict, blank=True)
    doctor_data = models.JSONField(default=dict, blank=True)
    treatments = models.JSONField(default=list)
    submission_status = models.CharField(max_length=16, blank=True)
    submission_id = models.CharField(max_length=64, blank=True, db_index=True)
    submission_response = models.JSONField(default=dict)
    current_status = models.CharField(max_length=32, blank=True)
    status_response = models.JSONField(null=True, blank=True)
    last_status_check = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.submission_type} {self.bill_no} ({self.submission_status})"


class JubileePriceList(models.Model):
    """Last successful price/procedure list, served when the live fetch fails."""
    list_type = models.CharField(max_length=16, unique=True)
    list_data = models.JSONField(default=dict)
    last_updated = models.DateTimeField()

    def __str__(self) -> str:
        return f"{self.list_type} list @ {self.last_updated:%F %T}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
