"""
Django admin registrations for the clinic models.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    Appointment,
    AuditEvent,
    Consultation,
    EmailNotification,
    InsuranceClaim,
    InsurerToken,
    InventoryItem,
    InviteCode,
    JubileeSubmission,
    LeaveRequest,
    Patient,
    Payment,
    StockMovement,
    TreatmentPricing,
    User,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'first_name', 'last_name', 'role', 'is_active')
    list_filter = ('role', 'is_active', 'is_staff')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Clinic', {'fields': ('role', 'phone', 'specialization', 'license_number')}),
    )


@admin.register(InviteCode)
class InviteCodeAdmin(admin.ModelAdmin):
    list_display = ('code', 'role', 'uses_count', 'max_uses', 'is_active', 'expires_at')
    list_filter = ('role', 'is_active')
    search_fields = ('code',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_id', 'name', 'phone', 'patient_type', 'insurance', 'last_visit')
    list_filter = ('patient_type', 'insurance')
    search_fields = ('patient_id', 'name', 'phone', 'insurance_member_id')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient_name', 'date', 'time', 'dentist', 'status')
    list_filter = ('status', 'date')
    search_fields = ('patient_name', 'patient_phone', 'dentist')


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor_name', 'status', 'started_at', 'completed_at')
    list_filter = ('status',)
    search_fields = ('patient__name', 'patient__patient_id', 'doctor_name')


@admin.register(TreatmentPricing)
class TreatmentPricingAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'base_price', 'insurance_provider', 'is_active')
    list_filter = ('category', 'insurance_provider', 'is_active')
    search_fields = ('name', 'smart_item_code')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient_name', 'treatment_name', 'final_total', 'amount_paid', 'payment_status')
    list_filter = ('payment_status', 'payment_method')
    search_fields = ('patient_name', 'treatment_name')


@admin.register(InsuranceClaim)
class InsuranceClaimAdmin(admin.ModelAdmin):
    list_display = ('id', 'claim_number', 'patient_name', 'insurance_provider', 'claim_status')
    list_filter = ('claim_status', 'insurance_provider')
    search_fields = ('claim_number', 'patient_name')


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'current_stock', 'unit', 'reorder_level', 'expiry_date')
    list_filter = ('category',)
    search_fields = ('name', 'brand', 'supplier')


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ('item_name', 'type', 'quantity', 'remaining_stock', 'performed_by', 'created_at')
    list_filter = ('type',)


@admin.register(EmailNotification)
class EmailNotificationAdmin(admin.ModelAdmin):
    list_display = ('recipient_email', 'email_type', 'status', 'sent_at')
    list_filter = ('email_type', 'status')


@admin.register(InsurerToken)
class InsurerTokenAdmin(admin.ModelAdmin):
    list_display = ('provider', 'token_type', 'expires_at', 'updated_at')
    exclude = ('access_token',)


@admin.register(JubileeSubmission)
class JubileeSubmissionAdmin(admin.ModelAdmin):
    list_display = ('bill_no', 'submission_type', 'member_no', 'submission_status', 'current_status')
    list_filter = ('submission_type',)
    search_fields = ('bill_no', 'member_no', 'submission_id')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
    search_fields = ('object_id',)


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'leave_type', 'start_date', 'end_date', 'status', 'reviewed_by')
    list_filter = ('status', 'leave_type')
    search_fields = ('user__username', 'user__first_name', 'user__last_name')
