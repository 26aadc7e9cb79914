"""
Django admin registrations for the clinic models.

Lets superusers inspect and correct data through ``/admin/``. Only light
configuration is applied.
"""

from django.contrib import admin

from .models import (
    Appointment,
    AuditEvent,
    Doctor,
    Medicine,
    Patient,
    PatientHistory,
    Payment,
    Prescription,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'full_name', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'full_name')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'specialty', 'email', 'is_available')
    list_filter = ('specialty', 'is_available')
    search_fields = ('name', 'email')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'patient_type', 'blood_group', 'created_at')
    list_filter = ('patient_type', 'gender')
    search_fields = ('name', 'email', 'phone')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment_date', 'status', 'is_emergency')
    list_filter = ('status', 'is_emergency')
    search_fields = ('patient__name', 'doctor__name')


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'stock_quantity', 'unit_price', 'expiry_date', 'is_available')
    list_filter = ('category', 'is_available')
    search_fields = ('name', 'manufacturer')


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'medicine', 'dosage', 'prescribed_date')
    search_fields = ('patient__name', 'medicine__name')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'amount', 'payment_status', 'payment_date')
    list_filter = ('payment_status', 'payment_method')


@admin.register(PatientHistory)
class PatientHistoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'visit_date', 'diagnosis')
    search_fields = ('patient__name', 'diagnosis')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
