"""
Django admin registrations for the clinical models.

Superusers can inspect and correct tenant data through ``/admin/``.
Passwords set here go through Django's own hasher; the API never
exposes them.
"""

from django.contrib import admin

from .models import AuditEvent, Doctor, Hospital, PatientEnrollment, Prescription, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'name', 'role', 'hospital', 'is_active', 'is_staff')
    list_filter = ('role', 'hospital', 'is_active')
    search_fields = ('email', 'name')
    exclude = ('password',)
    ordering = ('email',)


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('name', 'license_number', 'phone', 'bed_capacity', 'created_at')
    search_fields = ('name', 'license_number', 'email')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'specialization', 'hospital', 'created_at')
    list_filter = ('hospital', 'specialization')
    search_fields = ('name', 'email')


@admin.register(PatientEnrollment)
class PatientEnrollmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'age', 'gender', 'doctor', 'hospital', 'date_of_admission')
    list_filter = ('hospital', 'gender')
    search_fields = ('name',)


@admin.register(Prescription)
class PrescriptionAdmin(admin.ModelAdmin):
    list_display = ('medication', 'dosage', 'patient_enrollment', 'doctor', 'hospital', 'created_at')
    list_filter = ('hospital',)
    search_fields = ('medication', 'patient_enrollment__name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'user', 'object_type', 'object_id')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__email')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
