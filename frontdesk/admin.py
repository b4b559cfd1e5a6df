"""
Django admin registrations for the front-desk models.

Lets staff inspect and correct records at ``/admin/`` during development.
Trigger-maintained columns are read-only here.
"""

from django.contrib import admin

from .models import LabTest, Nurse, Patient, Visit


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_id', 'name', 'surname', 'aadhar_number', 'total_visits', 'reg_no')
    search_fields = ('patient_id', 'name', 'surname', 'aadhar_number', 'phone_number')
    readonly_fields = ('total_visits', 'op_no', 'reg_no')
    exclude = ('photo',)


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    list_display = ('visit_id', 'patient', 'visit_date', 'status', 'op_no')
    list_filter = ('status',)
    search_fields = ('patient__patient_id', 'patient__name', 'op_no')
    readonly_fields = ('op_no', 'reg_no')


@admin.register(LabTest)
class LabTestAdmin(admin.ModelAdmin):
    list_display = ('test_id', 'test_name', 'patient', 'visit', 'status', 'result_updated_at')
    list_filter = ('status',)
    search_fields = ('test_name', 'patient__patient_id')
    readonly_fields = ('result_updated_at',)


@admin.register(Nurse)
class NurseAdmin(admin.ModelAdmin):
    list_display = ('nurse_id', 'name', 'email', 'role', 'status', 'created_at')
    list_filter = ('role', 'status')
    search_fields = ('nurse_id', 'name', 'email')
