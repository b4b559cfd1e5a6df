"""
Database models for the clinic front desk.

Four tables back the API: patients, visits, lab tests and nurses.  Table
and column names match the schema shared with the existing database,
which also carries the triggers installed by
:mod:`frontdesk.dbtriggers` (registration/outpatient numbers, visit
counters and lab-result timestamps).  Those columns are written by the
store, never by application code.

Each model has a small QuerySet acting as its persistence adapter:
lookups by primary and secondary key plus existence checks.
"""
from __future__ import annotations

from django.db import models


class PatientQuerySet(models.QuerySet):
    def by_code(self, patient_id: str):
        return self.filter(patient_id=patient_id).first()

    def by_aadhar(self, aadhar_number: str):
        return self.filter(aadhar_number=aadhar_number).first()

    def aadhar_exists(self, aadhar_number: str) -> bool:
        return self.filter(aadhar_number=aadhar_number).exists()

    def code_exists(self, patient_id: str) -> bool:
        return self.filter(patient_id=patient_id).exists()


class Patient(models.Model):
    """A registered patient.

    ``patient_id`` is the short zero-padded display code shown at the
    front desk (``"007"``); ``aadhar_number`` is the national identity
    number and is unique across all patients.
    """
    patient_id = models.CharField(max_length=20, primary_key=True)
    name = models.CharField(max_length=255)
    surname = models.CharField(max_length=255)
    father_name = models.CharField(max_length=255, null=True, blank=True)
    gender = models.CharField(max_length=20, null=True, blank=True)
    age = models.IntegerField(default=0, null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    blood_group = models.CharField(max_length=10, null=True, blank=True)
    phone_number = models.CharField(max_length=20, null=True, blank=True)
    aadhar_number = models.CharField(max_length=20, unique=True)
    photo = models.BinaryField(null=True, blank=True, editable=True)
    # Maintained by the visits insert trigger
    total_visits = models.IntegerField(default=0, null=True)
    op_no = models.CharField(max_length=50, unique=True, null=True, blank=True)
    reg_no = models.CharField(max_length=50, unique=True, null=True, blank=True)

    objects = PatientQuerySet.as_manager()

    class Meta:
        db_table = 'patients'
        ordering = ['patient_id']

    def __str__(self) -> str:
        return f"{self.name} {self.surname} ({self.patient_id})"


class VisitQuerySet(models.QuerySet):
    def for_patient(self, patient_id: str):
        return self.filter(patient_id=patient_id).order_by('visit_id')

    def recent_for_patient(self, patient_id: str):
        return self.filter(patient_id=patient_id).order_by('-visit_date', '-visit_id')


class Visit(models.Model):
    """One visit of a patient to the clinic, with vitals and complaint."""
    visit_id = models.BigAutoField(primary_key=True)
    visit_date = models.DateTimeField(null=True, blank=True)
    bp = models.CharField(max_length=50, null=True, blank=True)
    complaint = models.TextField(null=True, blank=True)
    symptoms = models.TextField(null=True, blank=True)
    op_no = models.CharField(max_length=50, null=True, blank=True)
    reg_no = models.CharField(max_length=50, null=True, blank=True)
    status = models.CharField(max_length=50, null=True, blank=True)
    temperature = models.CharField(max_length=50, null=True, blank=True)
    weight = models.CharField(max_length=50, null=True, blank=True)
    prescription = models.TextField(null=True, blank=True)
    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name='visits', db_column='patient_id'
    )

    objects = VisitQuerySet.as_manager()

    class Meta:
        db_table = 'visits'
        ordering = ['visit_id']

    def __str__(self) -> str:
        return f"Visit {self.visit_id} of {self.patient_id}"


class LabTestQuerySet(models.QuerySet):
    def for_patient(self, patient_id: str):
        return self.filter(patient_id=patient_id)

    def for_visit(self, visit_id: int):
        return self.filter(visit_id=visit_id)

    def with_status(self, status: str):
        return self.filter(status=status)


class LabTest(models.Model):
    STATUS_PENDING = 'Pending'
    STATUS_COMPLETED = 'Completed'

    test_id = models.BigAutoField(primary_key=True)
    test_name = models.CharField(max_length=255, null=True, blank=True)
    result = models.TextField(null=True, blank=True)
    reference_range = models.CharField(max_length=255, null=True, blank=True)
    status = models.CharField(max_length=255, default=STATUS_PENDING, null=True, blank=True)
    visit = models.ForeignKey(
        Visit, null=True, blank=True, on_delete=models.SET_NULL, related_name='lab_tests', db_column='visit_id'
    )
    patient = models.ForeignKey(
        Patient, on_delete=models.CASCADE, related_name='lab_tests', db_column='patient_id'
    )
    test_given_at = models.DateTimeField(null=True, blank=True)
    # Stamped by the labtests update trigger
    result_updated_at = models.DateTimeField(null=True, blank=True)

    objects = LabTestQuerySet.as_manager()

    class Meta:
        db_table = 'labtests'
        ordering = ['test_id']

    def __str__(self) -> str:
        return f"{self.test_name} ({self.status})"


class NurseQuerySet(models.QuerySet):
    def by_nurse_id(self, nurse_id: str):
        return self.filter(nurse_id=nurse_id).first()

    def nurse_id_exists(self, nurse_id: str) -> bool:
        return self.filter(nurse_id=nurse_id).exists()

    def email_exists(self, email: str, exclude_nurse_id: str | None = None) -> bool:
        qs = self.filter(email=email)
        if exclude_nurse_id:
            qs = qs.exclude(nurse_id=exclude_nurse_id)
        return qs.exists()

    def with_status(self, status: str):
        return self.filter(status__iexact=status)


class Nurse(models.Model):
    """Front-desk staff account.

    The credential is stored and compared as plain text; there is no
    hashing and no token issuance.
    """
    nurse_id = models.CharField(max_length=50, primary_key=True)
    name = models.CharField(max_length=100, null=True, blank=True)
    email = models.CharField(max_length=100, unique=True, null=True, blank=True)
    password = models.CharField(max_length=255)
    created_at = models.DateTimeField(null=True, blank=True)
    role = models.CharField(max_length=50, null=True, blank=True)
    status = models.CharField(max_length=20, null=True, blank=True)

    objects = NurseQuerySet.as_manager()

    class Meta:
        db_table = 'nurse'
        ordering = ['nurse_id']

    def __str__(self) -> str:
        return f"{self.name or self.nurse_id} ({self.role or 'nurse'})"
