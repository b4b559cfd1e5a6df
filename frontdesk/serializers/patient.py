from rest_framework import serializers

from ..models import Patient
from .fields import encode_photo, optional_text


class PatientInputSerializer(serializers.Serializer):
    """Column limits for normalized patient fields.  Presence rules live in the service."""
    patient_id = optional_text(max_length=20)
    name = optional_text(max_length=255)
    surname = optional_text(max_length=255)
    father_name = optional_text(max_length=255)
    gender = optional_text(max_length=20)
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=150)
    address = optional_text()
    blood_group = optional_text(max_length=10)
    phone_number = optional_text(max_length=20)
    aadhar_number = optional_text(max_length=20)


def serialize_patient(patient: Patient) -> dict:
    return {
        'patientId': patient.patient_id,
        'name': patient.name,
        'surname': patient.surname,
        'fatherName': patient.father_name,
        'gender': patient.gender,
        'age': patient.age,
        'address': patient.address,
        'bloodGroup': patient.blood_group,
        'phoneNumber': patient.phone_number,
        'aadharNumber': patient.aadhar_number,
        'photo': encode_photo(patient.photo),
        'totalVisits': patient.total_visits,
        'opNo': patient.op_no,
        'regNo': patient.reg_no,
    }
