from rest_framework import serializers

from ..models import Nurse
from .fields import optional_text


class NurseInputSerializer(serializers.Serializer):
    nurse_id = optional_text(max_length=50)
    name = optional_text(max_length=100)
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True, max_length=100)
    password = optional_text(max_length=255, trim_whitespace=False)
    role = optional_text(max_length=50)
    status = optional_text(max_length=20)


def serialize_nurse(nurse: Nurse) -> dict:
    """Public view of a nurse; the credential is never included."""
    return {
        'nurse_id': nurse.nurse_id,
        'name': nurse.name,
        'email': nurse.email,
        'role': nurse.role,
        'status': nurse.status,
    }
