from rest_framework import serializers

from ..models import Visit
from .fields import isoformat, optional_text


class VisitInputSerializer(serializers.Serializer):
    patient_id = optional_text(max_length=20)
    bp = optional_text(max_length=50)
    complaint = optional_text()
    symptoms = optional_text()
    op_no = optional_text(max_length=50)
    reg_no = optional_text(max_length=50)
    status = optional_text(max_length=50)
    temperature = optional_text(max_length=50)
    weight = optional_text(max_length=50)
    prescription = optional_text()


def serialize_visit(visit: Visit) -> dict:
    return {
        'visitId': visit.visit_id,
        'visitDate': isoformat(visit.visit_date),
        'patientId': visit.patient_id,
        'bp': visit.bp,
        'complaint': visit.complaint,
        'symptoms': visit.symptoms,
        'opNo': visit.op_no,
        'regNo': visit.reg_no,
        'status': visit.status,
        'temperature': visit.temperature,
        'weight': visit.weight,
        'prescription': visit.prescription,
    }
