from rest_framework import serializers

from ..models import LabTest
from .fields import isoformat, optional_text


class LabTestInputSerializer(serializers.Serializer):
    test_name = optional_text(max_length=255)
    result = optional_text()
    reference_range = optional_text(max_length=255)
    status = optional_text(max_length=255)


class LabResultSerializer(serializers.Serializer):
    result = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    status = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)


def serialize_labtest(test: LabTest) -> dict:
    return {
        'testId': test.test_id,
        'testName': test.test_name,
        'result': test.result,
        'referenceRange': test.reference_range,
        'status': test.status,
        'patientId': test.patient_id,
        'visitId': test.visit_id,
        'testGivenAt': isoformat(test.test_given_at),
        'resultUpdatedAt': isoformat(test.result_updated_at),
    }
