"""
Lab tests ordered for a patient, optionally within a visit.

Status starts as ``Pending`` and becomes ``Completed`` when a result is
recorded without an explicit status.  ``result_updated_at`` is stamped by
the labtests update trigger.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from ..exceptions import BadRequest
from ..models import LabTest, Patient, Visit
from ..serializers.fields import LABTEST_KEYS, clean_text, normalize, parse_timestamp, validate_with
from ..serializers.labtest import LabTestInputSerializer

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('test_name', 'result', 'reference_range', 'status')


def _read_fields(data: Mapping[str, Any]) -> dict:
    if not isinstance(data, Mapping):
        raise BadRequest('Lab test data must be an object')
    fields = normalize(data, LABTEST_KEYS)
    for name in EDITABLE_FIELDS:
        fields[name] = clean_text(fields[name])
    fields = validate_with(LabTestInputSerializer, fields)
    fields['test_given_at'] = parse_timestamp(fields['test_given_at'], 'testGivenAt')
    return fields


def get_labtest(test_id: int) -> LabTest:
    test = LabTest.objects.filter(test_id=test_id).first()
    if test is None:
        raise NotFound(f'Lab test not found with id: {test_id}')
    return test


def create_labtest(patient_id: str, visit_id: Optional[int], data: Mapping[str, Any]) -> LabTest:
    patient = Patient.objects.by_code(patient_id)
    if patient is None:
        raise NotFound(f'Patient not found with id: {patient_id}')
    visit = None
    if visit_id is not None:
        visit = Visit.objects.filter(visit_id=visit_id).first()
        if visit is None:
            raise NotFound(f'Visit not found with id: {visit_id}')

    fields = _read_fields(data)
    if fields['status'] is None:
        fields['status'] = LabTest.STATUS_PENDING
    if fields['test_given_at'] is None:
        fields['test_given_at'] = timezone.now()

    with transaction.atomic():
        test = LabTest.objects.create(patient=patient, visit=visit, **fields)
    logger.info('Created lab test %s for patient %s (visit %s)', test.test_id, patient_id, visit_id)
    return test


def update_labtest(test_id: int, data: Mapping[str, Any]) -> LabTest:
    """Replace name, result, reference range and status.  Associations are kept."""
    test = get_labtest(test_id)
    fields = _read_fields(data)
    for name in EDITABLE_FIELDS:
        setattr(test, name, fields[name])
    test.save(update_fields=list(EDITABLE_FIELDS))
    test.refresh_from_db()
    logger.info('Updated lab test %s', test_id)
    return test


def record_result(test_id: int, result: Optional[str], status: Optional[str] = None) -> LabTest:
    """Store a result; status defaults to ``Completed`` unless one is given."""
    test = get_labtest(test_id)
    test.result = clean_text(result)
    test.status = clean_text(status) or LabTest.STATUS_COMPLETED
    test.save(update_fields=['result', 'status'])
    test.refresh_from_db()
    logger.info('Recorded result for lab test %s (status %s)', test_id, test.status)
    return test


def delete_labtest(test_id: int) -> None:
    test = get_labtest(test_id)
    test.delete()
    logger.info('Deleted lab test %s', test_id)
