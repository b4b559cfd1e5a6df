"""
Visit creation and maintenance.

Registration and outpatient numbers and the owning patient's visit
counter are written by the visits insert trigger; this module only
inserts the row and re-reads it.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from ..exceptions import BadRequest
from ..models import Patient, Visit
from ..serializers.fields import VISIT_KEYS, clean_text, normalize, parse_timestamp, validate_with
from ..serializers.visit import VisitInputSerializer

logger = logging.getLogger(__name__)

DEFAULT_STATUS = 'Active'
TEXT_FIELDS = ('bp', 'complaint', 'symptoms', 'op_no', 'reg_no', 'status',
               'temperature', 'weight', 'prescription')
UPDATABLE_FIELDS = ('bp', 'complaint', 'symptoms', 'op_no', 'status',
                    'temperature', 'weight', 'prescription')


def _read_fields(data: Mapping[str, Any]) -> dict:
    if not isinstance(data, Mapping):
        raise BadRequest('Visit data must be an object')
    fields = normalize(data, VISIT_KEYS)
    for name in TEXT_FIELDS:
        fields[name] = clean_text(fields[name])
    fields = validate_with(VisitInputSerializer, fields)
    fields['visit_date'] = parse_timestamp(fields['visit_date'], 'visitDate')
    return fields


def get_visit(visit_id: int) -> Visit:
    visit = Visit.objects.filter(visit_id=visit_id).first()
    if visit is None:
        raise NotFound(f'Visit not found with id: {visit_id}')
    return visit


def create_visit(patient_id: str, data: Mapping[str, Any]) -> Visit:
    """Create a visit for ``patient_id``.

    The patient code passed in always wins over one embedded in ``data``.
    Visit date defaults to now and status to ``Active``.
    """
    logger.debug('Creating visit for patient ID: %s', patient_id)
    fields = _read_fields(data)
    embedded = fields.pop('patient_id')
    if embedded is not None and str(embedded) != patient_id:
        logger.warning('Visit has patient ID %s but was created for patient ID %s', embedded, patient_id)

    patient = Patient.objects.by_code(patient_id)
    if patient is None:
        logger.error('Patient not found with ID: %s', patient_id)
        raise NotFound(f'Patient not found with id: {patient_id}')

    if fields['visit_date'] is None:
        fields['visit_date'] = timezone.now()
    if not fields['status']:
        fields['status'] = DEFAULT_STATUS

    with transaction.atomic():
        visit = Visit.objects.create(patient=patient, **fields)
        # pick up trigger-assigned op/reg numbers
        visit.refresh_from_db()
    logger.info('Created visit %s for patient %s', visit.visit_id, patient_id)
    return visit


def update_visit(visit_id: int, data: Mapping[str, Any]) -> Visit:
    """Replace the editable fields of a visit with the values in ``data``."""
    visit = get_visit(visit_id)
    fields = _read_fields(data)
    for name in UPDATABLE_FIELDS:
        setattr(visit, name, fields[name])
    visit.save(update_fields=list(UPDATABLE_FIELDS))
    logger.info('Updated visit %s', visit_id)
    return visit


def delete_visit(visit_id: int) -> None:
    visit = get_visit(visit_id)
    visit.delete()
    logger.info('Deleted visit %s', visit_id)
