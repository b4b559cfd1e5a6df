"""
Patient registration and maintenance.

Registration is a two-step saga: the patient row is committed first and
an optional visit is attached afterwards in its own transaction.  A
failed visit never undoes the patient; the caller receives a
:class:`PatientRegistration` whose :class:`VisitOutcome` says whether the
visit was created, failed or skipped.

Display codes are ``count + 1`` formatted as three zero-padded digits.
Computing the count and inserting the row happen under
:data:`DISPLAY_CODE_LOCK` (plus a PostgreSQL advisory lock) so two
concurrent registrations cannot pick the same code.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, connection, transaction
from rest_framework.exceptions import APIException, NotFound

from . import schema
from . import visits as visit_service
from ..exceptions import BadRequest, Conflict, PersistenceError
from ..models import Patient, Visit
from ..serializers.fields import PATIENT_KEYS, clean_text, coerce_age, decode_photo, normalize, validate_with
from ..serializers.patient import PatientInputSerializer

logger = logging.getLogger(__name__)

WITH_PHOTO = 'with_photo'
WITHOUT_PHOTO = 'without_photo'

DUPLICATE_AADHAR = 'Patient with this Aadhar number already exists'

DISPLAY_CODE_LOCK = threading.Lock()
# pg_advisory_xact_lock key for display-code assignment
DISPLAY_CODE_ADVISORY_KEY = 7_340_001

TEXT_FIELDS = ('name', 'surname', 'father_name', 'gender', 'address', 'blood_group', 'phone_number')
UPDATABLE_FIELDS = TEXT_FIELDS + ('age',)
# Every column the without-photo insert writes, in order
INSERT_COLUMNS = ('patient_id',) + TEXT_FIELDS + ('age', 'aadhar_number', 'total_visits')


@dataclass
class VisitOutcome:
    CREATED = 'created'
    FAILED = 'failed'
    SKIPPED = 'skipped'

    state: str
    visit: Optional[Visit] = None
    error: Optional[str] = None

    @classmethod
    def skipped(cls) -> 'VisitOutcome':
        return cls(state=cls.SKIPPED)

    def as_response(self) -> dict:
        if self.state == self.CREATED:
            return {'visitId': self.visit.visit_id, 'visitMessage': 'Visit created successfully'}
        if self.state == self.FAILED:
            return {'visitError': self.error}
        return {}


@dataclass
class PatientRegistration:
    patient: Patient
    visit: VisitOutcome = field(default_factory=VisitOutcome.skipped)

    @property
    def complete(self) -> bool:
        return self.visit.state != VisitOutcome.FAILED


def format_display_code(number: int) -> str:
    return f'{number:03d}'


def next_display_code() -> str:
    """Next free code: patient count plus one, advanced past codes already taken."""
    number = Patient.objects.count() + 1
    code = format_display_code(number)
    while Patient.objects.code_exists(code):
        number += 1
        code = format_display_code(number)
    logger.debug('Generated patient ID: %s', code)
    return code


@contextmanager
def display_code_guard():
    """Serialize display-code assignment.  Must run inside a transaction."""
    with DISPLAY_CODE_LOCK:
        if connection.vendor == 'postgresql':
            with connection.cursor() as c:
                c.execute('SELECT pg_advisory_xact_lock(%s)', [DISPLAY_CODE_ADVISORY_KEY])
        yield


def split_payload(payload: Mapping[str, Any]) -> tuple[Mapping[str, Any], Any]:
    """Patient fields may sit at the top level or under ``"patient"``."""
    patient_data = payload
    nested = payload.get('patient')
    if nested is not None:
        if not isinstance(nested, Mapping):
            raise BadRequest('Patient data must be an object')
        logger.debug('Found nested patient data structure')
        patient_data = nested
    return patient_data, payload.get('visit')


def read_patient_fields(data: Mapping[str, Any]) -> dict:
    """Normalize and validate a registration payload.  Raises before any write."""
    fields = normalize(data, PATIENT_KEYS)
    for name in TEXT_FIELDS:
        fields[name] = clean_text(fields[name])
    if not fields['name'] or not fields['surname']:
        logger.warning('Required fields missing in patient creation request')
        raise BadRequest('Name and surname are required')
    fields['age'] = coerce_age(fields['age'])
    aadhar = clean_text(fields['aadhar_number'])
    if not aadhar:
        logger.warning('Aadhar number is missing')
        raise BadRequest('Aadhar number is required')
    fields['aadhar_number'] = aadhar
    explicit_code = clean_text(fields['patient_id'])
    fields['patient_id'] = explicit_code or None
    fields = validate_with(PatientInputSerializer, fields)
    fields['photo'] = decode_photo(fields['photo'])
    return fields


def write_order(mode: Optional[str] = None) -> tuple[str, str]:
    """Primary and fallback insert variants for the configured photo write mode."""
    mode = mode or getattr(settings, 'PHOTO_WRITE_MODE', 'auto')
    if mode == 'auto':
        mode = WITH_PHOTO if schema.photo_column_writable() else WITHOUT_PHOTO
    if mode == WITH_PHOTO:
        return WITH_PHOTO, WITHOUT_PHOTO
    return WITHOUT_PHOTO, WITH_PHOTO


def _insert_with_photo(fields: dict) -> Patient:
    return Patient.objects.create(total_visits=0, **fields)


def _insert_without_photo(fields: dict) -> Patient:
    values = dict(fields, total_visits=0)
    if values.pop('photo', None) is not None:
        logger.warning('Photo column is not writable; storing patient %s without photo', values['patient_id'])
    qn = connection.ops.quote_name
    columns = ', '.join(qn(c) for c in INSERT_COLUMNS)
    placeholders = ', '.join(['%s'] * len(INSERT_COLUMNS))
    with connection.cursor() as c:
        c.execute(
            f'INSERT INTO {qn(Patient._meta.db_table)} ({columns}) VALUES ({placeholders})',
            [values[col] for col in INSERT_COLUMNS],
        )
    return Patient.objects.get(pk=values['patient_id'])


def _write(variant: str, fields: dict) -> Patient:
    if variant == WITH_PHOTO:
        return _insert_with_photo(fields)
    return _insert_without_photo(fields)


def _reject_duplicate_aadhar(aadhar: str) -> None:
    if Patient.objects.aadhar_exists(aadhar):
        logger.warning('Aadhar number already exists: %s', aadhar)
        raise Conflict(DUPLICATE_AADHAR)


def _attempt(variant: str, fields: dict) -> Patient:
    """One insert in its own savepoint.  A unique violation on the Aadhar number is a conflict."""
    try:
        with transaction.atomic():
            return _write(variant, fields)
    except IntegrityError:
        _reject_duplicate_aadhar(fields['aadhar_number'])
        raise


def _persist(fields: dict, order: tuple[str, str]) -> Patient:
    """Insert with the primary variant, falling back once to the other."""
    primary, fallback = order
    try:
        return _attempt(primary, fields)
    except DatabaseError as e:
        logger.warning('Patient insert (%s) failed, retrying %s: %s', primary, fallback, e)
    try:
        return _attempt(fallback, fields)
    except DatabaseError as e:
        logger.error('Error creating patient: %s', e)
        raise PersistenceError(f'Server error: {e}')


def create_patient(fields: dict) -> Patient:
    # schema probe runs outside the transaction
    order = write_order()
    with transaction.atomic():
        with display_code_guard():
            _reject_duplicate_aadhar(fields['aadhar_number'])
            code = fields['patient_id']
            if code is None:
                code = next_display_code()
            elif Patient.objects.code_exists(code):
                raise Conflict(f'Patient with ID {code} already exists')
            patient = _persist(dict(fields, patient_id=code), order)
    logger.info('Created patient %s', patient.patient_id)
    return patient


def attach_visit(patient: Patient, visit_data: Any) -> VisitOutcome:
    """Best-effort visit creation; errors are reported, never raised."""
    if visit_data is None:
        return VisitOutcome.skipped()
    if not isinstance(visit_data, Mapping):
        return VisitOutcome(state=VisitOutcome.FAILED, error='Failed to process visit data: visit must be an object')
    try:
        visit = visit_service.create_visit(patient.patient_id, visit_data)
    except (APIException, DatabaseError) as e:
        message = e.detail if isinstance(e, APIException) else e
        logger.error('Failed to create visit for patient %s: %s', patient.patient_id, message)
        return VisitOutcome(state=VisitOutcome.FAILED, error=f'Failed to create visit: {message}')
    return VisitOutcome(state=VisitOutcome.CREATED, visit=visit)


def register_patient(payload: Mapping[str, Any]) -> PatientRegistration:
    """Validate, create the patient, then attach the optional visit."""
    logger.info('Received patient registration request')
    patient_data, visit_data = split_payload(payload)
    fields = read_patient_fields(patient_data)
    patient = create_patient(fields)
    outcome = attach_visit(patient, visit_data)
    if outcome.state == VisitOutcome.CREATED:
        patient.refresh_from_db()
    return PatientRegistration(patient=patient, visit=outcome)


def get_patient(patient_id: str) -> Patient:
    patient = Patient.objects.by_code(patient_id)
    if patient is None:
        logger.warning('Patient not found: %s', patient_id)
        raise NotFound(f'Patient not found with ID: {patient_id}')
    return patient


def update_patient(patient_id: str, data: Mapping[str, Any]) -> Patient:
    """Update the fields present in ``data``.

    The Aadhar number and code are immutable and ignored here.  Name and
    surname may be omitted but not blanked.
    """
    patient = get_patient(patient_id)
    fields = normalize(data, PATIENT_KEYS)
    del fields['aadhar_number'], fields['patient_id']
    for name in TEXT_FIELDS:
        fields[name] = clean_text(fields[name])
    for name in ('name', 'surname'):
        if fields[name] == '':
            raise BadRequest(f'{name.capitalize()} cannot be empty')
    if fields['age'] is not None:
        fields['age'] = coerce_age(fields['age'])
    fields = validate_with(PatientInputSerializer, fields)

    changed = []
    for name in UPDATABLE_FIELDS:
        if fields[name] is not None:
            setattr(patient, name, fields[name])
            changed.append(name)
    if fields['photo'] is not None:
        patient.photo = decode_photo(fields['photo'])
        changed.append('photo')

    if changed:
        try:
            patient.save(update_fields=changed)
        except DatabaseError as e:
            logger.error('Error updating patient %s: %s', patient_id, e)
            raise PersistenceError(f'Failed to update patient: {e}')
    logger.info('Updated patient %s (%s)', patient_id, ', '.join(changed) or 'no changes')
    return patient


def delete_patient(patient_id: str) -> None:
    patient = get_patient(patient_id)
    patient.delete()
    logger.info('Deleted patient %s', patient_id)
