"""
Service-level tests for display-code assignment and the patient write
variants.  Written as plain pytest functions using pytest-django's ``db``
and ``settings`` fixtures.
"""
from types import SimpleNamespace

import pytest
from django.db import DatabaseError, connection
from rest_framework.test import APIClient

from frontdesk.models import Patient, PatientQuerySet
from frontdesk.services import patients as patient_service
from frontdesk.services import schema
from frontdesk.services.patients import VisitOutcome

from .helpers import make_patient, patient_payload


def test_format_display_code():
    assert patient_service.format_display_code(7) == '007'
    assert patient_service.format_display_code(1234) == '1234'


def test_unguarded_count_reads_race(db):
    # Two registrations that both read the count before either inserts
    # would pick the same code; the guard in create_patient prevents it.
    assert patient_service.next_display_code() == '001'
    assert patient_service.next_display_code() == '001'


def test_display_code_assigned_under_lock(db, monkeypatch):
    held = []
    original = patient_service.next_display_code

    def spy():
        held.append(patient_service.DISPLAY_CODE_LOCK.locked())
        return original()

    monkeypatch.setattr(patient_service, 'next_display_code', spy)
    registration = patient_service.register_patient(patient_payload())
    assert registration.patient.patient_id == '001'
    assert held == [True]
    assert not patient_service.DISPLAY_CODE_LOCK.locked()


def test_next_code_skips_taken_codes(db):
    make_patient('001')
    make_patient('003')
    # count + 1 == 3 is taken after 002 was deleted
    assert patient_service.next_display_code() == '004'


def test_registration_result_is_typed(db):
    plain = patient_service.register_patient(patient_payload())
    assert plain.visit.state == VisitOutcome.SKIPPED
    assert plain.complete
    assert plain.visit.as_response() == {}

    with_visit = patient_service.register_patient({'patient': patient_payload(), 'visit': {'bp': '110/70'}})
    assert with_visit.visit.state == VisitOutcome.CREATED
    assert with_visit.patient.total_visits == 1


def test_visit_failure_outcome(db, monkeypatch):
    def rejected(patient_id, data):
        raise DatabaseError('disk full')

    monkeypatch.setattr(patient_service.visit_service, 'create_visit', rejected)
    registration = patient_service.register_patient({'patient': patient_payload(), 'visit': {}})
    assert registration.visit.state == VisitOutcome.FAILED
    assert not registration.complete
    assert registration.visit.error == 'Failed to create visit: disk full'
    assert Patient.objects.filter(pk=registration.patient.pk).exists()


def test_write_order_follows_capability_probe(monkeypatch, settings):
    settings.PHOTO_WRITE_MODE = 'auto'
    monkeypatch.setattr(schema, 'photo_column_writable', lambda: False)
    assert patient_service.write_order() == ('without_photo', 'with_photo')
    monkeypatch.setattr(schema, 'photo_column_writable', lambda: True)
    assert patient_service.write_order() == ('with_photo', 'without_photo')


def test_write_order_explicit_mode(settings):
    settings.PHOTO_WRITE_MODE = 'without_photo'
    assert patient_service.write_order() == ('without_photo', 'with_photo')
    assert patient_service.write_order('with_photo') == ('with_photo', 'without_photo')


def test_photo_column_writable_on_sqlite(db):
    schema.clear_cache()
    assert schema.photo_column_writable() is True
    assert schema.photo_column_type() is None
    assert schema.repair_photo_column() is False


def test_insert_without_photo(db, settings):
    settings.PHOTO_WRITE_MODE = 'without_photo'
    registration = patient_service.register_patient(patient_payload(photo='aGVsbG8='))
    patient = Patient.objects.get(pk=registration.patient.pk)
    assert patient.photo is None
    assert patient.total_visits == 0
    assert patient.father_name == 'Mohan'


def test_fallback_to_other_variant(db, settings, monkeypatch):
    settings.PHOTO_WRITE_MODE = 'without_photo'
    calls = []

    def broken(fields):
        calls.append(fields['patient_id'])
        raise DatabaseError('column "photo" is of type oid but expression is of type bytea')

    monkeypatch.setattr(patient_service, '_insert_without_photo', broken)
    response = APIClient().post('/api/patients', patient_payload(), format='json')
    assert response.status_code == 201
    assert calls == ['001']
    assert Patient.objects.filter(pk='001').exists()


def test_both_variants_failing_is_a_server_error(db, monkeypatch):
    def broken(fields):
        raise DatabaseError('connection reset')

    monkeypatch.setattr(patient_service, '_insert_with_photo', broken)
    monkeypatch.setattr(patient_service, '_insert_without_photo', broken)
    response = APIClient().post('/api/patients', patient_payload(), format='json')
    assert response.status_code == 500
    assert response.data['error'] == 'Server error: connection reset'
    assert not Patient.objects.exists()


@pytest.mark.parametrize('payload', [{'patient': 'x'}, {'patient': ['a']}])
def test_patient_section_must_be_an_object(db, payload):
    response = APIClient().post('/api/patients', payload, format='json')
    assert response.status_code == 400


def test_duplicate_aadhar_caught_by_store_is_a_conflict(db, monkeypatch):
    client = APIClient()
    payload = patient_payload()
    assert client.post('/api/patients', payload, format='json').status_code == 201

    real_check = PatientQuerySet.aadhar_exists
    calls = []

    def stale_first_check(self, aadhar):
        # the pre-insert check ran before the competing row was visible
        calls.append(aadhar)
        return False if len(calls) == 1 else real_check(self, aadhar)

    monkeypatch.setattr(PatientQuerySet, 'aadhar_exists', stale_first_check)
    response = client.post(
        '/api/patients', patient_payload(aadharNumber=payload['aadharNumber']), format='json'
    )
    assert response.status_code == 409
    assert response.data['error'] == 'Patient with this Aadhar number already exists'
    assert len(calls) == 2
    assert Patient.objects.count() == 1


def test_schema_probe_runs_outside_registration_transaction(transactional_db, monkeypatch, settings):
    settings.PHOTO_WRITE_MODE = 'auto'
    in_transaction = []

    def probe():
        in_transaction.append(connection.in_atomic_block)
        return True

    monkeypatch.setattr(schema, 'photo_column_writable', probe)
    patient_service.register_patient(patient_payload())
    assert in_transaction == [False]


@pytest.fixture
def fresh_schema_cache():
    schema.clear_cache()
    yield
    schema.clear_cache()


def test_failed_schema_probe_is_not_cached(monkeypatch, fresh_schema_cache):
    monkeypatch.setattr(schema, 'connection', SimpleNamespace(vendor='postgresql'))
    answers = [DatabaseError('canceling statement due to lock timeout'), 'bytea']

    def column_type():
        answer = answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    monkeypatch.setattr(schema, 'photo_column_type', column_type)
    assert schema.photo_column_writable() is False
    assert schema.photo_column_writable() is True
    # answered from the cache; no third inspection
    assert schema.photo_column_writable() is True
    assert answers == []


def test_oid_photo_column_is_not_writable(monkeypatch, fresh_schema_cache):
    monkeypatch.setattr(schema, 'connection', SimpleNamespace(vendor='postgresql'))
    monkeypatch.setattr(schema, 'photo_column_type', lambda: 'oid')
    assert schema.photo_column_writable() is False
