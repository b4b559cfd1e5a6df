"""
Registrations running on real threads, each with its own database
connection.  Uses ``transactional_db`` so every registration commits and
is visible to the others.
"""
import threading
from concurrent.futures import ThreadPoolExecutor

from django.db import connection

from frontdesk.exceptions import Conflict
from frontdesk.models import Patient
from frontdesk.services import patients as patient_service

from .helpers import patient_payload


def register_concurrently(payloads):
    """Start one registration per payload at the same moment; return codes or conflicts."""
    start = threading.Barrier(len(payloads))

    def register(payload):
        start.wait()
        try:
            return patient_service.register_patient(payload).patient.patient_id
        except Conflict as e:
            return e
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(payloads)) as pool:
        return list(pool.map(register, payloads))


def test_concurrent_registrations_get_distinct_codes(transactional_db):
    codes = register_concurrently([patient_payload() for _ in range(4)])
    assert sorted(codes) == ['001', '002', '003', '004']
    assert Patient.objects.count() == 4


def test_concurrent_duplicate_aadhar_yields_one_conflict(transactional_db):
    payload = patient_payload()
    results = register_concurrently([dict(payload), dict(payload)])
    conflicts = [r for r in results if isinstance(r, Conflict)]
    assert len(conflicts) == 1
    assert conflicts[0].detail == 'Patient with this Aadhar number already exists'
    assert [r for r in results if not isinstance(r, Conflict)] == ['001']
    assert Patient.objects.count() == 1
