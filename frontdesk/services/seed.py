"""
Development sample data.

The sample patient goes through the normal registration path, so it gets
the next display code like any other patient.  Seeding is idempotent:
an existing Aadhar number short-circuits it.
"""
import logging
from typing import Optional

from ..models import Patient
from . import patients as patient_service

logger = logging.getLogger(__name__)

SAMPLE_PATIENT = {
    'name': 'Rahul',
    'surname': 'Sharma',
    'fatherName': 'Rajesh',
    'gender': 'Male',
    'age': 28,
    'address': '45 Park Avenue, Mumbai',
    'bloodGroup': 'O+',
    'phoneNumber': '9876123450',
    'aadharNumber': '987601234500',
}


def seed_sample_patient() -> Optional[str]:
    """Create the sample patient.  Returns its code, or None if it already existed."""
    aadhar = SAMPLE_PATIENT['aadharNumber']
    if Patient.objects.aadhar_exists(aadhar):
        logger.info('Patient with Aadhar %s already exists, skipping creation', aadhar)
        return None
    registration = patient_service.register_patient(SAMPLE_PATIENT)
    logger.info('Sample patient added with ID %s', registration.patient.patient_id)
    log_patients()
    return registration.patient.patient_id


def log_patients() -> None:
    logger.info('Current patients in the database:')
    for row in Patient.objects.values('patient_id', 'name', 'surname', 'aadhar_number'):
        logger.info('ID: %(patient_id)s, Name: %(name)s %(surname)s, Aadhar: %(aadhar_number)s', row)
