"""
API tests for patient registration and maintenance.

Registration is exercised end to end through ``POST /api/patients``,
including the optional first visit and its partial-failure reporting.
"""
import base64
from unittest import mock

from django.db import DatabaseError
from rest_framework import status
from rest_framework.test import APITestCase

from frontdesk.models import Patient, Visit
from frontdesk.services import visits as visit_service

from .helpers import make_patient, next_aadhar, patient_payload


class PatientRegistrationTests(APITestCase):
    def register(self, payload):
        return self.client.post('/api/patients', payload, format='json')

    def test_codes_are_sequential_and_zero_padded(self):
        codes = [self.register(patient_payload()).data['patientId'] for _ in range(7)]
        self.assertEqual(codes, ['001', '002', '003', '004', '005', '006', '007'])

    def test_registered_patient_is_retrievable_by_code_and_aadhar(self):
        payload = patient_payload()
        response = self.register(payload)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Patient registered successfully')
        code = response.data['patientId']

        by_code = self.client.get(f'/api/patients/{code}')
        self.assertEqual(by_code.status_code, status.HTTP_200_OK)
        self.assertEqual(by_code.data['aadharNumber'], payload['aadharNumber'])
        self.assertEqual(by_code.data['totalVisits'], 0)

        by_aadhar = self.client.get(f"/api/patients/aadhar/{payload['aadharNumber']}")
        self.assertEqual(by_aadhar.status_code, status.HTTP_200_OK)
        self.assertEqual(by_aadhar.data['patientId'], code)

    def test_duplicate_aadhar_is_a_conflict(self):
        payload = patient_payload()
        self.assertEqual(self.register(payload).status_code, status.HTTP_201_CREATED)
        response = self.register(patient_payload(aadharNumber=payload['aadharNumber'], name='Other'))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Patient with this Aadhar number already exists')
        self.assertEqual(Patient.objects.count(), 1)

    def test_missing_name_or_surname_is_rejected(self):
        for missing in ('name', 'surname'):
            payload = patient_payload()
            del payload[missing]
            response = self.register(payload)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['error'], 'Name and surname are required')
        self.assertEqual(Patient.objects.count(), 0)

    def test_missing_aadhar_is_rejected(self):
        payload = patient_payload()
        del payload['aadharNumber']
        response = self.register(payload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Aadhar number is required')

        response = self.register(patient_payload(aadharNumber=''))
        self.assertEqual(response.data['error'], 'Aadhar number is required')
        self.assertFalse(Patient.objects.exists())

    def test_alternate_field_spellings(self):
        aadhar = next_aadhar()
        response = self.register({
            'name': 'Kiran',
            'surname': 'Rao',
            'father_name': 'Suresh',
            'blood_group': 'A-',
            'phone': '9000000001',
            'phone_number': '9000000002',
            'aadhar_number': aadhar,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        patient = Patient.objects.get(aadhar_number=aadhar)
        self.assertEqual(patient.father_name, 'Suresh')
        self.assertEqual(patient.blood_group, 'A-')
        self.assertEqual(patient.phone_number, '9000000002')

    def test_canonical_spelling_wins(self):
        response = self.register(patient_payload(fatherName='Canonical', father_name='Alias'))
        patient = Patient.objects.get(pk=response.data['patientId'])
        self.assertEqual(patient.father_name, 'Canonical')

    def test_age_coercion(self):
        first = self.register(patient_payload(age='42'))
        second = self.register(patient_payload(age='forty'))
        third = self.register(patient_payload(age=None))
        self.assertEqual(Patient.objects.get(pk=first.data['patientId']).age, 42)
        self.assertEqual(Patient.objects.get(pk=second.data['patientId']).age, 0)
        self.assertEqual(Patient.objects.get(pk=third.data['patientId']).age, 0)

    def test_explicit_code_is_kept(self):
        response = self.register(patient_payload(patientId='A17'))
        self.assertEqual(response.data['patientId'], 'A17')
        conflict = self.register(patient_payload(patientId='A17'))
        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT)

    def test_photo_is_stored(self):
        raw = b'\x89PNG fake image'
        response = self.register(patient_payload(photo=base64.b64encode(raw).decode()))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        patient = Patient.objects.get(pk=response.data['patientId'])
        self.assertEqual(bytes(patient.photo), raw)

    def test_invalid_photo_is_rejected(self):
        response = self.register(patient_payload(photo='not base64!!'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Patient.objects.exists())

    def test_values_longer_than_their_columns_are_rejected(self):
        response = self.register(patient_payload(gender='F' * 21, bloodGroup='AB-positive!'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid request')
        self.assertIn('gender', response.data['details'])
        self.assertIn('blood_group', response.data['details'])
        self.assertFalse(Patient.objects.exists())

    def test_negative_age_is_rejected(self):
        response = self.register(patient_payload(age=-3))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('age', response.data['details'])


class PatientWithVisitTests(APITestCase):
    def test_nested_patient_and_visit(self):
        response = self.client.post('/api/patients', {
            'patient': patient_payload(),
            'visit': {'bp': '120/80', 'temperature': 98.6, 'symptoms': 'fever', 'current_condition': 'cough'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['patientId'], '001')
        self.assertIn('visitId', response.data)
        self.assertEqual(response.data['visitMessage'], 'Visit created successfully')

        visit = Visit.objects.get(pk=response.data['visitId'])
        self.assertEqual(visit.symptoms, 'fever')
        self.assertEqual(visit.temperature, '98.6')
        self.assertEqual(visit.status, 'Active')
        self.assertEqual(visit.patient_id, '001')

    def test_condition_aliases(self):
        response = self.client.post('/api/patients', {
            'patient': patient_payload(),
            'visit': {'current_condition': 'cough', 'currentCondition': 'cold'},
        }, format='json')
        visit = Visit.objects.get(pk=response.data['visitId'])
        self.assertEqual(visit.symptoms, 'cough')

    def test_visit_updates_patient_counter(self):
        response = self.client.post('/api/patients', {
            'patient': patient_payload(),
            'visit': {'complaint': 'headache'},
        }, format='json')
        patient = Patient.objects.get(pk=response.data['patientId'])
        self.assertEqual(patient.total_visits, 1)
        self.assertEqual(patient.reg_no, 'REG001')

    def test_visit_failure_keeps_patient(self):
        rejection = DatabaseError('simulated store rejection')
        with mock.patch.object(visit_service, 'create_visit', side_effect=rejection):
            response = self.client.post('/api/patients', {
                'patient': patient_payload(),
                'visit': {'complaint': 'headache'},
            }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['patientId'], '001')
        self.assertNotIn('visitId', response.data)
        self.assertEqual(response.data['visitError'], 'Failed to create visit: simulated store rejection')
        self.assertTrue(Patient.objects.filter(pk='001').exists())
        self.assertFalse(Visit.objects.exists())

    def test_malformed_visit_is_reported(self):
        response = self.client.post('/api/patients', {
            'patient': patient_payload(),
            'visit': 'yesterday',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['visitError'].startswith('Failed to process visit data'))


class PatientMaintenanceTests(APITestCase):
    def setUp(self) -> None:
        self.patient = make_patient('001', name='Ravi', surname='Kumar', father_name='Anil')

    def test_list(self):
        make_patient('002')
        response = self.client.get('/api/patients')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['patientId'] for p in response.data], ['001', '002'])

    def test_unknown_patient(self):
        self.assertEqual(self.client.get('/api/patients/999').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/patients/aadhar/000').status_code, status.HTTP_404_NOT_FOUND)

    def test_update_changes_only_supplied_fields(self):
        response = self.client.put('/api/patients/001', {
            'name': '  Ravindra ',
            'phone_number': '9111111111',
            'aadharNumber': '123412341234',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.patient.refresh_from_db()
        self.assertEqual(self.patient.name, 'Ravindra')
        self.assertEqual(self.patient.phone_number, '9111111111')
        self.assertEqual(self.patient.father_name, 'Anil')
        self.assertNotEqual(self.patient.aadhar_number, '123412341234')

    def test_update_rejects_blank_name(self):
        response = self.client.put('/api/patients/001', {'name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name cannot be empty')

    def test_update_rejects_overlong_values(self):
        response = self.client.put('/api/patients/001', {'phoneNumber': '9' * 25}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone_number', response.data['details'])
        self.patient.refresh_from_db()
        self.assertIsNone(self.patient.phone_number)

    def test_update_unknown_patient(self):
        response = self.client.put('/api/patients/404', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete(self):
        self.assertEqual(self.client.delete('/api/patients/001').status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete('/api/patients/001').status_code, status.HTTP_404_NOT_FOUND)

    def test_check_aadhar(self):
        response = self.client.get(f'/api/patients/check-aadhar/{self.patient.aadhar_number}')
        self.assertEqual(response.data['patientId'], '001')
        response = self.client.get('/api/patients/check-aadhar/000000000000')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIs(response.data, False)
