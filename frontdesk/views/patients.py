"""
Patient endpoints under ``/api/patients``.

Registration (``POST /api/patients``) accepts a loosely structured body
and may attach a first visit; see :mod:`frontdesk.services.patients`.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from ..exceptions import BadRequest
from ..models import Patient
from ..serializers.patient import serialize_patient
from ..services import patients as patient_service

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
def patients(request):
    if request.method == 'GET':
        logger.debug('Getting all patients')
        return Response([serialize_patient(p) for p in Patient.objects.all()])

    payload = request.data
    if not isinstance(payload, Mapping):
        raise BadRequest('Request body must be a JSON object')
    registration = patient_service.register_patient(payload)
    body = {
        'patientId': registration.patient.patient_id,
        'message': 'Patient registered successfully',
    }
    body.update(registration.visit.as_response())
    return Response(body, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def patient_detail(request, patient_id: str):
    if request.method == 'GET':
        logger.debug('Getting patient with ID: %s', patient_id)
        return Response(serialize_patient(patient_service.get_patient(patient_id)))
    if request.method == 'PUT':
        if not isinstance(request.data, Mapping):
            raise BadRequest('Request body must be a JSON object')
        patient = patient_service.update_patient(patient_id, request.data)
        return Response(serialize_patient(patient))
    patient_service.delete_patient(patient_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def patient_by_aadhar(request, aadhar_number: str):
    logger.debug('Getting patient with Aadhar: %s', aadhar_number)
    patient = Patient.objects.by_aadhar(aadhar_number)
    if patient is None:
        return Response({'error': f'Patient not found with Aadhar: {aadhar_number}'}, status=status.HTTP_404_NOT_FOUND)
    return Response(serialize_patient(patient))


@api_view(['GET'])
def check_aadhar(request, aadhar_number: str):
    """Return the patient holding ``aadhar_number``, or ``false``."""
    patient = Patient.objects.by_aadhar(aadhar_number)
    if patient is None:
        logger.debug('Aadhar %s does not exist', aadhar_number)
        return Response(False)
    logger.debug('Aadhar %s exists for patient: %s', aadhar_number, patient.patient_id)
    return Response(serialize_patient(patient))
