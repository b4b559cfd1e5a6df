from __future__ import annotations

from collections.abc import Mapping

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from ..exceptions import BadRequest
from ..models import Visit
from ..serializers.visit import serialize_visit
from ..services import visits as visit_service


def _body(request) -> Mapping:
    if not isinstance(request.data, Mapping):
        raise BadRequest('Request body must be a JSON object')
    return request.data


@api_view(['GET'])
def visits(request):
    return Response([serialize_visit(v) for v in Visit.objects.all()])


@api_view(['GET', 'PUT', 'DELETE'])
def visit_detail(request, visit_id: int):
    if request.method == 'GET':
        return Response(serialize_visit(visit_service.get_visit(visit_id)))
    if request.method == 'PUT':
        return Response(serialize_visit(visit_service.update_visit(visit_id, _body(request))))
    visit_service.delete_visit(visit_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
def patient_visits(request, patient_id: str):
    if request.method == 'GET':
        return Response([serialize_visit(v) for v in Visit.objects.for_patient(patient_id)])
    visit = visit_service.create_visit(patient_id, _body(request))
    return Response(serialize_visit(visit), status=status.HTTP_201_CREATED)


@api_view(['GET'])
def patient_recent_visits(request, patient_id: str):
    """Visits of a patient, newest first."""
    return Response([serialize_visit(v) for v in Visit.objects.recent_for_patient(patient_id)])
