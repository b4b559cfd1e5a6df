"""
Nurse management endpoints under ``/api/nurses``.

Responses use the public nurse summary; the stored credential is never
returned.
"""
from __future__ import annotations

from collections.abc import Mapping

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from ..exceptions import BadRequest
from ..models import Nurse
from ..serializers.nurse import serialize_nurse
from ..services import nurses as nurse_service


def _body(request) -> Mapping:
    if not isinstance(request.data, Mapping):
        raise BadRequest('Request body must be a JSON object')
    return request.data


@api_view(['GET', 'POST'])
def nurses(request):
    if request.method == 'GET':
        return Response([serialize_nurse(n) for n in Nurse.objects.all()])
    nurse = nurse_service.create_nurse(_body(request))
    return Response(serialize_nurse(nurse), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
def nurse_detail(request, nurse_id: str):
    if request.method == 'GET':
        return Response(serialize_nurse(nurse_service.get_nurse(nurse_id)))
    if request.method == 'PUT':
        return Response(serialize_nurse(nurse_service.update_nurse(nurse_id, _body(request))))
    nurse_service.delete_nurse(nurse_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def nurse_by_nurse_id(request, nurse_id: str):
    return Response(serialize_nurse(nurse_service.get_nurse(nurse_id)))


@api_view(['PUT'])
def nurse_status(request, nurse_id: str):
    new_status = request.query_params.get('status')
    if new_status is None and isinstance(request.data, Mapping):
        new_status = request.data.get('status')
    if not new_status:
        raise BadRequest('status is required')
    if nurse_service.update_status(nurse_id, new_status):
        return Response('Status updated successfully')
    return Response('Nurse not found', status=status.HTTP_404_NOT_FOUND)


@api_view(['GET'])
def active_nurses(request):
    return Response([serialize_nurse(n) for n in nurse_service.active_nurses()])
