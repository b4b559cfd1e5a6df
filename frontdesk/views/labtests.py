from __future__ import annotations

from collections.abc import Mapping

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from ..exceptions import BadRequest
from ..models import LabTest
from ..serializers.labtest import LabResultSerializer, serialize_labtest
from ..services import labtests as labtest_service


def _body(request) -> Mapping:
    if not isinstance(request.data, Mapping):
        raise BadRequest('Request body must be a JSON object')
    return request.data


def _listing(qs) -> Response:
    return Response([serialize_labtest(t) for t in qs])


@api_view(['GET'])
def labtests(request):
    return _listing(LabTest.objects.all())


@api_view(['GET', 'PUT', 'DELETE'])
def labtest_detail(request, test_id: int):
    if request.method == 'GET':
        return Response(serialize_labtest(labtest_service.get_labtest(test_id)))
    if request.method == 'PUT':
        return Response(serialize_labtest(labtest_service.update_labtest(test_id, _body(request))))
    labtest_service.delete_labtest(test_id)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
def labtest_result(request, test_id: int):
    """Record a result.  Without an explicit status the test becomes Completed."""
    data = LabResultSerializer(data=_body(request))
    data.is_valid(raise_exception=True)
    test = labtest_service.record_result(
        test_id,
        data.validated_data.get('result'),
        data.validated_data.get('status'),
    )
    return Response(serialize_labtest(test))


@api_view(['GET', 'POST'])
def patient_labtests(request, patient_id: str):
    if request.method == 'GET':
        return _listing(LabTest.objects.for_patient(patient_id))
    test = labtest_service.create_labtest(patient_id, None, _body(request))
    return Response(serialize_labtest(test), status=status.HTTP_201_CREATED)


@api_view(['POST'])
def visit_labtest_create(request, patient_id: str, visit_id: int):
    test = labtest_service.create_labtest(patient_id, visit_id, _body(request))
    return Response(serialize_labtest(test), status=status.HTTP_201_CREATED)


@api_view(['GET'])
def visit_labtests(request, visit_id: int):
    return _listing(LabTest.objects.for_visit(visit_id))


@api_view(['GET'])
def labtests_by_status(request, status_name: str):
    return _listing(LabTest.objects.with_status(status_name))
