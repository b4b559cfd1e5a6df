import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse
from django.utils import timezone
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..models import Patient

logger = logging.getLogger(__name__)


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1)})
    except DatabaseError as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)


@api_view(['GET'])
def service_health(request):
    logger.info('Health check endpoint called')
    return Response({'status': 'up', 'time': str(int(timezone.now().timestamp() * 1000))})


@api_view(['GET'])
def db_connection(request):
    try:
        patient_count = Patient.objects.count()
    except DatabaseError as e:
        logger.error('Database connection test failed: %s', e)
        return Response(
            {'status': 'error', 'message': f'Database connection error: {e}'},
            status=500,
        )
    logger.info('Database connection test successful. Patient count: %s', patient_count)
    return Response({
        'status': 'success',
        'message': 'Database connection successful',
        'patientCount': patient_count,
    })
