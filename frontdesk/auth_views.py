"""
Nurse login endpoints under ``/api/auth``.

Login is a direct credential check against the stored nurse record.  The
response is always HTTP 200; ``success`` and ``error`` tell the front-end
whether the nurse ID or the password was wrong.  No token or session is
issued.
"""
from __future__ import annotations

from collections.abc import Mapping

from rest_framework.decorators import api_view, throttle_classes
from rest_framework.response import Response
from rest_framework.throttling import SimpleRateThrottle

from .exceptions import BadRequest
from .serializers.auth import LoginSerializer
from .serializers.fields import first_present
from .services.nurses import authenticate


class LoginRateThrottle(SimpleRateThrottle):
    """Limit login attempts per client address."""
    scope = 'login'

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


@api_view(['GET'])
def auth_health(request):
    return Response('Auth service is up and running!')


@api_view(['POST'])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    if not isinstance(request.data, Mapping):
        raise BadRequest('Request body must be a JSON object')
    s = LoginSerializer(data={
        'nurse_id': first_present(request.data, ('nurse_id', 'nurseId')),
        'password': request.data.get('password'),
    })
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    result = authenticate(vd['nurse_id'], vd['password'])
    nurse = None
    if result.nurse is not None:
        nurse = {
            'nurse_id': result.nurse.nurse_id,
            'name': result.nurse.name,
            'email': result.nurse.email,
        }
    return Response({
        'success': result.success,
        'message': result.message,
        'error': result.error,
        'nurse': nurse,
    })
