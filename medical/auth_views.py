"""
Login endpoint.

Exchanges a roll number, password and role for a signed bearer token.
The role must match the stored role; a student account cannot log in
as staff by sending ``role=medical-staff``. Kept apart from
``medical.authentication`` so that DRF can import the authentication
class without pulling in views.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import authenticate
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from medical.authentication import issue_token
from medical.serializers.auth import LoginSerializer
from medical.services.audit import log_action

logger = logging.getLogger(__name__)


class LoginRateThrottle(AnonRateThrottle):
    """Per-IP limit on login attempts (``DEFAULT_THROTTLE_RATES["login"]``)."""
    scope = 'login'


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ip = request.META.get('REMOTE_ADDR')

    user = authenticate(request, username=vd['roll_no'], password=vd['password'])
    if not user or user.role != vd['role']:
        logger.info('Failed login for %s as %s from %s', vd['roll_no'], vd['role'], ip)
        try:
            log_action(user=None, action='login', object_type='user', object_id=vd['roll_no'],
                       detail={'result': 'fail', 'role': vd['role'], 'ip': ip})
        except Exception:
            logger.exception('Audit write failed for login of %s', vd['roll_no'])
        return Response({'success': False, 'error': 'Invalid credentials.'}, status=401)

    try:
        log_action(user=user, action='login', object_type='user', object_id=user.roll_no,
                   detail={'result': 'ok', 'ip': ip})
    except Exception:
        logger.exception('Audit write failed for login of %s', user.roll_no)

    token = issue_token(user)
    return Response({
        'success': True,
        'data': {
            'token': str(token),
            'role': user.role,
            'name': user.name,
            'roll_no': user.roll_no,
            'expires_in': int(settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].total_seconds()),
        },
    }, status=200)