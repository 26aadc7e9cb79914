"""
Authentication views.

Login takes email and password only; the role always comes from the
stored account (no role bypass). A successful login returns a legacy
auth token plus a JWT pair and the patient link state, so the client
knows straight away whether a ``patient`` account has a record.
"""
from __future__ import annotations

from django.utils import timezone
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.access import PATIENT
from clinic.exceptions import AccountInactive, AccountNotFound, InvalidCredentials
from clinic.serializers.auth import LoginSerializer, SignupSerializer
from clinic.services.audit import log_action
from clinic.services.identity import SessionIdentity, end_sessions, issue_jwt, resolve_account, signup
from clinic.services.linking import forget_links, linked_patient_id
from clinic.views.common import body_object


def _client_ip(request):
    return request.META.get('REMOTE_ADDR')


def session_payload(user) -> dict:
    identity = SessionIdentity.from_user(user)
    payload = {
        'user': {
            'id': identity.id,
            'email': identity.email,
            'name': user.display_name,
            'role': identity.role,
            'is_active': user.is_active,
        },
        'role': identity.role,
    }
    if identity.role == PATIENT:
        patient_id = linked_patient_id(user)
        payload['patientId'] = patient_id
        payload['link'] = 'linked' if patient_id is not None else 'profile_not_found'
    return payload


# ---------------------------------------------------------------------
# Email/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    password = s.validated_data['password']

    try:
        user = resolve_account(email, password)
    except (AccountNotFound, InvalidCredentials, AccountInactive) as exc:
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'reason': exc.default_code, 'email': email, 'ip': _client_ip(request)})
        raise

    # a record may have been created or renamed since the last session
    forget_links([user.email])
    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': _client_ip(request)})

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = issue_jwt(user)

    payload = {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        **session_payload(user),
    }
    return Response(payload, status=200)

# DRF ScopedRateThrottle reads throttle_scope from the view class
login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([AllowAny])
def signup_view(request):
    """Self-service signup for patient and doctor accounts."""
    s = SignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = signup(**s.validated_data)
    log_action(user=user, action='signup', object_type='user', object_id=user.id,
               detail={'role': user.role, 'ip': _client_ip(request)})
    body = {'ok': True, 'pending_approval': not user.is_active, **session_payload(user)}
    return Response(body, status=201)

signup_view.cls.throttle_scope = 'signup'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def session_view(request):
    return Response({'ok': True, **session_payload(request.user)})


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    s = TokenRefreshSerializer(data=request.data)
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise InvalidToken(e.args[0])
    data = dict(s.validated_data)
    data['jwt_access'] = data.pop('access')
    if 'refresh' in data:
        data['jwt_refresh'] = data.pop('refresh')
    return Response({'ok': True, **data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Drop the auth token, blacklist refresh tokens (all, or the given one) and retire issued access tokens."""
    refresh = body_object(request).get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            raise ValidationError({'refresh': [str(e)]})
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    end_sessions(request.user)
    forget_links([request.user.email])
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
