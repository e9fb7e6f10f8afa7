"""
Authentication views.

Login hands out both a legacy DRF token and a JWT pair so that older
dashboard builds keep working, but only for approved accounts: people
who register themselves wait for an administrator.  Profile and password
endpoints act on the signed-in user only.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from records.exceptions import AccountNotApproved
from records.models import User
from records.serializers.auth import ChangePasswordSerializer, LoginSerializer
from records.serializers.user import ProfileSerializer, RegisterSerializer
from records.services.audit import client_ip, log_action
from records.services.users import register_user, serialize_user
from records.throttles import LoginRateThrottle

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']

    user = authenticate(request, username=username, password=password)
    if user is None:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username}, request=request)
        logger.warning("Failed login for %s from %s", username, client_ip(request))
        raise AuthenticationFailed('invalid username or password')
    if user.status != User.STATUS_APPROVED:
        log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'fail', 'status': user.status}, request=request)
        logger.warning("Login refused for %s: account %s", username, user.status)
        if user.status == User.STATUS_REJECTED:
            raise AccountNotApproved('account registration was rejected')
        raise AccountNotApproved()

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok'}, request=request)

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': serialize_user(user),
    })


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def register_view(request):
    """Self-registration. The account waits for an administrator to approve it."""
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = register_user(dict(s.validated_data), request=request)
    return Response({
        'ok': True,
        'message': 'registration received; an administrator must approve the account before you can sign in',
        'data': serialize_user(user),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if resp.status_code != 200:
        raise AuthenticationFailed('refresh token is invalid or expired')
    data = dict(resp.data)
    data['jwt_access'] = data.pop('access')
    if 'refresh' in data:
        data['jwt_refresh'] = data.pop('refresh')
    return Response({'ok': True, **data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or every outstanding one of the user."""
    refresh = request.data.get('refresh')
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
    log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
               detail={'blacklisted': count}, request=request)
    return Response({'ok': True, 'blacklisted': count})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'ok': True, 'data': serialize_user(request.user)})


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    user = request.user
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_user(user)})
    s = ProfileSerializer(user, data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(user, field, value)
    user.save()
    log_action(user=user, action='profile_update', object_type='user', object_id=user.id,
               detail={'fields': sorted(s.validated_data)}, request=request)
    return Response({'ok': True, 'data': serialize_user(user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    user = request.user
    s = ChangePasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    if not user.check_password(s.validated_data['currentPassword']):
        raise ValidationError({'currentPassword': ['current password is incorrect']})
    new_password = s.validated_data['newPassword']
    try:
        validate_password(new_password, user=user)
    except DjangoValidationError as e:
        raise ValidationError({'newPassword': e.messages})
    user.set_password(new_password)
    user.save(update_fields=['password'])
    log_action(user=user, action='password_change', object_type='user', object_id=user.id, request=request)
    logger.info("Password changed for %s", user.username)
    return Response({'ok': True})
