"""
Custom authentication backends for token-based auth.

Both the legacy ``Token`` header and SimpleJWT bearer tokens are accepted.
Stock DRF refuses every inactive account; here a deactivated *admin*
still authenticates while every other inactive account is refused.
Bearer tokens issued before the account's last logout are refused too.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions
from rest_framework_simplejwt import authentication as jwt_authentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.settings import api_settings as jwt_settings

from clinic.services.identity import may_sign_in, session_is_current


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>`` authentication."""

    keyword = 'Token'

    def authenticate_credentials(self, key):
        model = self.get_model()
        try:
            token = model.objects.select_related('user').get(key=key)
        except model.DoesNotExist:
            raise exceptions.AuthenticationFailed('Invalid token.')

        if not may_sign_in(token.user):
            raise exceptions.AuthenticationFailed('User inactive or deleted.')

        return (token.user, token)


class JWTAuthentication(jwt_authentication.JWTAuthentication):
    """``Authorization: Bearer <jwt>`` authentication with the same inactive-admin rule."""

    def get_user(self, validated_token):
        try:
            user_id = validated_token[jwt_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        try:
            user = self.user_model.objects.get(**{jwt_settings.USER_ID_FIELD: user_id})
        except self.user_model.DoesNotExist:
            raise exceptions.AuthenticationFailed('User not found', code='user_not_found')

        if not may_sign_in(user):
            raise exceptions.AuthenticationFailed('User is inactive', code='user_inactive')

        if not session_is_current(user, validated_token):
            raise exceptions.AuthenticationFailed('Session has ended, sign in again', code='session_ended')

        return user
