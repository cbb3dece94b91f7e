"""
Bearer token authentication for the clinic API.

Tokens are JWTs issued by ``djangorestframework-simplejwt`` carrying the
user's roll number, role and name. Authentication resolves the roll
number to a :class:`medical.models.User` and rejects tokens whose role
claim no longer matches the stored role, so a demoted account cannot
keep using an old staff token.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import AccessToken


class RollNumberJWTAuthentication(JWTAuthentication):
    """``Authorization: Bearer <jwt>`` authentication keyed by roll number."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        role = validated_token.get('role')
        if role is not None and role != user.role:
            raise AuthenticationFailed('Forbidden: Invalid token.', code='role_mismatch')
        return user


def issue_token(user) -> AccessToken:
    """Return an access token for ``user`` with the identity claims the API reads."""
    token = AccessToken.for_user(user)
    token['role'] = user.role
    token['name'] = user.name
    return token
