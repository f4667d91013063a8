"""
Bearer token authentication.

Tokens are simplejwt access tokens whose claims carry the caller's
``userId``, ``role`` and (when bound) ``hospitalId``.  Keeping the class
in its own module avoids circular imports when Django REST framework
loads authentication classes from settings during initialisation.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.tokens import AccessToken

from .policy import Role


class ScopedJWTAuthentication(JWTAuthentication):
    """JWT authentication that also checks the role and hospital claims.

    A token must carry a valid role, and both claims must still match the
    account, so an admin moved to another hospital cannot keep using the
    old binding.
    """

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is None:
            return None
        user, token = result
        try:
            Role(token.get('role'))
        except ValueError:
            raise InvalidToken('Token carries no valid role')
        hospital_id = str(user.hospital_id) if user.hospital_id else None
        if token['role'] != user.role or token.get('hospitalId') != hospital_id:
            raise InvalidToken('Token no longer matches the account')
        return user, token


def issue_token(user) -> str:
    """Sign an access token for ``user`` with its role and hospital claims."""
    token = AccessToken.for_user(user)
    token['role'] = user.role
    if user.hospital_id:
        token['hospitalId'] = str(user.hospital_id)
    return str(token)
