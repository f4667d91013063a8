"""
Identity resolution for incoming requests.

The identity context is built from the verified token claims.  Requests
authenticated some other way (the test client's ``force_authenticate``,
the browsable API's session) fall back to the user record.  DOCTOR
identities are completed with the id of their Doctor profile, looked up
by user id, since doctor ownership is by profile rather than by user.
"""
from __future__ import annotations

from rest_framework.exceptions import NotAuthenticated
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import Token

from .models import Doctor
from .policy import Identity, Role

_CACHE_ATTR = '_clinical_identity'


def identity_from_token(token: Token) -> Identity:
    hospital_id = token.get('hospitalId')
    return Identity(
        user_id=str(token[jwt_settings.USER_ID_CLAIM]),
        role=Role(token['role']),
        hospital_id=str(hospital_id) if hospital_id else None,
    )


def identity_from_user(user) -> Identity:
    return Identity(
        user_id=str(user.pk),
        role=Role(user.role),
        hospital_id=str(user.hospital_id) if user.hospital_id else None,
    )


def resolve_doctor_id(user_id: str):
    return Doctor.objects.filter(user_id=user_id).values_list('id', flat=True).first()


def get_identity(request) -> Identity:
    """Return (and memoise on the request) the caller's identity."""
    cached = getattr(request, _CACHE_ATTR, None)
    if cached is not None:
        return cached

    user = getattr(request, 'user', None)
    if not (user and getattr(user, 'is_authenticated', False)):
        raise NotAuthenticated('Authentication required')

    token = getattr(request, 'auth', None)
    if isinstance(token, Token):
        identity = identity_from_token(token)
    else:
        identity = identity_from_user(user)

    if identity.role is Role.DOCTOR:
        identity = identity.with_doctor(resolve_doctor_id(identity.user_id))

    setattr(request, _CACHE_ATTR, identity)
    return identity
