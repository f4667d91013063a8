"""
Account services: registration, login, passwords and hospital admins.

Passwords are only ever hashed through :func:`set_password`, called on
the registration and account-creation paths; saving a user never hashes
implicitly.
"""
from __future__ import annotations

from typing import Optional

from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework.exceptions import AuthenticationFailed, NotFound, ValidationError

from clinical.exceptions import Conflict
from clinical.models import Hospital, User
from clinical.policy import Role
from clinical.services.audit import log_action
from clinical.services.scoping import parse_id

INVALID_CREDENTIALS = 'Invalid credentials'


def set_password(user: User, raw_password: str) -> None:
    try:
        validate_password(raw_password, user)
    except DjangoValidationError as e:
        raise ValidationError({'password': e.messages})
    user.set_password(raw_password)


def ensure_email_available(email: str, *, exclude_pk=None) -> None:
    qs = User.objects.filter(email__iexact=email)
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict('User already exists with this email')


def get_hospital_or_404(hospital_id, *, lock: bool=False) -> Hospital:
    qs = Hospital.objects.select_for_update() if lock else Hospital.objects.all()
    hospital = qs.filter(pk=hospital_id).first()
    if not hospital:
        raise NotFound('Hospital not found')
    return hospital


def ensure_hospital_has_no_admin(hospital: Hospital, *, exclude_pk=None) -> None:
    qs = User.objects.filter(role=Role.HOSPITAL_ADMIN.value, hospital=hospital)
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict('This hospital already has an admin')


def _create_user(*, name: str, email: str, password: str, role: Role, hospital: Optional[Hospital]) -> User:
    user = User(name=name, email=email, role=role.value, hospital=hospital)
    set_password(user, password)
    user.save()
    return user


def register(*, name: str, email: str, password: str, role: str, hospital_id=None,
             specialization: Optional[str]=None) -> User:
    """Create an account of any role; DOCTOR accounts get their profile too.

    All input checks run before anything is written.
    """
    role = Role(role)
    if role.requires_hospital and not hospital_id:
        raise ValidationError({'hospitalId': ['Hospital ID is required for this role']})
    if role is Role.DOCTOR and not specialization:
        raise ValidationError({'specialization': ['Specialization is required for doctors']})
    ensure_email_available(email)

    if role is Role.DOCTOR:
        from clinical.services.doctors import create_doctor

        doctor = create_doctor(
            hospital=get_hospital_or_404(hospital_id),
            name=name, email=email, password=password, specialization=specialization,
        )
        return doctor.user

    with transaction.atomic():
        hospital = None
        if hospital_id:
            hospital = get_hospital_or_404(hospital_id, lock=role is Role.HOSPITAL_ADMIN)
        if role is Role.SUPER_ADMIN:
            hospital = None
        if role is Role.HOSPITAL_ADMIN:
            ensure_hospital_has_no_admin(hospital)
        user = _create_user(name=name, email=email, password=password, role=role, hospital=hospital)
        log_action(user=user, action='register', object_type='user', object_id=user.pk,
                   detail={'role': role.value})
    return user


def login(request, *, email: str, password: str) -> User:
    """Return the user for valid credentials.

    Unknown emails and wrong passwords fail identically; the auth backend
    still runs the hasher for unknown emails so both take the same effort.
    """
    user = authenticate(request, username=email, password=password)
    if not user:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'email': email, 'ip': request.META.get('REMOTE_ADDR')})
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    log_action(user=user, action='login', object_type='user', object_id=user.pk,
               detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return user


# ---------------------------------------------------------------------
# Hospital admins
# ---------------------------------------------------------------------
def hospital_admins():
    return User.objects.filter(role=Role.HOSPITAL_ADMIN.value).select_related('hospital')


def get_hospital_admin_or_404(pk) -> User:
    admin_id = parse_id(pk)
    admin = hospital_admins().filter(pk=admin_id).first() if admin_id else None
    if not admin:
        raise NotFound('Hospital admin not found')
    return admin


def create_hospital_admin(*, actor: Optional[User], name: str, email: str, password: str, hospital_id) -> User:
    """Create the single HOSPITAL_ADMIN of a hospital.

    The hospital row is locked for the duration of the check so two
    concurrent requests for the same hospital serialise; the partial
    unique index on users backs this up on stores without row locks.
    """
    with transaction.atomic():
        hospital = get_hospital_or_404(hospital_id, lock=True)
        ensure_email_available(email)
        ensure_hospital_has_no_admin(hospital)
        user = _create_user(name=name, email=email, password=password,
                            role=Role.HOSPITAL_ADMIN, hospital=hospital)
        log_action(user=actor, action='hospital_admin_create', object_type='user', object_id=user.pk,
                   detail={'hospitalId': str(hospital.pk)})
    return user


def update_hospital_admin(admin: User, *, actor: Optional[User], name: Optional[str]=None,
                          email: Optional[str]=None, hospital_id=None) -> User:
    with transaction.atomic():
        if email and email != admin.email:
            ensure_email_available(email, exclude_pk=admin.pk)
            admin.email = email
        if name:
            admin.name = name
        if hospital_id and str(hospital_id) != str(admin.hospital_id):
            hospital = get_hospital_or_404(hospital_id, lock=True)
            ensure_hospital_has_no_admin(hospital, exclude_pk=admin.pk)
            admin.hospital = hospital
        admin.save()
        log_action(user=actor, action='hospital_admin_update', object_type='user', object_id=admin.pk,
                   detail={'hospitalId': str(admin.hospital_id)})
    return admin


def delete_hospital_admin(admin: User, *, actor: Optional[User]) -> None:
    with transaction.atomic():
        admin_id = admin.pk
        admin.delete()
        log_action(user=actor, action='hospital_admin_delete', object_type='user', object_id=admin_id)
