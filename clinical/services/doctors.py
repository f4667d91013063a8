"""
Doctor services.

A Doctor profile and its DOCTOR user account live and die together.
Both directions run as a two-step unit inside ``transaction.atomic()``:
when the second write fails the first is rolled back with it, so neither
an account without a profile nor a profile without an account survives.
"""
import logging
from typing import Optional

from django.db import transaction

from clinical.exceptions import Conflict
from clinical.models import Doctor, Hospital, User
from clinical.policy import Role
from clinical.services.accounts import ensure_email_available, set_password
from clinical.services.audit import log_action

logger = logging.getLogger(__name__)


def create_doctor(*, hospital: Hospital, name: str, email: str, password: str, specialization: str,
                  actor: Optional[User]=None) -> Doctor:
    ensure_email_available(email)
    if Doctor.objects.filter(email__iexact=email).exists():
        raise Conflict('Doctor already exists with this email')

    with transaction.atomic():
        user = User(name=name, email=email, role=Role.DOCTOR.value, hospital=hospital)
        set_password(user, password)
        user.save()
        try:
            doctor = Doctor.objects.create(
                name=name,
                email=email,
                specialization=specialization,
                hospital=hospital,
                user=user,
            )
        except Exception:
            logger.warning('Doctor profile for %s failed; rolling back its account', email)
            raise
        log_action(user=actor or user, action='doctor_create', object_type='doctor', object_id=doctor.pk,
                   detail={'hospitalId': str(hospital.pk), 'userId': str(user.pk)})
    return doctor


def update_doctor(doctor: Doctor, *, name: Optional[str]=None, specialization: Optional[str]=None) -> Doctor:
    """Update the profile; the backing account's display name follows it."""
    with transaction.atomic():
        if name:
            doctor.name = name
        if specialization:
            doctor.specialization = specialization
        doctor.save()
        if name:
            User.objects.filter(pk=doctor.user_id).update(name=name)
    return doctor


def delete_doctor(doctor: Doctor, *, actor: Optional[User]) -> None:
    if doctor.patients.exists() or doctor.prescriptions.exists():
        raise Conflict('Doctor still has enrolled patients or prescriptions')
    with transaction.atomic():
        doctor_id, user_id = doctor.pk, doctor.user_id
        doctor.delete()
        User.objects.filter(pk=user_id).delete()
        log_action(user=actor, action='doctor_delete', object_type='doctor', object_id=doctor_id,
                   detail={'userId': str(user_id)})
