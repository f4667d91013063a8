import logging
from typing import Optional

from django.db import transaction

from clinical.exceptions import Conflict
from clinical.models import Doctor, Hospital, PatientEnrollment, Prescription, User
from clinical.services.audit import log_action

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def ensure_license_available(license_number: str, *, exclude_pk=None) -> None:
    qs = Hospital.objects.filter(license_number=license_number)
    if exclude_pk:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise Conflict('Hospital with this license number already exists')


def create_hospital(*, actor: Optional[User], **fields) -> Hospital:
    ensure_license_available(fields['license_number'])
    with transaction.atomic():
        hospital = Hospital.objects.create(created_by=actor, **fields)
        log_action(user=actor, action='hospital_create', object_type='hospital', object_id=hospital.pk,
                   detail={'name': hospital.name})
    return hospital


def update_hospital(hospital: Hospital, *, actor: Optional[User], **fields) -> Hospital:
    if fields.get('license_number'):
        ensure_license_available(fields['license_number'], exclude_pk=hospital.pk)
    for name, value in fields.items():
        setattr(hospital, name, value)
    hospital.save()
    log_action(user=actor, action='hospital_update', object_type='hospital', object_id=hospital.pk,
               detail={'fields': sorted(fields)})
    return hospital


def delete_hospital(hospital: Hospital, *, actor: Optional[User]) -> None:
    """Delete a hospital with nothing attached to it.

    Accounts, doctors, patients and prescriptions all block the delete.
    """
    dependents = (
        User.objects.filter(hospital=hospital).exists()
        or Doctor.objects.filter(hospital=hospital).exists()
        or PatientEnrollment.objects.filter(hospital=hospital).exists()
        or Prescription.objects.filter(hospital=hospital).exists()
    )
    if dependents:
        raise Conflict('Hospital still has users, doctors, patients or prescriptions')
    with transaction.atomic():
        hospital_id = hospital.pk
        hospital.delete()
        log_action(user=actor, action='hospital_delete', object_type='hospital', object_id=hospital_id)


def hospital_statistics(hospital: Hospital) -> dict:
    # sequential reads; the response is built after the last one
    doctors = Doctor.objects.filter(hospital=hospital)
    patients = PatientEnrollment.objects.filter(hospital=hospital)
    counts = {
        'doctors': doctors.count(),
        'patients': patients.count(),
        'prescriptions': Prescription.objects.filter(hospital=hospital).count(),
    }
    recent_doctors = list(doctors.select_related('hospital').order_by('-created_at')[:RECENT_LIMIT])
    recent_patients = list(patients.select_related('doctor').order_by('-created_at')[:RECENT_LIMIT])
    logger.debug('Statistics for hospital %s: %s', hospital.pk, counts)
    return {
        'statistics': counts,
        'recentDoctors': recent_doctors,
        'recentPatients': recent_patients,
    }
