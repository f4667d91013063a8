"""
Patient enrollment services.

An enrollment always sits in its doctor's hospital.  Who picks the
doctor depends on the caller: a DOCTOR enrolls patients for themselves
only, a HOSPITAL_ADMIN picks one of their hospital's doctors and a
SUPER_ADMIN picks any doctor.
"""
from typing import Optional

from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from clinical.models import Doctor, PatientEnrollment, User
from clinical.permissions import enforce
from clinical.policy import Action, Identity, Ownership, Resource, Role, check_context, check_ownership
from clinical.services.audit import log_action
from clinical.services.scoping import parse_id

UPDATABLE_FIELDS = ('name', 'age', 'gender', 'date_of_admission')


def get_doctor_or_404(doctor_id) -> Doctor:
    pk = parse_id(doctor_id)
    doctor = Doctor.objects.filter(pk=pk).first() if pk else None
    if not doctor:
        raise NotFound('Doctor not found')
    return doctor


def _target_doctor(identity: Identity, *, doctor_id=None, hospital_id=None) -> Doctor:
    if identity.role is Role.DOCTOR:
        # client supplied doctor/hospital ids are overridden
        return get_doctor_or_404(identity.doctor_id)

    if identity.role is Role.HOSPITAL_ADMIN and hospital_id and str(hospital_id) != identity.hospital_id:
        enforce(check_ownership(identity, Action.CREATE, Resource.PATIENT, Ownership(hospital_id=hospital_id)))
    if not doctor_id:
        raise ValidationError({'doctorId': ['Doctor ID is required']})
    doctor = get_doctor_or_404(doctor_id)
    if identity.role is Role.SUPER_ADMIN and hospital_id and str(hospital_id) != str(doctor.hospital_id):
        raise ValidationError({'hospitalId': ['Doctor does not work at this hospital']})
    return doctor


def create_patient(identity: Identity, *, actor: Optional[User], name: str, age: int, gender: str,
                   doctor_id=None, hospital_id=None, date_of_admission=None) -> PatientEnrollment:
    enforce(check_context(identity))
    doctor = _target_doctor(identity, doctor_id=doctor_id, hospital_id=hospital_id)
    owner = Ownership(hospital_id=doctor.hospital_id, doctor_id=doctor.pk)
    enforce(check_ownership(identity, Action.CREATE, Resource.PATIENT, owner))

    patient = PatientEnrollment.objects.create(
        name=name,
        age=age,
        gender=gender,
        doctor=doctor,
        hospital_id=doctor.hospital_id,
        date_of_admission=date_of_admission or timezone.now(),
    )
    log_action(user=actor, action='patient_create', object_type='patient', object_id=patient.pk,
               detail={'doctorId': str(doctor.pk), 'hospitalId': str(doctor.hospital_id)})
    return patient


def update_patient(patient: PatientEnrollment, **fields) -> PatientEnrollment:
    changed = [f for f in UPDATABLE_FIELDS if fields.get(f) is not None]
    for f in changed:
        setattr(patient, f, fields[f])
    if changed:
        patient.save(update_fields=changed + ['updated_at'])
    return patient


def delete_patient(patient: PatientEnrollment, *, actor: Optional[User]) -> None:
    """Delete an enrollment; its prescriptions go with it."""
    patient_id = patient.pk
    patient.delete()
    log_action(user=actor, action='patient_delete', object_type='patient', object_id=patient_id)
