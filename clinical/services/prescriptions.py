from typing import Optional

from rest_framework.exceptions import NotFound, ValidationError

from clinical.models import PatientEnrollment, Prescription, User
from clinical.permissions import enforce
from clinical.policy import Action, Identity, Resource, Role, check_context, check_ownership
from clinical.services.audit import log_action
from clinical.services.patients import get_doctor_or_404
from clinical.services.scoping import parse_id

UPDATABLE_FIELDS = ('medication', 'dosage', 'instructions')


def create_prescription(identity: Identity, *, actor: Optional[User], patient_enrollment_id, medication: str,
                        dosage: str, instructions: str, doctor_id=None) -> Prescription:
    """Prescribe for an existing enrollment.

    The prescription inherits the patient's hospital.  DOCTOR callers
    prescribe as themselves and only for their own patients; admins name
    the prescribing doctor, who must work at the patient's hospital.
    """
    enforce(check_context(identity))
    pk = parse_id(patient_enrollment_id)
    patient = PatientEnrollment.objects.filter(pk=pk).first() if pk else None
    if not patient:
        raise NotFound('Patient not found')
    enforce(check_ownership(identity, Action.CREATE, Resource.PRESCRIPTION, patient.ownership))

    if identity.role is Role.DOCTOR:
        doctor = get_doctor_or_404(identity.doctor_id)
    else:
        if not doctor_id:
            raise ValidationError({'doctorId': ['Doctor ID is required']})
        doctor = get_doctor_or_404(doctor_id)
        if doctor.hospital_id != patient.hospital_id:
            raise ValidationError({'doctorId': ["Doctor does not work at the patient's hospital"]})

    prescription = Prescription.objects.create(
        patient_enrollment=patient,
        medication=medication,
        dosage=dosage,
        instructions=instructions,
        doctor=doctor,
        hospital_id=patient.hospital_id,
    )
    log_action(user=actor, action='prescription_create', object_type='prescription', object_id=prescription.pk,
               detail={'patientId': str(patient.pk), 'doctorId': str(doctor.pk)})
    return prescription


def update_prescription(prescription: Prescription, **fields) -> Prescription:
    changed = [f for f in UPDATABLE_FIELDS if fields.get(f) is not None]
    for f in changed:
        setattr(prescription, f, fields[f])
    if changed:
        prescription.save(update_fields=changed + ['updated_at'])
    return prescription


def delete_prescription(prescription: Prescription, *, actor: Optional[User]) -> None:
    prescription_id = prescription.pk
    prescription.delete()
    log_action(user=actor, action='prescription_delete', object_type='prescription', object_id=prescription_id)
