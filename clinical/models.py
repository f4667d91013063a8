"""
Database models for the hospital management API.

Five entity types make up the tenant data: users (with a role and an
optional hospital binding), hospitals, doctors, patient enrollments and
prescriptions.  Every record that belongs to a tenant carries a
``hospital`` reference so scoping can be expressed as a plain filter;
clinical records additionally carry the owning ``doctor``.

Each scoped model exposes an :attr:`ownership` property which the
authorization policy compares against the caller's identity.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.db import models

from .policy import Ownership, Role


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UserManager(BaseUserManager):
    """Manager for email-keyed users.

    Only used by Django's own tooling (``createsuperuser``, the admin);
    API code goes through :mod:`clinical.services.accounts` which sets
    passwords explicitly.
    """

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Users must have an email address")
        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.SUPER_ADMIN.value)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Account with a role and an optional hospital binding.

    HOSPITAL_ADMIN and DOCTOR accounts must reference a hospital; a
    hospital may have at most one HOSPITAL_ADMIN, which is enforced by a
    partial unique index so concurrent creations cannot both succeed.
    """
    ROLE_CHOICES = [(r.value, r.label) for r in Role]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = None
    first_name = None
    last_name = None
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, db_index=True)
    hospital = models.ForeignKey(
        'Hospital', null=True, blank=True, on_delete=models.PROTECT, related_name='users'
    )

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['hospital'],
                condition=models.Q(role='HOSPITAL_ADMIN'),
                name='unique_admin_per_hospital',
            ),
        ]

    def get_full_name(self) -> str:
        return self.name

    def get_short_name(self) -> str:
        return self.name

    @property
    def ownership(self) -> Ownership:
        return Ownership(hospital_id=self.hospital_id)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Hospital(TimeStampedModel):
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=500)
    phone = models.CharField(max_length=50)
    email = models.EmailField()
    website = models.URLField(blank=True)
    license_number = models.CharField(max_length=100, unique=True)
    established_year = models.PositiveIntegerField()
    bed_capacity = models.PositiveIntegerField()
    emergency_contact = models.CharField(max_length=50)
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(
        User, null=True, on_delete=models.SET_NULL, related_name='hospitals_created'
    )

    @property
    def ownership(self) -> Ownership:
        return Ownership(hospital_id=self.id)

    def __str__(self) -> str:
        return f"{self.name} ({self.license_number})"


class Doctor(TimeStampedModel):
    """Doctor profile; always backed by exactly one DOCTOR user."""
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    specialization = models.CharField(max_length=255)
    hospital = models.ForeignKey(Hospital, on_delete=models.PROTECT, related_name='doctors')
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')

    @property
    def ownership(self) -> Ownership:
        return Ownership(hospital_id=self.hospital_id, doctor_id=self.id)

    def __str__(self) -> str:
        return f"Dr. {self.name} ({self.specialization})"


class PatientEnrollment(TimeStampedModel):
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    ]
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField()
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='patients')
    hospital = models.ForeignKey(Hospital, on_delete=models.PROTECT, related_name='patients')
    date_of_admission = models.DateTimeField()

    class Meta:
        indexes = [
            models.Index(fields=['hospital', 'created_at'], name='clinical_pa_hospita_5b2e0c_idx'),
        ]

    @property
    def ownership(self) -> Ownership:
        return Ownership(hospital_id=self.hospital_id, doctor_id=self.doctor_id)

    def __str__(self) -> str:
        return f"{self.name} (doctor={self.doctor_id})"


class Prescription(TimeStampedModel):
    patient_enrollment = models.ForeignKey(
        PatientEnrollment, on_delete=models.CASCADE, related_name='prescriptions'
    )
    medication = models.CharField(max_length=255)
    dosage = models.CharField(max_length=255)
    instructions = models.TextField()
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='prescriptions')
    hospital = models.ForeignKey(Hospital, on_delete=models.PROTECT, related_name='prescriptions')

    @property
    def ownership(self) -> Ownership:
        return Ownership(hospital_id=self.hospital_id, doctor_id=self.doctor_id)

    def __str__(self) -> str:
        return f"{self.medication} for {self.patient_enrollment_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinical_au_action_3f1c9a_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinical_au_object__8d4e21_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
