"""
URL mappings for the hospital management API.

Mounted under ``/api`` by ``hms.urls``.  Trailing slashes are
deliberately omitted; ``hospital-admins/my-hospital`` is listed before
the ``<pk>`` route so it is never taken for an id.
"""
from django.urls import path

from .views import auth, doctors, hospital_admins, hospitals, patients, prescriptions

urlpatterns = [
    # Auth
    path('auth/register', auth.register, name='register'),
    path('auth/login', auth.login, name='login'),
    path('auth/me', auth.me, name='me'),
    path('auth/hospital-admins', auth.create_hospital_admin, name='auth-hospital-admins'),

    # Hospitals
    path('hospitals', hospitals.hospitals, name='hospitals'),
    path('hospitals/<str:pk>', hospitals.hospital_detail, name='hospital-detail'),

    # Hospital admins
    path('hospital-admins', hospital_admins.hospital_admins, name='hospital-admins'),
    path('hospital-admins/my-hospital', hospital_admins.my_hospital, name='my-hospital'),
    path('hospital-admins/<str:pk>', hospital_admins.hospital_admin_detail, name='hospital-admin-detail'),

    # Doctors
    path('doctors', doctors.doctors, name='doctors'),
    path('doctors/<str:pk>', doctors.doctor_detail, name='doctor-detail'),

    # Patients
    path('patients', patients.patients, name='patients'),
    path('patients/<str:pk>', patients.patient_detail, name='patient-detail'),

    # Prescriptions
    path('prescriptions', prescriptions.prescriptions, name='prescriptions'),
    path('prescriptions/<str:pk>', prescriptions.prescription_detail, name='prescription-detail'),
]
