"""Clinical application for the hospital management API.

This package contains the models, authorization policy, services, views
and route registrations for hospitals, hospital admins, doctors, patient
enrollments and prescriptions.
"""
