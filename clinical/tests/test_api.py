"""
End-to-end walk through the API.

A SUPER_ADMIN bootstraps a hospital and its admin; the admin hires a
doctor; the doctor enrolls a patient and prescribes; a second tenant is
shown to be invisible throughout.  Every step authenticates with the
token returned by ``/api/auth/login``.

To run the tests:

```
pytest -q clinical/tests
```
"""

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Doctor, PatientEnrollment, Prescription, User

PASSWORD = 'P@ssw0rd1'


class HospitalAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.anon = APIClient()
        r = self.anon.post(reverse('register'), {
            'name': 'Root', 'email': 'root@example.com', 'password': PASSWORD, 'role': 'SUPER_ADMIN',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.super_client = self._login('root@example.com')

    def _login(self, email) -> APIClient:
        r = self.anon.post(reverse('login'), {'email': email, 'password': PASSWORD}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK, r.data)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
        return client

    def _create_hospital(self, name, license_number):
        r = self.super_client.post('/api/hospitals', {
            'name': name,
            'address': f'{name} Street 1',
            'phone': '555-0100',
            'email': f'{name.lower()}@example.com',
            'licenseNumber': license_number,
            'establishedYear': 2001,
            'bedCapacity': 80,
            'emergencyContact': '555-0199',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        return r.data['data']['id']

    def _bootstrap_tenant(self, name, license_number, admin_email):
        hospital_id = self._create_hospital(name, license_number)
        r = self.super_client.post('/api/hospital-admins', {
            'name': f'{name} Admin', 'email': admin_email, 'password': PASSWORD, 'hospitalId': hospital_id,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        return hospital_id, self._login(admin_email)

    def test_full_scenario(self):
        h1, admin1 = self._bootstrap_tenant('North', 'LIC-N', 'admin.north@example.com')
        h2, admin2 = self._bootstrap_tenant('South', 'LIC-S', 'admin.south@example.com')

        # admin hires a doctor; the doctor's account works immediately
        r = admin1.post('/api/doctors', {
            'name': 'Meredith Grey', 'email': 'grey@example.com', 'password': PASSWORD,
            'specialization': 'Surgery',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        doctor_id = r.data['data']['id']
        self.assertEqual(r.data['data']['hospitalId'], h1)
        doctor = self._login('grey@example.com')

        # doctor enrolls a patient for themselves
        r = doctor.post('/api/patients', {'name': 'Izzie', 'age': 29, 'gender': 'Female'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        patient_id = r.data['data']['id']
        self.assertEqual(r.data['data']['doctorId'], doctor_id)
        self.assertEqual(r.data['data']['hospitalId'], h1)

        # and prescribes
        r = doctor.post('/api/prescriptions', {
            'patientEnrollmentId': patient_id, 'medication': 'Amoxicillin', 'dosage': '500mg',
            'instructions': 'Three times a day for 7 days',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        prescription_id = r.data['data']['id']

        # the admin of the same hospital sees everything in it
        r = admin1.get('/api/prescriptions', {'patientId': patient_id})
        self.assertEqual(r.data['count'], 1)
        r = admin1.get('/api/hospital-admins/my-hospital')
        self.assertEqual(r.data['data']['statistics'], {'doctors': 1, 'patients': 1, 'prescriptions': 1})

        # a colleague in the same hospital sees none of another doctor's prescriptions
        r = admin1.post('/api/doctors', {
            'name': 'Cristina Yang', 'email': 'yang@example.com', 'password': PASSWORD,
            'specialization': 'Cardiology',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        colleague_id = r.data['data']['id']
        colleague = self._login('yang@example.com')
        self.assertEqual(colleague.get('/api/prescriptions').data['count'], 0)
        self.assertEqual(colleague.get('/api/patients').data['count'], 0)
        self.assertEqual(
            colleague.get(f'/api/prescriptions/{prescription_id}').status_code, status.HTTP_403_FORBIDDEN
        )

        # the other tenant sees nothing and cannot reach the records
        self.assertEqual(admin2.get('/api/patients').data['count'], 0)
        self.assertEqual(admin2.get('/api/prescriptions').data['count'], 0)
        self.assertEqual(admin2.get(f'/api/patients/{patient_id}').status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            admin2.delete(f'/api/prescriptions/{prescription_id}').status_code, status.HTTP_403_FORBIDDEN
        )
        self.assertEqual(admin2.get(f'/api/doctors/{doctor_id}').status_code, status.HTTP_403_FORBIDDEN)

        # the doctor cannot be removed while they have patients
        r = admin1.delete(f'/api/doctors/{doctor_id}')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)

        # nor can the hospital
        r = self.super_client.delete(f'/api/hospitals/{h1}')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)

        # discharge: deleting the enrollment takes its prescriptions along
        r = doctor.delete(f'/api/patients/{patient_id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(Prescription.objects.filter(pk=prescription_id).exists())

        # now the doctor and their login can go
        r = admin1.delete(f'/api/doctors/{doctor_id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        r = admin1.delete(f'/api/doctors/{colleague_id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertFalse(Doctor.objects.exists())
        self.assertFalse(User.objects.filter(email='grey@example.com').exists())
        self.assertFalse(PatientEnrollment.objects.exists())

        # the South hospital has only its admin left; removing the admin frees it for deletion
        admin2_id = User.objects.get(email='admin.south@example.com').pk
        r = self.super_client.delete(f'/api/hospital-admins/{admin2_id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        r = self.super_client.delete(f'/api/hospitals/{h2}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)

    def test_health_is_public(self):
        r = self.anon.get('/health')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        body = r.json()
        self.assertEqual(body['status'], 'OK')
        self.assertTrue(body['db'])
        self.assertIn('timestamp', body)
