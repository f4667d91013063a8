#!/usr/bin/env python3
"""
Smoke test for a running hospital management API.

Walks the whole tenant lifecycle against a live server and reports
every call that did not answer with the expected status.  The SUPER_ADMIN
account must exist beforehand, e.g.::

    python manage.py ensure_super_admin --email root@example.com --password 'P@ssw0rd1'
    SMOKE_EMAIL=root@example.com SMOKE_PASSWORD='P@ssw0rd1' python smoke_test.py

Everything the run creates is deleted again at the end.
"""
import os
import sys
import time
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

BASE_URL = os.getenv("SMOKE_BASE_URL", f"http://127.0.0.1:{os.getenv('PORT', '8000')}")
SUPER_EMAIL = os.getenv("SMOKE_EMAIL", "root@example.com")
SUPER_PASSWORD = os.getenv("SMOKE_PASSWORD", "P@ssw0rd1")
PASSWORD = "Sm0ke-Test-Pass"


@dataclass
class TestResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    description: str = ""


class SmokeTester:
    def __init__(self):
        self.session = requests.Session()
        self.tag = uuid.uuid4().hex[:8]
        self.results: List[TestResult] = []
        self.errors: List[TestResult] = []

    def call(self, token: Optional[str], method: str, endpoint: str, data: Dict = None,
             expected_status: int = 200, description: str = "") -> dict:
        """Call one endpoint and record whether it answered as expected."""
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        start_time = time.time()
        try:
            response = self.session.request(method, f"{BASE_URL}{endpoint}", json=data, headers=headers, timeout=10)
        except requests.RequestException as e:
            result = TestResult(False, endpoint, method, 0, time.time() - start_time, str(e), description)
            print(f"❌ {method} {endpoint} - {e}")
            self.results.append(result)
            self.errors.append(result)
            return {}

        response_time = time.time() - start_time
        ok = response.status_code == expected_status
        result = TestResult(
            success=ok,
            endpoint=endpoint,
            method=method,
            status_code=response.status_code,
            response_time=response_time,
            error_message="" if ok else response.text[:200],
            description=description,
        )
        self.results.append(result)
        if ok:
            print(f"✅ {method} {endpoint} - {description} ({response_time:.2f}s)")
        else:
            self.errors.append(result)
            print(f"❌ {method} {endpoint} - {description}: {response.status_code} (wanted {expected_status})")
        try:
            return response.json()
        except ValueError:
            return {}

    def login(self, email: str, password: str) -> Optional[str]:
        body = self.call(None, "POST", "/api/auth/login", {"email": email, "password": password},
                         description=f"login {email}")
        return body.get("token")

    def run(self) -> bool:
        self.call(None, "GET", "/health", description="health check")
        root = self.login(SUPER_EMAIL, SUPER_PASSWORD)
        if not root:
            print("Cannot continue without a SUPER_ADMIN token")
            return False

        hospital = self.call(root, "POST", "/api/hospitals", {
            "name": f"Smoke {self.tag}",
            "address": "1 Smoke Lane",
            "phone": "555-0100",
            "email": f"smoke-{self.tag}@example.com",
            "licenseNumber": f"SMOKE-{self.tag}",
            "establishedYear": 2000,
            "bedCapacity": 10,
            "emergencyContact": "555-0199",
        }, 201, "create hospital").get("data", {})
        hospital_id = hospital.get("id")

        admin_email = f"admin-{self.tag}@example.com"
        admin_id = self.call(root, "POST", "/api/hospital-admins", {
            "name": "Smoke Admin", "email": admin_email, "password": PASSWORD, "hospitalId": hospital_id,
        }, 201, "create hospital admin").get("data", {}).get("id")
        self.call(root, "POST", "/api/hospital-admins", {
            "name": "Second Admin", "email": f"admin2-{self.tag}@example.com", "password": PASSWORD,
            "hospitalId": hospital_id,
        }, 409, "second admin is rejected")
        admin = self.login(admin_email, PASSWORD)

        doctor_email = f"doctor-{self.tag}@example.com"
        doctor_id = self.call(admin, "POST", "/api/doctors", {
            "name": "Smoke Doctor", "email": doctor_email, "password": PASSWORD, "specialization": "Testing",
        }, 201, "admin hires doctor").get("data", {}).get("id")
        doctor = self.login(doctor_email, PASSWORD)

        patient_id = self.call(doctor, "POST", "/api/patients", {
            "name": "Smoke Patient", "age": 30, "gender": "Other",
        }, 201, "doctor enrolls patient").get("data", {}).get("id")
        prescription_id = self.call(doctor, "POST", "/api/prescriptions", {
            "patientEnrollmentId": patient_id, "medication": "Placebo", "dosage": "1 tablet",
            "instructions": "As needed",
        }, 201, "doctor prescribes").get("data", {}).get("id")

        self.call(admin, "GET", "/api/hospital-admins/my-hospital", description="hospital statistics")
        self.call(doctor, "GET", f"/api/prescriptions/{prescription_id}", description="read prescription")
        self.call(admin, "GET", f"/api/patients/{uuid.uuid4()}", expected_status=404, description="unknown patient")
        self.call(admin, "DELETE", f"/api/doctors/{doctor_id}", expected_status=409,
                  description="doctor with patients is kept")

        # cleanup, dependents first
        self.call(doctor, "DELETE", f"/api/patients/{patient_id}", description="delete patient")
        self.call(admin, "DELETE", f"/api/doctors/{doctor_id}", description="delete doctor")
        self.call(root, "DELETE", f"/api/hospital-admins/{admin_id}", description="delete hospital admin")
        self.call(root, "DELETE", f"/api/hospitals/{hospital_id}", description="delete hospital")
        return not self.errors

    def report(self):
        print("=" * 50)
        print(f"{len(self.results)} calls, {len(self.errors)} failed")
        for r in self.errors:
            print(f"  {r.method} {r.endpoint} [{r.status_code}] {r.description}: {r.error_message}")


if __name__ == "__main__":
    tester = SmokeTester()
    passed = tester.run()
    tester.report()
    sys.exit(0 if passed else 1)
