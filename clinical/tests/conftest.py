import pytest
from django.core.cache import cache

from clinical.policy import Role
from clinical.tests.factories import make_doctor, make_hospital, make_patient, make_prescription, make_user


@pytest.fixture(autouse=True)
def _clear_throttles():
    # throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def world(db):
    """Two hospitals, each with an admin, doctors, patients and prescriptions.

    North also has a read-only HOSPITAL account and a second doctor.
    """
    h1, h2 = make_hospital('North'), make_hospital('South')
    w = {
        'h1': h1,
        'h2': h2,
        'super': make_user('root@example.com', Role.SUPER_ADMIN),
        'admin1': make_user('admin1@example.com', Role.HOSPITAL_ADMIN, h1),
        'admin2': make_user('admin2@example.com', Role.HOSPITAL_ADMIN, h2),
        'hosp1': make_user('desk1@example.com', Role.HOSPITAL, h1),
        'doc1': make_doctor(h1, 'doc1@example.com'),
        'doc1b': make_doctor(h1, 'doc1b@example.com', specialization='Neurology'),
        'doc2': make_doctor(h2, 'doc2@example.com'),
    }
    w['pat1'] = make_patient(w['doc1'], 'Alice')
    w['pat1b'] = make_patient(w['doc1b'], 'Bob', gender='Male')
    w['pat2'] = make_patient(w['doc2'], 'Carol')
    w['rx1'] = make_prescription(w['pat1'])
    w['rx1b'] = make_prescription(w['pat1b'])
    w['rx2'] = make_prescription(w['pat2'])
    return w
