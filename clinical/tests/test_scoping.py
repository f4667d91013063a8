"""Tenant isolation: lists stay inside the caller's scope, single records are 404 before 403."""
import uuid

import pytest

from clinical.tests.factories import client_for

pytestmark = pytest.mark.django_db


def _ids(response):
    assert response.status_code == 200, response.data
    assert response.data['count'] == len(response.data['data'])
    return {row['id'] for row in response.data['data']}


def test_super_admin_sees_everything_and_can_filter(world):
    client = client_for(world['super'])
    assert _ids(client.get('/api/patients')) == {str(world[k].pk) for k in ('pat1', 'pat1b', 'pat2')}
    assert _ids(client.get('/api/patients', {'hospitalId': str(world['h2'].pk)})) == {str(world['pat2'].pk)}
    assert _ids(client.get('/api/prescriptions', {'doctorId': str(world['doc1b'].pk)})) == {str(world['rx1b'].pk)}


def test_hospital_admin_lists_only_own_hospital(world):
    client = client_for(world['admin1'])
    assert _ids(client.get('/api/patients')) == {str(world['pat1'].pk), str(world['pat1b'].pk)}
    assert _ids(client.get('/api/doctors')) == {str(world['doc1'].pk), str(world['doc1b'].pk)}
    assert _ids(client.get('/api/hospitals')) == {str(world['h1'].pk)}


def test_hospital_admin_cannot_widen_with_query(world):
    client = client_for(world['admin1'])
    ids = _ids(client.get('/api/patients', {'hospitalId': str(world['h2'].pk)}))
    assert str(world['pat2'].pk) not in ids


def test_doctor_lists_only_own_records(world):
    client = client_for(world['doc1'].user)
    assert _ids(client.get('/api/patients')) == {str(world['pat1'].pk)}
    assert _ids(client.get('/api/prescriptions')) == {str(world['rx1'].pk)}
    assert _ids(client.get('/api/prescriptions', {'doctorId': str(world['doc2'].pk)})) == {str(world['rx1'].pk)}


def test_patient_filter_narrows_prescriptions(world):
    client = client_for(world['admin1'])
    assert _ids(client.get('/api/prescriptions', {'patientId': str(world['pat1b'].pk)})) == {str(world['rx1b'].pk)}
    # another tenant's patient yields nothing rather than that tenant's data
    assert _ids(client.get('/api/prescriptions', {'patientId': str(world['pat2'].pk)})) == set()


def test_malformed_filter_is_validation_error(world):
    r = client_for(world['super']).get('/api/patients', {'hospitalId': 'nope'})
    assert r.status_code == 400
    assert 'hospitalId' in r.data['errors']


def test_hospital_account_reads_own_hospital_and_doctors_only(world):
    client = client_for(world['hosp1'])
    assert _ids(client.get('/api/hospitals')) == {str(world['h1'].pk)}
    assert _ids(client.get('/api/doctors')) == {str(world['doc1'].pk), str(world['doc1b'].pk)}
    assert client.get(f"/api/hospitals/{world['h2'].pk}").status_code == 403
    assert client.get('/api/patients').status_code == 403
    assert client.get('/api/prescriptions').status_code == 403
    r = client.put(f"/api/hospitals/{world['h1'].pk}", {'name': 'Renamed'}, format='json')
    assert r.status_code == 403


def test_doctor_without_profile_sees_nothing(world):
    from clinical.policy import Role
    from clinical.tests.factories import make_user

    orphan = make_user('orphan@example.com', Role.DOCTOR, world['h1'])
    client = client_for(orphan)
    assert _ids(client.get('/api/patients')) == set()
    r = client.post('/api/patients', {'name': 'Z', 'age': 3, 'gender': 'Other'}, format='json')
    assert r.status_code == 404
    assert r.data['message'] == 'Doctor profile not found'


@pytest.mark.parametrize('path', ['patients', 'prescriptions', 'doctors', 'hospitals'])
def test_missing_record_is_404_even_for_outsiders(world, path):
    client = client_for(world['admin2'])
    missing = client.get(f'/api/{path}/{uuid.uuid4()}')
    malformed = client.get(f'/api/{path}/not-a-uuid')
    assert missing.status_code == 404
    assert malformed.status_code == 404
    assert missing.data['success'] is False


@pytest.mark.parametrize('key,path', [
    ('pat1', 'patients'),
    ('rx1', 'prescriptions'),
    ('doc1', 'doctors'),
    ('h1', 'hospitals'),
])
def test_existing_foreign_record_is_403(world, key, path):
    client = client_for(world['admin2'])
    r = client.get(f"/api/{path}/{world[key].pk}")
    assert r.status_code == 403
    assert r.data['success'] is False
    assert 'data' not in r.data


def test_doctor_cannot_touch_colleagues_patient(world):
    client = client_for(world['doc1'].user)
    url = f"/api/patients/{world['pat1b'].pk}"
    assert client.get(url).status_code == 403
    assert client.put(url, {'age': 41}, format='json').status_code == 403
    assert client.delete(url).status_code == 403
    world['pat1b'].refresh_from_db()
    assert world['pat1b'].age == 40


def test_get_is_idempotent(world):
    client = client_for(world['admin1'])
    url = f"/api/patients/{world['pat1'].pk}"
    first, second = client.get(url), client.get(url)
    assert first.status_code == second.status_code == 200
    assert first.data == second.data


def test_unknown_api_route_is_json_404(world):
    r = client_for(world['super']).get('/api/nothing-here')
    assert r.status_code == 404
    assert r.json()['success'] is False
