import pytest
from django.db import IntegrityError, transaction

from clinical.models import AuditEvent, User
from clinical.policy import Role
from clinical.tests.factories import PASSWORD, client_for, make_hospital, make_user

pytestmark = pytest.mark.django_db


def _admin_payload(hospital, email='new-admin@example.com'):
    return {'name': 'New Admin', 'email': email, 'password': PASSWORD, 'hospitalId': str(hospital.pk)}


@pytest.mark.parametrize('url', ['/api/hospital-admins', '/api/auth/hospital-admins'])
def test_super_admin_creates_admin_for_free_hospital(world, url):
    h3 = make_hospital('East')
    r = client_for(world['super']).post(url, _admin_payload(h3), format='json')
    assert r.status_code == 201, r.data
    assert r.data['data']['hospitalId'] == str(h3.pk)
    assert r.data['data']['role'] == 'HOSPITAL_ADMIN'
    assert 'password' not in r.data['data']
    assert AuditEvent.objects.filter(action='hospital_admin_create', user=world['super']).exists()


def test_second_admin_for_hospital_conflicts(world):
    r = client_for(world['super']).post('/api/hospital-admins', _admin_payload(world['h1']), format='json')
    assert r.status_code == 409
    assert r.data['message'] == 'This hospital already has an admin'
    assert User.objects.filter(role='HOSPITAL_ADMIN', hospital=world['h1']).count() == 1


def test_create_admin_unknown_hospital(world):
    payload = _admin_payload(world['h1'])
    payload['hospitalId'] = '00000000-0000-0000-0000-000000000001'
    r = client_for(world['super']).post('/api/hospital-admins', payload, format='json')
    assert r.status_code == 404


def test_unique_index_blocks_second_admin(world):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            make_user('dup-admin@example.com', Role.HOSPITAL_ADMIN, world['h1'])


def test_only_super_admin_manages_admins(world):
    for key in ('admin1', 'hosp1'):
        client = client_for(world[key])
        assert client.get('/api/hospital-admins').status_code == 403
        r = client.post('/api/hospital-admins', _admin_payload(make_hospital(f'Spare {key}')), format='json')
        assert r.status_code == 403
    r = client_for(world['doc1'].user).post('/api/auth/hospital-admins', _admin_payload(world['h2']), format='json')
    assert r.status_code == 403


def test_list_and_get_admins(world):
    client = client_for(world['super'])
    r = client.get('/api/hospital-admins')
    assert r.status_code == 200
    assert {row['email'] for row in r.data['data']} == {'admin1@example.com', 'admin2@example.com'}
    r = client.get(f"/api/hospital-admins/{world['admin1'].pk}")
    assert r.data['data']['hospital']['name'] == 'North'
    # a doctor's id is not a hospital admin
    assert client.get(f"/api/hospital-admins/{world['doc1'].user_id}").status_code == 404


def test_update_admin_to_occupied_hospital_conflicts(world):
    r = client_for(world['super']).put(
        f"/api/hospital-admins/{world['admin1'].pk}", {'hospitalId': str(world['h2'].pk)}, format='json'
    )
    assert r.status_code == 409
    world['admin1'].refresh_from_db()
    assert world['admin1'].hospital_id == world['h1'].pk


def test_update_admin_keeping_own_hospital_is_fine(world):
    r = client_for(world['super']).put(
        f"/api/hospital-admins/{world['admin1'].pk}",
        {'name': 'Renamed', 'hospitalId': str(world['h1'].pk)},
        format='json',
    )
    assert r.status_code == 200
    assert r.data['data']['name'] == 'Renamed'


def test_update_admin_moves_to_free_hospital(world):
    h3 = make_hospital('East')
    r = client_for(world['super']).put(
        f"/api/hospital-admins/{world['admin1'].pk}", {'hospitalId': str(h3.pk)}, format='json'
    )
    assert r.status_code == 200
    assert r.data['data']['hospitalId'] == str(h3.pk)


def test_update_admin_email_taken(world):
    r = client_for(world['super']).put(
        f"/api/hospital-admins/{world['admin1'].pk}", {'email': 'doc1@example.com'}, format='json'
    )
    assert r.status_code == 409


def test_delete_admin_frees_hospital(world):
    client = client_for(world['super'])
    assert client.delete(f"/api/hospital-admins/{world['admin1'].pk}").data == {'success': True, 'data': {}}
    assert not User.objects.filter(pk=world['admin1'].pk).exists()
    r = client.post('/api/hospital-admins', _admin_payload(world['h1']), format='json')
    assert r.status_code == 201


def test_my_hospital_statistics(world):
    r = client_for(world['admin1']).get('/api/hospital-admins/my-hospital')
    assert r.status_code == 200
    data = r.data['data']
    assert data['hospital']['id'] == str(world['h1'].pk)
    assert data['statistics'] == {'doctors': 2, 'patients': 2, 'prescriptions': 2}
    assert {d['id'] for d in data['recentDoctors']} == {str(world['doc1'].pk), str(world['doc1b'].pk)}
    names = {p['name'] for p in data['recentPatients']}
    assert names == {'Alice', 'Bob'}
    assert {p['doctor']['specialization'] for p in data['recentPatients']} == {'Cardiology', 'Neurology'}


def test_my_hospital_only_for_hospital_admins(world):
    for key in ('super', 'hosp1'):
        assert client_for(world[key]).get('/api/hospital-admins/my-hospital').status_code == 403
    assert client_for(world['doc1'].user).get('/api/hospital-admins/my-hospital').status_code == 403
