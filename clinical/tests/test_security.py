import pytest
from django.core.cache import cache
from django.urls import reverse
from rest_framework.test import APIClient
from clinical.models import Doctor, User

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()


def test_no_role_bypass_in_login():
    client = APIClient()
    u = User.objects.create_user(username='u1', password='P@ssw0rd1', role=User.ROLE_PATIENT)
    # Try to escalate by sending a role with the credentials
    r = client.post(reverse('login_view'), {'username': 'u1', 'password': 'P@ssw0rd1', 'role': 'ADMIN'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == User.ROLE_PATIENT
    u.refresh_from_db()
    assert u.role == User.ROLE_PATIENT


def test_login_returns_jwt_and_legacy_token():
    client = APIClient()
    User.objects.create_user(username='u_jwt', password='P@ssw0rd1', role=User.ROLE_PATIENT)
    r = client.post(reverse('login_view'), {'username': 'u_jwt', 'password': 'P@ssw0rd1'}, format='json')
    assert r.status_code == 200
    assert 'jwt_access' in r.data and r.data['jwt_access']
    assert 'jwt_refresh' in r.data and r.data['jwt_refresh']
    assert 'token' in r.data and r.data['token']


def test_login_includes_profile_id():
    user = User.objects.create_user(username='dr', password='P@ssw0rd1', role=User.ROLE_DOCTOR)
    doctor = Doctor.objects.create(user=user)
    r = APIClient().post(reverse('login_view'), {'username': 'dr', 'password': 'P@ssw0rd1'}, format='json')
    assert r.data['user']['doctorId'] == doctor.id


def test_invalid_login_is_400():
    User.objects.create_user(username='u2', password='P@ssw0rd1', role=User.ROLE_NURSE)
    r = APIClient().post(reverse('login_view'), {'username': 'u2', 'password': 'wrong'}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error']['code'] == 'invalid_credentials'


def test_token_and_bearer_both_authenticate():
    User.objects.create_user(username='n1', password='P@ssw0rd1', role=User.ROLE_NURSE)
    client = APIClient()
    r = client.post(reverse('login_view'), {'username': 'n1', 'password': 'P@ssw0rd1'}, format='json')

    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert client.get('/api/patients').status_code == 200

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    assert client.get('/api/patients').status_code == 200


def test_jwt_refresh_returns_new_access():
    User.objects.create_user(username='n2', password='P@ssw0rd1', role=User.ROLE_NURSE)
    client = APIClient()
    r = client.post(reverse('login_view'), {'username': 'n2', 'password': 'P@ssw0rd1'}, format='json')
    r = client.post(reverse('jwt_refresh_view'), {'refresh': r.data['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']


def test_unauthenticated_requests_are_rejected():
    r = APIClient().get('/api/patients')
    assert r.status_code in (401, 403)
    assert r.data['ok'] is False


def test_healthz():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}
