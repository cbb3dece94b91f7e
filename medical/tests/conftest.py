import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from medical.models import InventoryItem, User


@pytest.fixture(autouse=True)
def _isolated_env(settings, tmp_path):
    """Fast hashing, a throwaway media root and fresh throttle counters per test."""
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.MEDIA_ROOT = tmp_path / 'media'
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def staff(db):
    return User.objects.create_user('STAFF001', password='P@ssw0rd1', role=User.ROLE_STAFF, name='Dr. Rao')


@pytest.fixture
def student(db):
    return User.objects.create_user('21CS001', password='P@ssw0rd1', role=User.ROLE_STUDENT, name='Asha Verma')


@pytest.fixture
def other_student(db):
    return User.objects.create_user('21CS002', password='P@ssw0rd1', role=User.ROLE_STUDENT, name='Ravi Kumar')


@pytest.fixture
def inventory(db):
    return {
        'Paracetamol': InventoryItem.objects.create(medicine='Paracetamol', stock=5),
        'Cetirizine': InventoryItem.objects.create(medicine='Cetirizine', stock=10),
    }


def client_for(user) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def staff_client(staff):
    return client_for(staff)


@pytest.fixture
def student_client(student):
    return client_for(student)


@pytest.fixture
def make_client():
    return client_for
