import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer
from apps.vendors.models import Vendor


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Shop Owner',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def vendor(user):
    return Vendor.objects.create(owner=user, name='Sharma Cement')


@pytest.fixture
def idle_vendor(user):
    """Vendor without any activity."""
    return Vendor.objects.create(owner=user, name='Quiet Traders')


@pytest.fixture
def customer(user):
    return Customer.objects.create(owner=user, name='Verma Builders')


@pytest.fixture
def today():
    return date(2025, 3, 20)
