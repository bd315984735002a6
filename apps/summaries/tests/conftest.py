import pytest
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
def other_user(db):
    return User.objects.create_user(email='other@example.com', password='OtherPass123!')


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
def customer(user):
    return Customer.objects.create(owner=user, name='Verma Builders')
