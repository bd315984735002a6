import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer, CustomerTransaction
from apps.summaries.models import MonthlySummary
from apps.vendors.models import Vendor, VendorTransaction, VendorPayment


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


def _populate(owner, prefix):
    vendor = Vendor.objects.create(owner=owner, name=f'{prefix} Cement')
    VendorTransaction.objects.create(
        vendor=vendor,
        date=date(2025, 3, 10),
        material_amount=Decimal('500.00'),
        total_amount=Decimal('500.00'),
    )
    VendorPayment.objects.create(
        owner=owner,
        vendor=vendor,
        vendor_name=vendor.name,
        date=date(2025, 3, 15),
        amount=Decimal('100.00'),
    )
    customer = Customer.objects.create(owner=owner, name=f'{prefix} Builders')
    CustomerTransaction.objects.create(
        customer=customer,
        date=date(2025, 3, 5),
        material_amount=Decimal('800.00'),
        total_amount=Decimal('800.00'),
        outstanding_amount=Decimal('800.00'),
    )
    MonthlySummary.objects.create(owner=owner, year=2025, month=3)


@pytest.fixture
def ledger_data(user):
    """One vendor, customer, payment and cached summary for the test user."""
    _populate(user, 'Sharma')
    return user


@pytest.fixture
def other_ledger_data(other_user):
    """The same shape of data for another user."""
    _populate(other_user, 'Foreign')
    return other_user
