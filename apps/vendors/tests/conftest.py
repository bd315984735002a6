import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.vendors.models import Vendor, VendorTransaction, VendorPayment


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
    """Create and return another test user."""
    return User.objects.create_user(
        email='other@example.com',
        password='OtherPass123!',
        display_name='Other Owner',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def vendor(user):
    """Create a vendor owned by the test user."""
    return Vendor.objects.create(owner=user, name='Sharma Cement', phone='9876543210')


@pytest.fixture
def second_vendor(user):
    """Create a second vendor owned by the test user."""
    return Vendor.objects.create(owner=user, name='Patel Steel')


@pytest.fixture
def other_vendor(other_user):
    """Create a vendor owned by another user."""
    return Vendor.objects.create(owner=other_user, name='Foreign Supplies')


@pytest.fixture
def vendor_transaction(vendor):
    """A 500.00 purchase from the vendor."""
    return VendorTransaction.objects.create(
        vendor=vendor,
        date=date(2025, 3, 10),
        items=[{'name': 'Cement', 'quantity': '10', 'unit_price': '50'}],
        material_amount=Decimal('500.00'),
        transport_charge=Decimal('0.00'),
        total_amount=Decimal('500.00'),
    )


@pytest.fixture
def vendor_payment(user, vendor):
    """A 100.00 payment to the vendor."""
    return VendorPayment.objects.create(
        owner=user,
        vendor=vendor,
        vendor_name=vendor.name,
        date=date(2025, 3, 15),
        amount=Decimal('100.00'),
    )
