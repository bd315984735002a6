import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer, CustomerTransaction, CustomerPayment


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
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer(user):
    """Create a customer owned by the test user."""
    return Customer.objects.create(owner=user, name='Verma Builders', phone='9123456780')


@pytest.fixture
def second_customer(user):
    return Customer.objects.create(owner=user, name='Anand Homes')


@pytest.fixture
def other_customer(other_user):
    """Create a customer owned by another user."""
    return Customer.objects.create(owner=other_user, name='Elsewhere Ltd')


@pytest.fixture
def customer_transaction(customer):
    """A 500.00 sale with 150.00 already received."""
    sale = CustomerTransaction.objects.create(
        customer=customer,
        date=date(2025, 3, 5),
        items=[{'name': 'Bricks', 'quantity': '100', 'unit_price': '5'}],
        material_amount=Decimal('500.00'),
        total_amount=Decimal('500.00'),
    )
    CustomerPayment.objects.create(
        transaction=sale,
        date=date(2025, 3, 5),
        amount=Decimal('150.00'),
    )
    sale.update_payment_totals()
    return sale
