import pytest
from decimal import Decimal
from django.urls import reverse
from django.db import DatabaseError
from rest_framework import status
from apps.customers.models import Customer, CustomerTransaction


# =============================================================================
# Customer CRUD
# =============================================================================

@pytest.mark.django_db
class TestCustomerEndpoints:
    """Tests for /api/customers/"""

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('customers:customer-list'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_customer(self, authenticated_client, user):
        response = authenticated_client.post(
            reverse('customers:customer-list'),
            {'name': 'Verma Builders'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['outstanding'] == '0.00'
        assert Customer.objects.filter(owner=user).count() == 1

    def test_list_customers_with_balances(self, authenticated_client, customer_transaction, other_customer):
        response = authenticated_client.get(reverse('customers:customer-list'))

        assert response.data['count'] == 1
        assert response.data['results'][0]['outstanding'] == '350.00'

    def test_other_users_customer_is_404(self, authenticated_client, other_customer):
        url = reverse('customers:customer-detail', kwargs={'pk': other_customer.id})
        assert authenticated_client.get(url).status_code == status.HTTP_404_NOT_FOUND

    def test_delete_customer(self, authenticated_client, customer):
        url = reverse('customers:customer-detail', kwargs={'pk': customer.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Customer.objects.filter(id=customer.id).exists()


# =============================================================================
# Transactions & payments
# =============================================================================

@pytest.mark.django_db
class TestCustomerTransactionEndpoints:

    def test_create_sale_with_payments(self, authenticated_client, customer):
        url = reverse('customers:customer-transactions', kwargs={'pk': customer.id})
        response = authenticated_client.post(url, {
            'date': '2025-03-05',
            'items': [{'name': 'Bricks', 'quantity': '100', 'unit_price': '5'}],
            'payments': [
                {'amount': '100.00', 'date': '2025-03-05'},
                {'amount': '50.00', 'date': '2025-03-06', 'payment_method': 'cash'},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_amount'] == '500.00'
        assert response.data['total_payments'] == '150.00'
        assert response.data['outstanding_amount'] == '350.00'
        assert len(response.data['payments']) == 2

    def test_list_sales(self, authenticated_client, customer, customer_transaction):
        url = reverse('customers:customer-transactions', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['customer_name'] == 'Verma Builders'
        assert response.data[0]['payments'][0]['amount'] == '150.00'

    def test_list_sales_store_failure_is_service_unavailable(self, authenticated_client, customer, monkeypatch):
        def lazy_rows(**kwargs):
            raise DatabaseError('connection lost')
            yield

        monkeypatch.setattr('apps.customers.views.services.get_customer_transactions', lazy_rows)
        url = reverse('customers:customer-transactions', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data == {'error': 'connection lost'}

    def test_record_payment(self, authenticated_client, customer, customer_transaction):
        url = reverse('customers:customer-transaction-payments', kwargs={
            'pk': customer.id,
            'transaction_id': customer_transaction.id,
        })
        response = authenticated_client.post(url, {'amount': '50.00'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['outstanding_amount'] == '300.00'

    def test_record_non_positive_payment(self, authenticated_client, customer, customer_transaction):
        url = reverse('customers:customer-transaction-payments', kwargs={
            'pk': customer.id,
            'transaction_id': customer_transaction.id,
        })
        response = authenticated_client.post(url, {'amount': '0'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Valid payment amount is required'

    def test_patch_sale(self, authenticated_client, customer, customer_transaction):
        url = reverse('customers:customer-transaction-detail', kwargs={
            'pk': customer.id,
            'transaction_id': customer_transaction.id,
        })
        response = authenticated_client.patch(url, {'material_amount': '200.00'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['outstanding_amount'] == '50.00'

    def test_delete_sale(self, authenticated_client, customer, customer_transaction):
        url = reverse('customers:customer-transaction-detail', kwargs={
            'pk': customer.id,
            'transaction_id': customer_transaction.id,
        })
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not CustomerTransaction.objects.exists()


# =============================================================================
# Balances
# =============================================================================

@pytest.mark.django_db
class TestCustomerBalanceEndpoints:

    def test_customer_balance(self, authenticated_client, customer, customer_transaction):
        url = reverse('customers:customer-balance', kwargs={'pk': customer.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['outstanding_balance']) == Decimal('350.00')

    def test_portfolio_outstanding(self, authenticated_client, customer_transaction):
        response = authenticated_client.get(reverse('customers:customer-outstanding'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['outstanding_balance'] == '350.00'
