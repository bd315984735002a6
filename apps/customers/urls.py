from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # Customer ViewSet routes
    # GET    /api/customers/                  - List customers (?search=)
    # POST   /api/customers/                  - Create customer
    # GET    /api/customers/{id}/             - Get customer
    # PATCH  /api/customers/{id}/             - Update customer
    # DELETE /api/customers/{id}/             - Delete customer

    # Custom customer actions
    # GET/POST         /api/customers/{id}/transactions/                - List / add sales
    # GET/PATCH/DELETE /api/customers/{id}/transactions/{tx}/           - One sale
    # POST             /api/customers/{id}/transactions/{tx}/payments/  - Record payment
    # GET              /api/customers/{id}/balance/                     - Customer balance
    # GET              /api/customers/outstanding/                      - Portfolio balance

    path('', include(router.urls)),
]
