from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'vendors'

router = DefaultRouter()
router.register(r'', views.VendorViewSet, basename='vendor')

urlpatterns = [
    # Vendor ViewSet routes
    # GET    /api/vendors/                    - List vendors (?search=)
    # POST   /api/vendors/                    - Create vendor
    # GET    /api/vendors/{id}/               - Get vendor
    # PATCH  /api/vendors/{id}/               - Update vendor
    # DELETE /api/vendors/{id}/               - Delete vendor

    # Custom vendor actions
    # GET/POST         /api/vendors/{id}/transactions/        - List / add transactions
    # GET/PATCH/DELETE /api/vendors/{id}/transactions/{tx}/   - One transaction
    # GET/POST         /api/vendors/{id}/payments/            - List / record payments
    # GET              /api/vendors/{id}/balance/             - Remaining balance
    # GET              /api/vendors/outstanding/              - Portfolio balance
    # GET              /api/vendors/payments/                 - All vendor payments

    path('', include(router.urls)),
]
