from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # GET /api/reports/{report_type}/?period=monthly&output=html|pdf
    path('<str:report_type>/', views.report, name='report'),
]
