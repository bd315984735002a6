from django.urls import path
from . import views

app_name = 'summaries'

urlpatterns = [
    # Monthly summaries
    path('monthly/', views.monthly_summary, name='monthly'),
    path('monthly/current/', views.current_monthly_summary, name='monthly-current'),
    path('monthly/recalculate/', views.recalculate_monthly_summary, name='monthly-recalculate'),

    # Overviews
    path('home/', views.home_summary, name='home'),
    path('yearly/', views.yearly_summary, name='yearly'),
    path('history/', views.transaction_history, name='history'),
]
