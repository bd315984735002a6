# Generated manually for summaries app

import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MonthlySummary',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('year', models.PositiveSmallIntegerField()),
                ('month', models.PositiveSmallIntegerField()),
                ('monthly_income', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('monthly_expenses', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('net_balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('vendor_transaction_count', models.PositiveIntegerField(default=0)),
                ('customer_transaction_count', models.PositiveIntegerField(default=0)),
                ('vendor_payment_count', models.PositiveIntegerField(default=0)),
                ('customer_payment_count', models.PositiveIntegerField(default=0)),
                ('top_vendors', models.JSONField(blank=True, default=list)),
                ('top_customers', models.JSONField(blank=True, default=list)),
                ('is_stale', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='monthly_summaries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'monthly_summaries',
                'ordering': ['-year', '-month'],
            },
        ),
        migrations.AddConstraint(
            model_name='monthlysummary',
            constraint=models.UniqueConstraint(fields=('owner', 'year', 'month'), name='unique_owner_month_summary'),
        ),
    ]
