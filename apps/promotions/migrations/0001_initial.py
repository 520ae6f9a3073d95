# Generated manually for promotions app

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Promotion',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(max_length=1000)),
                ('type', models.CharField(choices=[('installation_target', 'Installation target'), ('milestone', 'Milestone'), ('quality_target', 'Quality target'), ('geographic_expansion', 'Geographic expansion')], max_length=30)),
                ('target_type', models.CharField(default='installations', max_length=30)),
                ('target_value', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('target_period', models.CharField(choices=[('daily', 'Daily'), ('weekly', 'Weekly'), ('monthly', 'Monthly'), ('total', 'Total')], default='total', max_length=10)),
                ('target_rating_threshold', models.DecimalField(blank=True, decimal_places=2, help_text='Minimum average customer rating (quality targets only)', max_digits=3, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('5'))])),
                ('min_installations', models.PositiveIntegerField(default=0)),
                ('installer_status', models.CharField(blank=True, help_text='Required installer status; blank admits any status', max_length=20)),
                ('new_installers_only', models.BooleanField(default=False)),
                ('reward_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('reward_description', models.CharField(blank=True, max_length=255)),
                ('reward_type', models.CharField(default='cash', max_length=30)),
                ('currency', models.CharField(default='PKR', max_length=3)),
                ('start_date', models.DateTimeField()),
                ('end_date', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_promotions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'promotions',
                'ordering': ['-start_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['start_date', 'end_date'], name='promotions_window_idx'),
                    models.Index(fields=['type'], name='promotions_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Participation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('joined_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('counting_start_date', models.DateTimeField()),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('expired', 'Expired')], default='active', max_length=20)),
                ('progress_current', models.PositiveIntegerField(default=0)),
                ('progress_target', models.PositiveIntegerField(default=0)),
                ('progress_percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5)),
                ('progress_valid_serials', models.PositiveIntegerField(default=0)),
                ('progress_rating', models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True)),
                ('progress_meets_quality', models.BooleanField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('reward_status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('paid', 'Paid'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('reward_processed_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('installer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participations', to=settings.AUTH_USER_MODEL)),
                ('promotion', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participations', to='promotions.promotion')),
                ('reward_processed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='processed_rewards', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'promotion_participations',
                'ordering': ['-joined_at'],
                'indexes': [
                    models.Index(fields=['promotion', 'status'], name='participations_promo_idx'),
                    models.Index(fields=['installer', 'status'], name='participations_inst_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('installer', 'promotion'), name='unique_installer_promotion'),
                ],
            },
        ),
    ]
