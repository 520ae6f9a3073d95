# Generated manually for serials app

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SerialRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('serial_number', models.CharField(max_length=64, unique=True)),
                ('installation_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('maintenance', 'Maintenance')], default='active', max_length=20)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('customer_name', models.CharField(blank=True, max_length=200)),
                ('customer_rating', models.PositiveSmallIntegerField(blank=True, help_text='Customer satisfaction rating for this installation (1-5)', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('installer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='serials', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'serial_records',
                'ordering': ['installation_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['installer', 'installation_date'], name='serials_inst_date_idx'),
                    models.Index(fields=['status'], name='serials_status_idx'),
                ],
            },
        ),
    ]
