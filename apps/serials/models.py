# ==========================================
# apps/serials/models.py
# ==========================================

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
import uuid


class SerialStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'
    MAINTENANCE = 'maintenance', 'Maintenance'


class SerialRecordQuerySet(models.QuerySet):

    def valid(self):
        """Serials that count as installations (anything not deactivated)."""
        return self.exclude(status=SerialStatus.INACTIVE)

    def for_installer(self, installer_id):
        return self.filter(installer_id=installer_id)


class SerialRecord(models.Model):
    """An inverter installation registered by an installer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    installer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='serials',
    )
    serial_number = models.CharField(max_length=64, unique=True)
    installation_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=20,
        choices=SerialStatus.choices,
        default=SerialStatus.ACTIVE,
    )

    # Installation site
    city = models.CharField(max_length=100, blank=True)
    address = models.CharField(max_length=255, blank=True)
    customer_name = models.CharField(max_length=200, blank=True)
    customer_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="Customer satisfaction rating for this installation (1-5)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SerialRecordQuerySet.as_manager()

    class Meta:
        db_table = 'serial_records'
        indexes = [
            models.Index(fields=['installer', 'installation_date'], name='serials_inst_date_idx'),
            models.Index(fields=['status'], name='serials_status_idx'),
        ]
        ordering = ['installation_date', 'created_at']

    def __str__(self):
        return self.serial_number

    @property
    def is_valid(self):
        return self.status != SerialStatus.INACTIVE
