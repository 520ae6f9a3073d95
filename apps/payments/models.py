# ==========================================
# apps/payments/models.py
# ==========================================

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone
from decimal import Decimal
import uuid


class PaymentType(models.TextChoices):
    MILESTONE = 'milestone', 'Milestone'
    PROMOTION = 'promotion', 'Promotion'
    BONUS = 'bonus', 'Bonus'
    REBATE = 'rebate', 'Rebate'
    MANUAL = 'manual', 'Manual'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    PAID = 'paid', 'Paid'
    REJECTED = 'rejected', 'Rejected'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentMethod(models.TextChoices):
    BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
    CHEQUE = 'cheque', 'Cheque'
    CASH = 'cash', 'Cash'
    MOBILE_WALLET = 'mobile_wallet', 'Mobile wallet'


# Statuses that hold a milestone tier; rejected and cancelled release it
TIER_HOLDING_STATUSES = [PaymentStatus.PENDING, PaymentStatus.APPROVED, PaymentStatus.PAID]


class Payment(models.Model):
    """A payout requested by, or issued to, an installer."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    installer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )
    currency = models.CharField(max_length=3, default='PKR')
    payment_type = models.CharField(
        max_length=20,
        choices=PaymentType.choices,
        default=PaymentType.MILESTONE,
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    description = models.CharField(max_length=500)

    # Milestone payments: tier number and installation count at request time
    milestone_number = models.PositiveIntegerField(null=True, blank=True)
    inverter_count = models.PositiveIntegerField(null=True, blank=True)

    promotion = models.ForeignKey(
        'promotions.Promotion',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments',
    )

    # Processing
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.BANK_TRANSFER,
    )
    transaction_id = models.CharField(max_length=100, null=True, blank=True, unique=True)
    approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_payments',
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rejected_payments',
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.CharField(max_length=500, blank=True)
    paid_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='disbursed_payments',
    )
    paid_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(max_length=1000, blank=True)

    requested_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        constraints = [
            models.UniqueConstraint(
                fields=['installer', 'milestone_number'],
                condition=Q(payment_type='milestone', status__in=TIER_HOLDING_STATUSES),
                name='unique_open_milestone_tier',
            ),
        ]
        indexes = [
            models.Index(fields=['installer', 'payment_type'], name='payments_inst_type_idx'),
            models.Index(fields=['status', 'requested_at'], name='payments_status_idx'),
        ]
        ordering = ['-requested_at']

    def __str__(self):
        return f"{self.get_payment_type_display()} {self.amount} {self.currency} ({self.status})"

    @property
    def is_open(self):
        return self.status in (PaymentStatus.PENDING, PaymentStatus.APPROVED)
