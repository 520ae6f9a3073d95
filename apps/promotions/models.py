# ==========================================
# apps/promotions/models.py
# ==========================================

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import math
import uuid


class PromotionType(models.TextChoices):
    INSTALLATION_TARGET = 'installation_target', 'Installation target'
    MILESTONE = 'milestone', 'Milestone'
    QUALITY_TARGET = 'quality_target', 'Quality target'
    GEOGRAPHIC_EXPANSION = 'geographic_expansion', 'Geographic expansion'


class TargetPeriod(models.TextChoices):
    DAILY = 'daily', 'Daily'
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'
    TOTAL = 'total', 'Total'


class PromotionStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    EXPIRED = 'expired', 'Expired'


class ParticipationStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    EXPIRED = 'expired', 'Expired'


class RewardStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    PAID = 'paid', 'Paid'
    REJECTED = 'rejected', 'Rejected'


class PromotionQuerySet(models.QuerySet):

    def active(self, now=None):
        """Promotions whose [start_date, end_date] window contains now."""
        now = now or timezone.now()
        return self.filter(start_date__lte=now, end_date__gte=now)

    def expired(self, now=None):
        now = now or timezone.now()
        return self.filter(end_date__lt=now)


class Promotion(models.Model):
    """A time-bounded campaign with a numeric target and a cash reward."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=1000)
    type = models.CharField(max_length=30, choices=PromotionType.choices)

    # Target
    target_type = models.CharField(max_length=30, default='installations')
    target_value = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    target_period = models.CharField(
        max_length=10,
        choices=TargetPeriod.choices,
        default=TargetPeriod.TOTAL,
    )
    target_rating_threshold = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('5'))],
        help_text="Minimum average customer rating (quality targets only)",
    )

    # Eligibility
    min_installations = models.PositiveIntegerField(default=0)
    installer_status = models.CharField(
        max_length=20,
        blank=True,
        help_text="Required installer status; blank admits any status",
    )
    new_installers_only = models.BooleanField(default=False)

    # Rewards
    reward_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
    )
    reward_description = models.CharField(max_length=255, blank=True)
    reward_type = models.CharField(max_length=30, default='cash')
    currency = models.CharField(max_length=3, default='PKR')

    # Time window
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_promotions',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PromotionQuerySet.as_manager()

    class Meta:
        db_table = 'promotions'
        indexes = [
            models.Index(fields=['start_date', 'end_date'], name='promotions_window_idx'),
            models.Index(fields=['type'], name='promotions_type_idx'),
        ]
        ordering = ['-start_date', '-created_at']

    def __str__(self):
        return self.title

    def clean(self):
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError({'end_date': 'End date must be after start date'})
        if self.target_value is not None and self.target_value <= 0:
            raise ValidationError({'target_value': 'Target must be a positive number'})
        if self.type == PromotionType.QUALITY_TARGET and self.target_rating_threshold is None:
            raise ValidationError({'target_rating_threshold': 'Quality targets need a rating threshold'})

    def get_status(self, now=None):
        now = now or timezone.now()
        if now > self.end_date:
            return PromotionStatus.EXPIRED
        return PromotionStatus.ACTIVE

    @property
    def status(self):
        return self.get_status()

    def is_running(self, now=None):
        now = now or timezone.now()
        return self.start_date <= now <= self.end_date

    @property
    def days_remaining(self):
        seconds = (self.end_date - timezone.now()).total_seconds()
        return max(0, math.ceil(seconds / 86400))


class Participation(models.Model):
    """An installer's enrollment in one promotion, tracking progress since joining."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    installer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='participations',
    )
    promotion = models.ForeignKey(
        Promotion,
        on_delete=models.CASCADE,
        related_name='participations',
    )
    joined_at = models.DateTimeField(default=timezone.now)
    # Only serials installed at or after this instant count toward progress
    counting_start_date = models.DateTimeField()
    status = models.CharField(
        max_length=20,
        choices=ParticipationStatus.choices,
        default=ParticipationStatus.ACTIVE,
    )

    # Progress snapshot, refreshed on every recompute
    progress_current = models.PositiveIntegerField(default=0)
    progress_target = models.PositiveIntegerField(default=0)
    progress_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    progress_valid_serials = models.PositiveIntegerField(default=0)
    progress_rating = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    progress_meets_quality = models.BooleanField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    # Reward settlement
    reward_status = models.CharField(
        max_length=20,
        choices=RewardStatus.choices,
        default=RewardStatus.PENDING,
    )
    reward_processed_at = models.DateTimeField(null=True, blank=True)
    reward_processed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_rewards',
    )

    # Bumped on every write; conditional updates key on it
    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'promotion_participations'
        constraints = [
            models.UniqueConstraint(
                fields=['installer', 'promotion'],
                name='unique_installer_promotion',
            ),
        ]
        indexes = [
            models.Index(fields=['promotion', 'status'], name='participations_promo_idx'),
            models.Index(fields=['installer', 'status'], name='participations_inst_idx'),
        ]
        ordering = ['-joined_at']

    def __str__(self):
        return f"{self.installer} in {self.promotion}"

    def save(self, *args, **kwargs):
        if self.counting_start_date is None:
            self.counting_start_date = self.joined_at
        super().save(*args, **kwargs)

    @property
    def reward_claimed(self):
        """Legacy view of the reward: claimed means paid out."""
        return self.reward_status == RewardStatus.PAID
