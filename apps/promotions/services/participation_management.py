"""
Participation management service.

Joining promotions, the installer-facing promotion listing and dashboard,
reward settlement, and the expiry sweep.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import F, Sum
from django.utils import timezone

from apps.accounts.models import User
from apps.notifications.services import notify_reward_status
from apps.promotions.models import (
    Participation,
    ParticipationStatus,
    Promotion,
    RewardStatus,
)
from apps.serials.services.serial_queries import list_valid_serials, count_valid_installations

from .exceptions import (
    PromotionNotFoundError,
    ParticipationNotFoundError,
    PromotionNotActiveError,
    NotEligibleError,
    AlreadyParticipatingError,
    InvalidRewardTransitionError,
    ConflictError,
    ConfigurationError,
)
from .progress_calculation import evaluate_progress, apply_progress, recompute_participation
from .promotion_queries import list_active_promotions

logger = logging.getLogger(__name__)

REWARD_TRANSITIONS = {
    RewardStatus.PENDING: {RewardStatus.APPROVED, RewardStatus.REJECTED},
    RewardStatus.APPROVED: {RewardStatus.PAID, RewardStatus.REJECTED},
    RewardStatus.REJECTED: {RewardStatus.PENDING},
    RewardStatus.PAID: set(),
}


def eligibility_failures(
    promotion: Promotion,
    installer: User,
    now: Optional[datetime] = None,
) -> List[str]:
    """Reasons the installer may not join the promotion; empty when eligible."""
    now = now or timezone.now()
    failures = []

    if not installer.is_installer:
        failures.append("Only installers can join promotions")

    if promotion.installer_status and installer.status != promotion.installer_status:
        failures.append(f"Installer status must be {promotion.installer_status}")

    if promotion.min_installations:
        installations = count_valid_installations(installer.id)
        if installations < promotion.min_installations:
            failures.append(
                f"Requires at least {promotion.min_installations} installations"
            )

    if promotion.new_installers_only:
        window = timedelta(days=settings.NEW_INSTALLER_WINDOW_DAYS)
        if installer.created_at < now - window:
            failures.append("Only open to new installers")

    return failures


def is_eligible_for_promotion(
    promotion: Promotion,
    installer: User,
    now: Optional[datetime] = None,
) -> bool:
    return not eligibility_failures(promotion, installer, now)


@transaction.atomic
def join_promotion(
    *,
    installer: User,
    promotion_id: UUID,
    now: Optional[datetime] = None,
) -> Participation:
    """
    Enroll an installer in a promotion.

    Progress counts installations from the moment of joining onward.
    The promotion row is locked while the participation is created.

    Args:
        installer: Installer joining
        promotion_id: UUID of the promotion
        now: Join time (defaults to now)

    Returns:
        Created Participation with its initial progress snapshot

    Raises:
        PromotionNotFoundError: If promotion doesn't exist
        PromotionNotActiveError: If promotion hasn't started or has ended
        NotEligibleError: If installer fails the eligibility rules
        AlreadyParticipatingError: If installer already joined
    """
    now = now or timezone.now()

    try:
        promotion = Promotion.objects.select_for_update().get(id=promotion_id)
    except Promotion.DoesNotExist:
        raise PromotionNotFoundError(f"Promotion {promotion_id} not found")

    if not promotion.is_running(now):
        raise PromotionNotActiveError(f"Promotion '{promotion.title}' is not active")

    if Participation.objects.filter(installer=installer, promotion=promotion).exists():
        raise AlreadyParticipatingError(f"Already participating in '{promotion.title}'")

    failures = eligibility_failures(promotion, installer, now)
    if failures:
        raise NotEligibleError('; '.join(failures))

    participation = Participation(
        installer=installer,
        promotion=promotion,
        joined_at=now,
        counting_start_date=now,
        progress_target=promotion.target_value,
    )
    result = evaluate_progress(
        participation=participation,
        promotion=promotion,
        serials=list_valid_serials(installer.id),
    )
    apply_progress(participation, promotion, result, now)

    try:
        with transaction.atomic():
            participation.save(force_insert=True)
    except IntegrityError:
        raise AlreadyParticipatingError(f"Already participating in '{promotion.title}'")

    logger.info("Installer %s joined promotion %s", installer.id, promotion.id)
    return participation


def get_installer_promotions(*, installer: User, now: Optional[datetime] = None) -> List[dict]:
    """
    Active promotions as seen by one installer.

    Each participation's progress is refreshed before it is returned.

    Returns:
        List of dicts with keys: promotion, participation (or None),
        is_participating, can_join
    """
    now = now or timezone.now()
    promotions = list(list_active_promotions(now))
    participations = {
        p.promotion_id: p
        for p in Participation.objects.filter(
            installer=installer,
            promotion__in=promotions,
        )
    }

    serials = list_valid_serials(installer.id) if participations else []
    listing = []
    for promotion in promotions:
        participation = participations.get(promotion.id)
        if participation is not None:
            try:
                recompute_participation(participation, promotion, serials, now)
            except (ConflictError, ConfigurationError) as e:
                logger.warning("Serving stored progress for participation %s: %s", participation.pk, e)

        listing.append({
            'promotion': promotion,
            'participation': participation,
            'is_participating': participation is not None,
            'can_join': participation is None and is_eligible_for_promotion(promotion, installer, now),
        })

    return listing


def get_promotion_dashboard_stats(*, installer: User, now: Optional[datetime] = None) -> dict:
    """
    Promotion summary for an installer's dashboard.

    Returns:
        Dict with available_promotions, active_participations,
        completed_promotions, total_rewards_earned
    """
    now = now or timezone.now()
    participations = Participation.objects.filter(installer=installer)

    rewards = (
        participations
        .filter(reward_status=RewardStatus.PAID)
        .aggregate(total=Sum('promotion__reward_amount'))
    )

    return {
        'available_promotions': list_active_promotions(now).exclude(
            participations__installer=installer
        ).count(),
        'active_participations': participations.filter(status=ParticipationStatus.ACTIVE).count(),
        'completed_promotions': participations.filter(status=ParticipationStatus.COMPLETED).count(),
        'total_rewards_earned': rewards['total'] or Decimal('0.00'),
    }


@transaction.atomic
def update_reward_status(
    *,
    participation_id: UUID,
    reward_status: str,
    admin: User,
) -> Participation:
    """
    Move a completed participation's reward to a new status.

    Args:
        participation_id: UUID of the participation
        reward_status: Target RewardStatus
        admin: Administrator processing the reward

    Returns:
        Updated Participation

    Raises:
        ParticipationNotFoundError: If participation doesn't exist
        InvalidRewardTransitionError: If participation isn't completed or
            the transition isn't allowed
    """
    try:
        participation = (
            Participation.objects
            .select_for_update()
            .select_related('promotion', 'installer')
            .get(id=participation_id)
        )
    except Participation.DoesNotExist:
        raise ParticipationNotFoundError(f"Participation {participation_id} not found")

    if participation.status != ParticipationStatus.COMPLETED:
        raise InvalidRewardTransitionError("Only completed participations have rewards to settle")

    allowed = REWARD_TRANSITIONS.get(participation.reward_status, set())
    if reward_status not in allowed:
        raise InvalidRewardTransitionError(
            f"Cannot move reward from {participation.reward_status} to {reward_status}"
        )

    previous = participation.reward_status
    participation.reward_status = reward_status
    participation.reward_processed_at = timezone.now()
    participation.reward_processed_by = admin
    participation.version += 1
    participation.save(update_fields=[
        'reward_status',
        'reward_processed_at',
        'reward_processed_by',
        'version',
        'updated_at',
    ])

    logger.info(
        "Reward for participation %s moved %s -> %s by %s",
        participation.pk, previous, reward_status, admin.id,
    )
    notify_reward_status(participation)
    return participation


def expire_participations(now: Optional[datetime] = None) -> int:
    """
    Mark active participations of ended promotions as expired.

    Returns:
        Number of participations expired
    """
    now = now or timezone.now()
    count = (
        Participation.objects
        .filter(status=ParticipationStatus.ACTIVE, promotion__end_date__lt=now)
        .update(status=ParticipationStatus.EXPIRED, version=F('version') + 1, updated_at=now)
    )
    if count:
        logger.info("Expired %s participation(s)", count)
    return count
