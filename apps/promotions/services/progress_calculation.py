"""
Promotion progress calculation.

Turns an installer's valid serials into a progress snapshot for one
participation, then folds that snapshot into the stored participation:

- `evaluate_progress` is pure: no database access, no clock.
- `compute_progress` loads the inputs, evaluates, and persists the
  result with a version-checked write.

Each promotion type maps to exactly one calculator in `_CALCULATORS`.
The table is checked against `PromotionType` at import time, so adding
a type without a calculator fails loudly at startup.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from apps.notifications.services import notify_promotion_completed
from apps.promotions.models import (
    Participation,
    ParticipationStatus,
    Promotion,
    PromotionType,
)
from apps.serials.models import SerialRecord, SerialStatus
from apps.serials.services.serial_queries import list_valid_serials

from .exceptions import (
    ConfigurationError,
    ConflictError,
    ParticipationNotFoundError,
)
from .promotion_queries import get_promotion, get_participation, upsert_participation

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')
TWO_PLACES = Decimal('0.01')


@dataclass(frozen=True)
class Measurement:
    """Raw output of a per-type calculator."""
    current: int
    rating: Optional[Decimal] = None
    meets_quality: Optional[bool] = None
    cities: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ProgressResult:
    """Progress of one participation at one point in time."""
    current: int
    target: int
    percentage: Decimal
    is_completed: bool
    valid_serials: int
    rating: Optional[Decimal] = None
    meets_quality: Optional[bool] = None
    cities: Tuple[str, ...] = ()


Calculator = Callable[[Promotion, Sequence[SerialRecord]], Measurement]

_CALCULATORS: Dict[str, Calculator] = {}


def _measures(*promotion_types: PromotionType):
    def register(func: Calculator) -> Calculator:
        for promotion_type in promotion_types:
            _CALCULATORS[promotion_type.value] = func
        return func
    return register


@_measures(PromotionType.INSTALLATION_TARGET, PromotionType.MILESTONE)
def _count_installations(promotion: Promotion, serials: Sequence[SerialRecord]) -> Measurement:
    return Measurement(current=len(serials))


@_measures(PromotionType.QUALITY_TARGET)
def _measure_quality(promotion: Promotion, serials: Sequence[SerialRecord]) -> Measurement:
    threshold = promotion.target_rating_threshold
    if threshold is None:
        raise ConfigurationError(
            f"Promotion {promotion.pk} is a quality target without a rating threshold"
        )

    ratings = [s.customer_rating for s in serials if s.customer_rating is not None]
    if ratings:
        rating = (Decimal(sum(ratings)) / len(ratings)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    else:
        rating = Decimal('0.00')

    return Measurement(
        current=len(serials),
        rating=rating,
        meets_quality=rating >= Decimal(threshold),
    )


@_measures(PromotionType.GEOGRAPHIC_EXPANSION)
def _count_cities(promotion: Promotion, serials: Sequence[SerialRecord]) -> Measurement:
    cities = {}
    for serial in serials:
        city = (serial.city or '').strip()
        if city:
            cities.setdefault(city.casefold(), city)
    return Measurement(current=len(cities), cities=tuple(sorted(cities.values())))


_missing = set(PromotionType.values) - set(_CALCULATORS)
if _missing:
    raise ImproperlyConfigured(
        f"No progress calculator for promotion types: {', '.join(sorted(_missing))}"
    )


def counted_serials(
    serials: Sequence[SerialRecord],
    counting_start_date: datetime,
) -> List[SerialRecord]:
    """Serials installed on or after the counting start that are not inactive."""
    return [
        serial for serial in serials
        if serial.installation_date >= counting_start_date
        and serial.status != SerialStatus.INACTIVE
    ]


def percentage_of(current: int, target: int) -> Decimal:
    if current <= 0:
        return Decimal('0.00')
    ratio = Decimal(current) / Decimal(target) * HUNDRED
    return min(HUNDRED, ratio).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def evaluate_progress(
    *,
    participation: Participation,
    promotion: Promotion,
    serials: Sequence[SerialRecord],
) -> ProgressResult:
    """
    Evaluate a participation's progress against the installer's serials.

    Args:
        participation: Participation being evaluated (supplies counting start)
        promotion: Promotion definition
        serials: Installer's serials; filtered here by date and status

    Returns:
        ProgressResult

    Raises:
        ConfigurationError: If the promotion target cannot be evaluated
    """
    target = promotion.target_value
    if target is None or target <= 0:
        raise ConfigurationError(f"Promotion {promotion.pk} has non-positive target {target}")

    calculator = _CALCULATORS.get(str(promotion.type))
    if calculator is None:
        raise ConfigurationError(f"Promotion {promotion.pk} has unknown type {promotion.type!r}")

    counted = counted_serials(serials, participation.counting_start_date)
    measurement = calculator(promotion, counted)

    return ProgressResult(
        current=measurement.current,
        target=target,
        percentage=percentage_of(measurement.current, target),
        is_completed=measurement.current >= target and measurement.meets_quality is not False,
        valid_serials=len(counted),
        rating=measurement.rating,
        meets_quality=measurement.meets_quality,
        cities=measurement.cities,
    )


def _snapshot(participation: Participation) -> tuple:
    return (
        participation.status,
        participation.progress_current,
        participation.progress_target,
        participation.progress_percentage,
        participation.progress_valid_serials,
        participation.progress_rating,
        participation.progress_meets_quality,
        participation.completed_at,
    )


def apply_progress(
    participation: Participation,
    promotion: Promotion,
    result: ProgressResult,
    now: datetime,
) -> Optional[str]:
    """
    Fold a progress result into a participation in memory.

    Active participations expire once the promotion has ended, or complete
    when the target is met. Completed participations keep their first
    completion time. Expired participations are frozen.

    A count lower than the stored one is taken as is: callers load the
    participation before the serials, and a concurrent writer bumps the
    version, so a stale count fails in upsert_participation instead.

    Returns:
        The status the participation transitioned to, or None
    """
    if participation.status == ParticipationStatus.EXPIRED:
        return None

    if participation.status == ParticipationStatus.ACTIVE and now > promotion.end_date:
        participation.status = ParticipationStatus.EXPIRED
        return ParticipationStatus.EXPIRED

    transition = None
    if participation.status == ParticipationStatus.ACTIVE and result.is_completed:
        participation.status = ParticipationStatus.COMPLETED
        transition = ParticipationStatus.COMPLETED

    if participation.status == ParticipationStatus.COMPLETED and participation.completed_at is None:
        participation.completed_at = now

    participation.progress_current = result.current
    participation.progress_target = result.target
    participation.progress_percentage = result.percentage
    participation.progress_valid_serials = result.valid_serials
    participation.progress_rating = result.rating
    participation.progress_meets_quality = result.meets_quality
    return transition


def recompute_participation(
    participation: Participation,
    promotion: Promotion,
    serials: Sequence[SerialRecord],
    now: datetime,
) -> ProgressResult:
    """
    Evaluate and persist one participation.

    Nothing is written when the snapshot is unchanged, so repeated calls
    with the same inputs leave the row (and its version) untouched.

    Raises:
        ConfigurationError: If the promotion cannot be evaluated
        ConflictError: If a concurrent write won
    """
    result = evaluate_progress(participation=participation, promotion=promotion, serials=serials)

    before = _snapshot(participation)
    transition = apply_progress(participation, promotion, result, now)
    if _snapshot(participation) == before:
        return result

    upsert_participation(participation)

    if transition == ParticipationStatus.COMPLETED:
        logger.info(
            "Installer %s completed promotion %s (%s/%s)",
            participation.installer_id, promotion.pk, result.current, result.target,
        )
        notify_promotion_completed(participation)
    elif transition == ParticipationStatus.EXPIRED:
        logger.info(
            "Participation %s expired with promotion %s",
            participation.pk, promotion.pk,
        )

    return result


def compute_progress(
    *,
    installer_id: UUID,
    promotion_id: UUID,
    now: Optional[datetime] = None,
) -> Participation:
    """
    Recompute and persist an installer's progress in one promotion.

    Args:
        installer_id: Installer UUID
        promotion_id: Promotion UUID
        now: Evaluation time (defaults to now)

    Returns:
        The participation with its refreshed progress snapshot

    Raises:
        PromotionNotFoundError: If promotion doesn't exist
        ParticipationNotFoundError: If installer hasn't joined the promotion
        ConfigurationError: If the promotion cannot be evaluated
        ConflictError: If a concurrent write won
    """
    now = now or timezone.now()
    promotion = get_promotion(promotion_id)

    participation = get_participation(installer_id, promotion_id)
    if participation is None:
        raise ParticipationNotFoundError(
            f"Installer {installer_id} is not participating in promotion {promotion_id}"
        )

    serials = list_valid_serials(installer_id)
    recompute_participation(participation, promotion, serials, now)
    return participation


def refresh_installer_progress(
    *,
    installer_id: UUID,
    now: Optional[datetime] = None,
) -> List[Participation]:
    """
    Recompute every non-expired participation of an installer.

    A participation that loses a concurrent write or has a broken
    promotion definition is logged and skipped; the others still refresh.

    Returns:
        Participations that were evaluated
    """
    now = now or timezone.now()
    participations = list(
        Participation.objects
        .select_related('promotion')
        .filter(installer_id=installer_id)
        .exclude(status=ParticipationStatus.EXPIRED)
    )
    if not participations:
        return []

    serials = list_valid_serials(installer_id)
    refreshed = []
    for participation in participations:
        try:
            recompute_participation(participation, participation.promotion, serials, now)
        except ConflictError:
            logger.warning(
                "Skipped progress refresh for participation %s: concurrent update",
                participation.pk,
            )
            continue
        except ConfigurationError:
            logger.exception(
                "Promotion %s cannot be evaluated", participation.promotion_id,
            )
            continue
        refreshed.append(participation)

    return refreshed
