"""Promotion and participation lookups used by the progress calculation."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db.models import F, QuerySet
from django.utils import timezone

from apps.promotions.models import Promotion, Participation

from .exceptions import PromotionNotFoundError, ConflictError

# Fields rewritten by a progress recompute
SNAPSHOT_FIELDS = (
    'status',
    'progress_current',
    'progress_target',
    'progress_percentage',
    'progress_valid_serials',
    'progress_rating',
    'progress_meets_quality',
    'completed_at',
)


def get_promotion(promotion_id: UUID) -> Promotion:
    """
    Fetch a promotion by ID.

    Raises:
        PromotionNotFoundError: If promotion doesn't exist
    """
    try:
        return Promotion.objects.get(id=promotion_id)
    except Promotion.DoesNotExist:
        raise PromotionNotFoundError(f"Promotion {promotion_id} not found")


def list_active_promotions(now: Optional[datetime] = None) -> QuerySet:
    """Promotions currently between their start and end dates."""
    return Promotion.objects.active(now).order_by('end_date', '-created_at')


def get_participation(installer_id: UUID, promotion_id: UUID) -> Optional[Participation]:
    """Return the installer's participation in a promotion, or None."""
    return (
        Participation.objects
        .select_related('promotion')
        .filter(installer_id=installer_id, promotion_id=promotion_id)
        .first()
    )


def upsert_participation(participation: Participation) -> Participation:
    """
    Persist a participation's progress snapshot.

    New rows are inserted. Existing rows are written with a conditional
    update keyed by the version the caller read, so two recomputes racing
    on the same row cannot both win.

    Raises:
        ConflictError: If the row changed since it was read
    """
    if participation._state.adding:
        participation.save(force_insert=True)
        return participation

    updates = {name: getattr(participation, name) for name in SNAPSHOT_FIELDS}
    rows = (
        Participation.objects
        .filter(pk=participation.pk, version=participation.version)
        .update(version=F('version') + 1, updated_at=timezone.now(), **updates)
    )
    if rows == 0:
        raise ConflictError(
            f"Participation {participation.pk} was modified concurrently"
        )

    participation.version += 1
    return participation
