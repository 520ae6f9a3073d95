import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.promotions.models import Promotion, Participation, PromotionType


@pytest.fixture
def make_promotion(db, program_admin):
    """
    Factory for promotions running from two days ago to five days ahead.

    Usage:
        make_promotion(type=PromotionType.QUALITY_TARGET, target_rating_threshold=Decimal('4.0'))
    """
    def _make(**kwargs):
        now = timezone.now()
        defaults = {
            'title': 'Install 10 inverters',
            'description': 'Install 10 inverters this week',
            'type': PromotionType.INSTALLATION_TARGET,
            'target_value': 10,
            'reward_amount': Decimal('10000.00'),
            'start_date': now - timedelta(days=2),
            'end_date': now + timedelta(days=5),
            'created_by': program_admin,
        }
        defaults.update(kwargs)
        return Promotion.objects.create(**defaults)

    return _make


@pytest.fixture
def promotion(make_promotion):
    """Active installation target promotion with target 10."""
    return make_promotion()


@pytest.fixture
def make_participation(db):
    """
    Factory for participations that joined `hours_ago` hours ago.

    Usage:
        make_participation(installer, promotion, hours_ago=24)
    """
    def _make(installer, promotion, hours_ago=24, **kwargs):
        joined_at = timezone.now() - timedelta(hours=hours_ago)
        return Participation.objects.create(
            installer=installer,
            promotion=promotion,
            joined_at=joined_at,
            counting_start_date=joined_at,
            progress_target=promotion.target_value,
            **kwargs,
        )

    return _make


@pytest.fixture
def participation(approved_installer, promotion, make_participation):
    return make_participation(approved_installer, promotion)
