import pytest
from decimal import Decimal
from apps.payments.models import Payment, PaymentStatus, PaymentType


@pytest.fixture
def make_payment(db):
    """
    Factory for payments.

    Usage:
        make_payment(installer, milestone_number=3, status=PaymentStatus.PAID)
    """
    def _make(installer, milestone_number=1, status=PaymentStatus.PENDING, **kwargs):
        defaults = {
            'amount': Decimal('5000.00'),
            'payment_type': PaymentType.MILESTONE,
            'description': f'Milestone {milestone_number} reward',
            'milestone_number': milestone_number,
        }
        defaults.update(kwargs)
        return Payment.objects.create(installer=installer, status=status, **defaults)

    return _make


@pytest.fixture
def with_installations(make_serial):
    """Give an installer `count` valid installations."""
    def _add(installer, count):
        return [make_serial(installer) for _ in range(count)]

    return _add
