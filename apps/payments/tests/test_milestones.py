"""
Tests for milestone evaluation and the payment eligibility gate.

Pure arithmetic is tested with plain values and unsaved payments;
the database is only needed for get_milestone_state.
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from django.test import override_settings
from django.utils import timezone

from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.promotions.models import Promotion, Participation, PromotionType
from apps.promotions.services import compute_progress
from apps.payments.services import (
    compute_milestone_state,
    claimed_milestone_numbers,
    get_milestone_state,
    can_request_milestone_payment,
    default_amount,
)


def milestone_payment(tier, status, payment_type=PaymentType.MILESTONE):
    return Payment(
        amount=Decimal('5000'),
        payment_type=payment_type,
        status=status,
        milestone_number=tier,
        description=f'Milestone {tier}',
    )


class TestComputeMilestoneState:

    def test_twenty_three_installations(self):
        state = compute_milestone_state(23, frozenset())

        assert state.completed == 2
        assert state.current_progress == 3
        assert state.progress_percentage == 30
        assert state.next_milestone_at == 7
        assert state.has_unclaimed_milestone is True

    def test_thirty_installations_with_tier_three_unclaimed(self):
        state = compute_milestone_state(30, {1, 2})

        assert state.completed == 3
        assert state.current_progress == 0
        assert state.progress_percentage == 0
        assert state.next_milestone_at is None
        assert state.has_unclaimed_milestone is True

    def test_thirty_installations_with_tier_three_claimed(self):
        state = compute_milestone_state(30, {3})

        assert state.has_unclaimed_milestone is False

    def test_no_installations(self):
        state = compute_milestone_state(0, frozenset())

        assert state.completed == 0
        assert state.next_milestone_at is None
        assert state.has_unclaimed_milestone is False

    def test_below_first_tier(self):
        state = compute_milestone_state(9, frozenset())

        assert state.completed == 0
        assert state.progress_percentage == 90
        assert state.next_milestone_at == 1
        assert state.has_unclaimed_milestone is False

    def test_only_current_tier_matters(self):
        # Tier 1 never paid, but tier 2 is the one on offer
        state = compute_milestone_state(25, {2})

        assert state.has_unclaimed_milestone is False

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            compute_milestone_state(-1, frozenset())


class TestClaimedMilestoneNumbers:

    def test_only_paid_milestone_payments_claim_a_tier(self):
        payments = [
            milestone_payment(1, PaymentStatus.PAID),
            milestone_payment(2, PaymentStatus.PENDING),
            milestone_payment(3, PaymentStatus.REJECTED),
            milestone_payment(4, PaymentStatus.CANCELLED),
            milestone_payment(5, PaymentStatus.PAID, payment_type=PaymentType.BONUS),
        ]

        assert claimed_milestone_numbers(payments) == {1}


class TestPaymentGate:

    def test_closed_without_unclaimed_tier(self):
        state = compute_milestone_state(8, frozenset())

        assert can_request_milestone_payment(state, []) is False

    def test_open_for_unclaimed_tier(self):
        state = compute_milestone_state(30, {1, 2})

        assert can_request_milestone_payment(state, []) is True

    @pytest.mark.parametrize('in_flight', [PaymentStatus.PENDING, PaymentStatus.APPROVED])
    def test_in_flight_request_blocks_tier(self, in_flight):
        payments = [milestone_payment(3, in_flight)]
        state = compute_milestone_state(30, claimed_milestone_numbers(payments))

        assert state.has_unclaimed_milestone is True
        assert can_request_milestone_payment(state, payments) is False

    @pytest.mark.parametrize('released', [PaymentStatus.REJECTED, PaymentStatus.CANCELLED])
    def test_rejected_request_reopens_tier(self, released):
        payments = [milestone_payment(3, released)]
        state = compute_milestone_state(30, claimed_milestone_numbers(payments))

        assert can_request_milestone_payment(state, payments) is True

    def test_pending_request_for_older_tier_does_not_block(self):
        payments = [milestone_payment(2, PaymentStatus.PENDING)]
        state = compute_milestone_state(30, claimed_milestone_numbers(payments))

        assert can_request_milestone_payment(state, payments) is True

    def test_gate_does_not_mutate_inputs(self):
        payments = [milestone_payment(3, PaymentStatus.PENDING)]
        state = compute_milestone_state(30, frozenset())

        can_request_milestone_payment(state, payments)

        assert payments[0].status == PaymentStatus.PENDING
        assert state.has_unclaimed_milestone is True

    def test_default_amount(self):
        assert default_amount() == Decimal('5000')

    @override_settings(MILESTONE_REWARD_AMOUNT=Decimal('7500'))
    def test_default_amount_is_configurable(self):
        assert default_amount() == Decimal('7500')


@pytest.mark.django_db
class TestGetMilestoneState:

    def test_counts_all_valid_installations(self, approved_installer, make_serial, with_installations):
        with_installations(approved_installer, 22)
        make_serial(approved_installer, hours_ago=24 * 400)
        make_serial(approved_installer, status='inactive')

        state = get_milestone_state(installer_id=approved_installer.id)

        assert state.total_installations == 23
        assert state.completed == 2
        assert state.next_milestone_at == 7

    def test_installation_before_promotion_join_counts_toward_milestone(
        self, approved_installer, make_serial, with_installations,
    ):
        now = timezone.now()
        promotion = Promotion.objects.create(
            title='Install 5',
            description='Install five',
            type=PromotionType.INSTALLATION_TARGET,
            target_value=5,
            reward_amount=Decimal('1000'),
            start_date=now - timedelta(days=5),
            end_date=now + timedelta(days=5),
        )
        Participation.objects.create(
            installer=approved_installer,
            promotion=promotion,
            joined_at=now - timedelta(hours=12),
        )
        with_installations(approved_installer, 9)
        make_serial(approved_installer, hours_ago=36)

        participation = compute_progress(installer_id=approved_installer.id, promotion_id=promotion.id)
        state = get_milestone_state(installer_id=approved_installer.id)

        assert participation.progress_current == 9
        assert state.total_installations == 10
        assert state.has_unclaimed_milestone is True

    def test_paid_tier_is_claimed(self, approved_installer, with_installations, make_payment):
        with_installations(approved_installer, 10)
        make_payment(approved_installer, milestone_number=1, status=PaymentStatus.PAID)

        state = get_milestone_state(installer_id=approved_installer.id)

        assert state.completed == 1
        assert state.has_unclaimed_milestone is False
