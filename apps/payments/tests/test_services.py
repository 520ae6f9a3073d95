"""
Service layer tests for the payment workflow.

Tests cover:
- Milestone payment requests through the gate
- Admin transitions and their guards
- Installer cancellation
- Status notifications
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.notifications.models import Notification, NotificationType
from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.payments.services import (
    get_milestone_overview,
    request_milestone_payment,
    approve_payment,
    reject_payment,
    mark_payment_paid,
    cancel_payment,
    list_payments_by_type,
)
from apps.payments.services.exceptions import (
    PaymentNotFoundError,
    MilestonePaymentNotAllowedError,
    InvalidPaymentTransitionError,
)


@pytest.mark.django_db
class TestRequestMilestonePayment:

    def test_request_creates_pending_payment(self, approved_installer, with_installations):
        with_installations(approved_installer, 23)

        payment = request_milestone_payment(installer=approved_installer)

        assert payment.status == PaymentStatus.PENDING
        assert payment.payment_type == PaymentType.MILESTONE
        assert payment.milestone_number == 2
        assert payment.inverter_count == 23
        assert payment.amount == Decimal('5000')
        assert payment.currency == 'PKR'

    def test_no_milestone_reached(self, approved_installer, with_installations):
        with_installations(approved_installer, 9)

        with pytest.raises(MilestonePaymentNotAllowedError):
            request_milestone_payment(installer=approved_installer)

    def test_second_request_for_same_tier_blocked(self, approved_installer, with_installations):
        with_installations(approved_installer, 10)
        request_milestone_payment(installer=approved_installer)

        with pytest.raises(MilestonePaymentNotAllowedError):
            request_milestone_payment(installer=approved_installer)

        assert Payment.objects.filter(installer=approved_installer).count() == 1

    def test_rejected_tier_can_be_requested_again(self, approved_installer, program_admin, with_installations):
        with_installations(approved_installer, 30)
        first = request_milestone_payment(installer=approved_installer)
        reject_payment(payment_id=first.id, admin=program_admin, reason='Missing bank details')

        second = request_milestone_payment(installer=approved_installer)

        assert second.milestone_number == 3
        assert second.status == PaymentStatus.PENDING

    def test_paid_tier_cannot_be_requested_again(self, approved_installer, make_payment, with_installations):
        with_installations(approved_installer, 10)
        make_payment(approved_installer, milestone_number=1, status=PaymentStatus.PAID)

        with pytest.raises(MilestonePaymentNotAllowedError):
            request_milestone_payment(installer=approved_installer)

    def test_overview(self, approved_installer, with_installations, make_payment):
        with_installations(approved_installer, 23)
        make_payment(approved_installer, milestone_number=1, status=PaymentStatus.PAID)

        overview = get_milestone_overview(installer=approved_installer)

        assert overview['completed'] == 2
        assert overview['next_milestone_at'] == 7
        assert overview['has_unclaimed_milestone'] is True
        assert overview['can_request'] is True
        assert overview['claimed_milestones'] == [1]
        assert overview['default_amount'] == Decimal('5000')

    def test_list_payments_by_type(self, approved_installer, make_payment):
        make_payment(approved_installer, milestone_number=1)
        make_payment(approved_installer, milestone_number=None, payment_type=PaymentType.BONUS)

        assert list_payments_by_type(approved_installer.id, PaymentType.MILESTONE).count() == 1


@pytest.mark.django_db
class TestPaymentWorkflow:

    def test_approve_then_pay(self, approved_installer, program_admin, make_payment):
        payment = make_payment(approved_installer)

        approved = approve_payment(payment_id=payment.id, admin=program_admin)
        assert approved.status == PaymentStatus.APPROVED
        assert approved.approved_by == program_admin
        assert approved.approved_at is not None

        paid = mark_payment_paid(payment_id=payment.id, admin=program_admin, transaction_id='TX-1')
        assert paid.status == PaymentStatus.PAID
        assert paid.paid_by == program_admin
        assert paid.transaction_id == 'TX-1'

    def test_status_changes_notify_installer(self, approved_installer, program_admin, make_payment):
        payment = make_payment(approved_installer)

        approve_payment(payment_id=payment.id, admin=program_admin)
        mark_payment_paid(payment_id=payment.id, admin=program_admin)

        notifications = Notification.objects.filter(
            recipient=approved_installer,
            type=NotificationType.PAYMENT_STATUS,
        )
        assert notifications.count() == 2
        assert {n.data['status'] for n in notifications} == {PaymentStatus.APPROVED, PaymentStatus.PAID}

    def test_cannot_pay_pending_payment(self, approved_installer, program_admin, make_payment):
        payment = make_payment(approved_installer)

        with pytest.raises(InvalidPaymentTransitionError):
            mark_payment_paid(payment_id=payment.id, admin=program_admin)

    def test_cannot_approve_twice(self, approved_installer, program_admin, make_payment):
        payment = make_payment(approved_installer)
        approve_payment(payment_id=payment.id, admin=program_admin)

        with pytest.raises(InvalidPaymentTransitionError):
            approve_payment(payment_id=payment.id, admin=program_admin)

    def test_reject_approved_payment(self, approved_installer, program_admin, make_payment):
        payment = make_payment(approved_installer, status=PaymentStatus.APPROVED)

        rejected = reject_payment(payment_id=payment.id, admin=program_admin, reason='Duplicate')

        assert rejected.status == PaymentStatus.REJECTED
        assert rejected.rejection_reason == 'Duplicate'
        assert rejected.rejected_by == program_admin

    def test_cannot_reject_paid_payment(self, approved_installer, program_admin, make_payment):
        payment = make_payment(approved_installer, status=PaymentStatus.PAID)

        with pytest.raises(InvalidPaymentTransitionError):
            reject_payment(payment_id=payment.id, admin=program_admin, reason='Too late')

    def test_duplicate_transaction_id(self, approved_installer, program_admin, make_payment):
        first = make_payment(approved_installer, milestone_number=1, status=PaymentStatus.APPROVED)
        second = make_payment(approved_installer, milestone_number=2, status=PaymentStatus.APPROVED)
        mark_payment_paid(payment_id=first.id, admin=program_admin, transaction_id='TX-1')

        with pytest.raises(InvalidPaymentTransitionError):
            mark_payment_paid(payment_id=second.id, admin=program_admin, transaction_id='TX-1')

    def test_unknown_payment(self, program_admin):
        with pytest.raises(PaymentNotFoundError):
            approve_payment(payment_id=uuid4(), admin=program_admin)


@pytest.mark.django_db
class TestCancelPayment:

    def test_cancel_own_pending(self, approved_installer, make_payment):
        payment = make_payment(approved_installer)

        cancelled = cancel_payment(payment_id=payment.id, installer=approved_installer)

        assert cancelled.status == PaymentStatus.CANCELLED

    def test_cannot_cancel_someone_elses(self, approved_installer, other_installer, make_payment):
        payment = make_payment(approved_installer)

        with pytest.raises(PaymentNotFoundError):
            cancel_payment(payment_id=payment.id, installer=other_installer)

    def test_cannot_cancel_approved(self, approved_installer, make_payment):
        payment = make_payment(approved_installer, status=PaymentStatus.APPROVED)

        with pytest.raises(InvalidPaymentTransitionError):
            cancel_payment(payment_id=payment.id, installer=approved_installer)
