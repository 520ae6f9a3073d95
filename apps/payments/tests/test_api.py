import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.payments.models import Payment, PaymentStatus


@pytest.mark.django_db
class TestMilestoneEndpoints:
    """Tests for /api/payments/milestones/"""

    def test_milestone_overview(self, approved_client, approved_installer, with_installations):
        with_installations(approved_installer, 23)

        url = reverse('payments:payment-milestones')
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['completed'] == 2
        assert response.data['current_progress'] == 3
        assert response.data['progress_percentage'] == 30
        assert response.data['next_milestone_at'] == 7
        assert response.data['can_request'] is True

    def test_request_milestone_payment(self, approved_client, approved_installer, with_installations):
        with_installations(approved_installer, 10)

        url = reverse('payments:payment-milestone-request')
        response = approved_client.post(url, {'payment_method': 'mobile_wallet'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['milestone_number'] == 1
        assert response.data['payment_method'] == 'mobile_wallet'
        assert response.data['status'] == PaymentStatus.PENDING

    def test_request_blocked_by_gate(self, approved_client, approved_installer, with_installations):
        with_installations(approved_installer, 4)

        url = reverse('payments:payment-milestone-request')
        response = approved_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data


@pytest.mark.django_db
class TestPaymentEndpoints:
    """Tests for /api/payments/ and admin actions"""

    def test_installer_sees_only_own_payments(self, approved_client, approved_installer, other_installer, make_payment):
        make_payment(approved_installer)
        make_payment(other_installer)

        url = reverse('payments:payment-list')
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_admin_filters_by_status(self, admin_client, approved_installer, make_payment):
        make_payment(approved_installer, milestone_number=1)
        make_payment(approved_installer, milestone_number=2, status=PaymentStatus.PAID)

        url = reverse('payments:payment-list')
        response = admin_client.get(url, {'status': PaymentStatus.PAID})

        assert response.data['count'] == 1

    def test_admin_approves(self, admin_client, approved_installer, make_payment):
        payment = make_payment(approved_installer)

        url = reverse('payments:payment-approve', kwargs={'pk': payment.id})
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == PaymentStatus.APPROVED

    def test_installer_cannot_approve(self, approved_client, approved_installer, make_payment):
        payment = make_payment(approved_installer)

        url = reverse('payments:payment-approve', kwargs={'pk': payment.id})
        response = approved_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_reject_requires_reason(self, admin_client, approved_installer, make_payment):
        payment = make_payment(approved_installer)

        url = reverse('payments:payment-reject', kwargs={'pk': payment.id})
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_mark_paid_invalid_transition(self, admin_client, approved_installer, make_payment):
        payment = make_payment(approved_installer)

        url = reverse('payments:payment-mark-paid', kwargs={'pk': payment.id})
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_approve_unknown_payment(self, admin_client):
        url = reverse('payments:payment-approve', kwargs={'pk': uuid4()})
        response = admin_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cancel(self, approved_client, approved_installer, make_payment):
        payment = make_payment(approved_installer)

        url = reverse('payments:payment-cancel', kwargs={'pk': payment.id})
        response = approved_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert Payment.objects.get(pk=payment.pk).status == PaymentStatus.CANCELLED
