import pytest
from datetime import timedelta
from uuid import uuid4
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.promotions.models import Promotion, Participation, ParticipationStatus, PromotionType, RewardStatus


@pytest.mark.django_db
class TestPromotionCRUD:
    """Tests for /api/promotions/"""

    def test_list_promotions(self, approved_client, promotion):
        url = reverse('promotions:promotion-list')
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['status'] == 'active'

    def test_filter_expired(self, approved_client, promotion, make_promotion):
        now = timezone.now()
        make_promotion(title='Old', start_date=now - timedelta(days=9), end_date=now - timedelta(days=2))

        url = reverse('promotions:promotion-list')
        response = approved_client.get(url, {'status': 'expired'})

        assert response.status_code == status.HTTP_200_OK
        assert [p['title'] for p in response.data['results']] == ['Old']

    def test_admin_creates_promotion(self, admin_client, program_admin):
        now = timezone.now()
        url = reverse('promotions:promotion-list')
        data = {
            'title': 'Quality drive',
            'description': 'Keep customers happy',
            'type': PromotionType.QUALITY_TARGET,
            'target_value': 5,
            'target_rating_threshold': '4.50',
            'reward_amount': '7500.00',
            'start_date': now.isoformat(),
            'end_date': (now + timedelta(days=30)).isoformat(),
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        promotion = Promotion.objects.get(id=response.data['id'])
        assert promotion.created_by == program_admin

    def test_quality_target_needs_threshold(self, admin_client):
        now = timezone.now()
        url = reverse('promotions:promotion-list')
        data = {
            'title': 'Quality drive',
            'description': 'Keep customers happy',
            'type': PromotionType.QUALITY_TARGET,
            'target_value': 5,
            'reward_amount': '7500.00',
            'start_date': now.isoformat(),
            'end_date': (now + timedelta(days=30)).isoformat(),
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'target_rating_threshold' in response.data

    def test_end_before_start_rejected(self, admin_client):
        now = timezone.now()
        url = reverse('promotions:promotion-list')
        data = {
            'title': 'Backwards',
            'description': 'Ends before it starts',
            'type': PromotionType.INSTALLATION_TARGET,
            'target_value': 5,
            'reward_amount': '1000.00',
            'start_date': now.isoformat(),
            'end_date': (now - timedelta(days=1)).isoformat(),
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_installer_cannot_create(self, approved_client):
        url = reverse('promotions:promotion-list')
        response = approved_client.post(url, {'title': 'Nope'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unauthenticated(self, api_client):
        url = reverse('promotions:promotion-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestJoinAndProgress:
    """Tests for join / progress / mine / dashboard actions"""

    def test_join(self, approved_client, approved_installer, promotion):
        url = reverse('promotions:promotion-join', kwargs={'pk': promotion.id})
        response = approved_client.post(url)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == ParticipationStatus.ACTIVE
        assert response.data['progress']['target'] == 10
        assert Participation.objects.filter(installer=approved_installer, promotion=promotion).exists()

    def test_join_twice_conflicts(self, approved_client, promotion):
        url = reverse('promotions:promotion-join', kwargs={'pk': promotion.id})
        approved_client.post(url)
        response = approved_client.post(url)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_join_unknown_promotion(self, approved_client):
        url = reverse('promotions:promotion-join', kwargs={'pk': uuid4()})
        response = approved_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_join_not_eligible(self, approved_client, make_promotion):
        gated = make_promotion(min_installations=50)
        url = reverse('promotions:promotion-join', kwargs={'pk': gated.id})
        response = approved_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_progress(self, approved_client, approved_installer, promotion, participation, make_serial):
        for _ in range(3):
            make_serial(approved_installer)

        url = reverse('promotions:promotion-progress', kwargs={'pk': promotion.id})
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['progress']['current'] == 3
        assert response.data['progress']['percentage'] == '30.00'
        assert response.data['reward_claimed'] is False

    def test_progress_without_joining(self, approved_client, promotion):
        url = reverse('promotions:promotion-progress', kwargs={'pk': promotion.id})
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_mine(self, approved_client, approved_installer, promotion, participation):
        url = reverse('promotions:promotion-mine')
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['is_participating'] is True
        assert response.data[0]['participation']['id'] == str(participation.id)

    def test_dashboard(self, approved_client, promotion):
        url = reverse('promotions:promotion-dashboard')
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['available_promotions'] == 1
        assert response.data['active_participations'] == 0


@pytest.mark.django_db
class TestAdminPromotionActions:
    """Tests for analytics and reward settlement"""

    def test_analytics_admin_only(self, approved_client, admin_client, promotion, participation):
        url = reverse('promotions:promotion-analytics', kwargs={'pk': promotion.id})

        assert approved_client.get(url).status_code == status.HTTP_403_FORBIDDEN

        response = admin_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_participants'] == 1

    def test_reward_settlement(self, admin_client, participation):
        Participation.objects.filter(pk=participation.pk).update(
            status=ParticipationStatus.COMPLETED,
            completed_at=timezone.now(),
        )
        url = reverse('promotions:participation-reward', kwargs={'pk': participation.id})

        response = admin_client.post(url, {'reward_status': RewardStatus.APPROVED})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['reward_status'] == RewardStatus.APPROVED

    def test_reward_invalid_transition(self, admin_client, participation):
        url = reverse('promotions:participation-reward', kwargs={'pk': participation.id})
        response = admin_client.post(url, {'reward_status': RewardStatus.PAID})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_reward_unknown_participation(self, admin_client):
        url = reverse('promotions:participation-reward', kwargs={'pk': uuid4()})
        response = admin_client.post(url, {'reward_status': RewardStatus.APPROVED})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_installer_cannot_settle_reward(self, approved_client, participation):
        url = reverse('promotions:participation-reward', kwargs={'pk': participation.id})
        response = approved_client.post(url, {'reward_status': RewardStatus.APPROVED})

        assert response.status_code == status.HTTP_403_FORBIDDEN
