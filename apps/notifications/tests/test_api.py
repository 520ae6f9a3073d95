import pytest
from django.urls import reverse
from rest_framework import status
from apps.notifications.models import NotificationType
from apps.notifications.services import notify


@pytest.mark.django_db
class TestNotificationAPI:
    """Tests for /api/notifications/"""

    @pytest.fixture
    def notification(self, approved_installer):
        return notify(approved_installer, NotificationType.GENERAL, 'Hello', 'Hello there')

    def test_list(self, approved_client, notification):
        url = reverse('notifications:notification-list')
        response = approved_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['title'] == 'Hello'

    def test_list_is_private(self, admin_client, notification):
        url = reverse('notifications:notification-list')
        response = admin_client.get(url)

        assert response.data['count'] == 0

    def test_unread_count_and_read(self, approved_client, notification):
        count_url = reverse('notifications:notification-unread-count')
        assert approved_client.get(count_url).data['count'] == 1

        read_url = reverse('notifications:notification-read', kwargs={'pk': notification.id})
        response = approved_client.post(read_url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_read'] is True

        assert approved_client.get(count_url).data['count'] == 0

    def test_read_all(self, approved_client, approved_installer, notification):
        notify(approved_installer, NotificationType.GENERAL, 'Again', 'Another one')

        url = reverse('notifications:notification-read-all')
        response = approved_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['marked'] == 2

    def test_filter_unread(self, approved_client, notification):
        approved_client.post(reverse('notifications:notification-read', kwargs={'pk': notification.id}))

        url = reverse('notifications:notification-list')
        response = approved_client.get(url, {'unread': 'true'})

        assert response.data['count'] == 0
