from rest_framework import serializers
from .models import User, InstallerStatus


class UserSerializer(serializers.ModelSerializer):
    """Profile serializer for the authenticated user."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'phone',
            'city',
            'role',
            'status',
            'loyalty_card_id',
            'average_rating',
            'created_at',
            'last_login',
        ]
        read_only_fields = [
            'id',
            'email',
            'role',
            'status',
            'loyalty_card_id',
            'average_rating',
            'created_at',
            'last_login',
        ]


class InstallerMinimalSerializer(serializers.ModelSerializer):
    """Minimal installer info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'loyalty_card_id', 'city']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class InstallerStatusInputSerializer(serializers.Serializer):
    """Validate admin input for installer review."""

    status = serializers.ChoiceField(choices=InstallerStatus.choices)
