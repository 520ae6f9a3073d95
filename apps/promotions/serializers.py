from rest_framework import serializers
from .models import Promotion, Participation, PromotionType, RewardStatus
from apps.accounts.serializers import InstallerMinimalSerializer


class PromotionSerializer(serializers.ModelSerializer):
    """Main serializer for promotions."""

    status = serializers.SerializerMethodField()
    days_remaining = serializers.IntegerField(read_only=True)
    participant_count = serializers.SerializerMethodField()

    class Meta:
        model = Promotion
        fields = [
            'id',
            'title',
            'description',
            'type',
            'target_type',
            'target_value',
            'target_period',
            'target_rating_threshold',
            'min_installations',
            'installer_status',
            'new_installers_only',
            'reward_amount',
            'reward_description',
            'reward_type',
            'currency',
            'start_date',
            'end_date',
            'status',
            'days_remaining',
            'participant_count',
            'created_at',
        ]
        read_only_fields = ['id', 'status', 'days_remaining', 'participant_count', 'created_at']

    def get_status(self, obj):
        return obj.get_status()

    def get_participant_count(self, obj):
        return obj.participations.count()

    def validate(self, attrs):
        start_date = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end_date = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start_date and end_date and start_date >= end_date:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})

        promotion_type = attrs.get('type', getattr(self.instance, 'type', None))
        threshold = attrs.get(
            'target_rating_threshold',
            getattr(self.instance, 'target_rating_threshold', None),
        )
        if promotion_type == PromotionType.QUALITY_TARGET and threshold is None:
            raise serializers.ValidationError(
                {'target_rating_threshold': 'Quality targets need a rating threshold'}
            )
        return attrs


class PromotionMinimalSerializer(serializers.ModelSerializer):
    """Minimal promotion info for nested serialization."""

    class Meta:
        model = Promotion
        fields = ['id', 'title', 'type', 'target_value', 'reward_amount', 'currency', 'end_date']
        read_only_fields = fields


class ProgressSerializer(serializers.Serializer):
    """Stored progress snapshot of a participation."""

    current = serializers.IntegerField(source='progress_current')
    target = serializers.IntegerField(source='progress_target')
    percentage = serializers.DecimalField(source='progress_percentage', max_digits=5, decimal_places=2)
    valid_serials = serializers.IntegerField(source='progress_valid_serials')
    rating = serializers.DecimalField(source='progress_rating', max_digits=3, decimal_places=2, allow_null=True)
    meets_quality = serializers.BooleanField(source='progress_meets_quality', allow_null=True)


class ParticipationSerializer(serializers.ModelSerializer):
    """Participation with its progress snapshot."""

    installer = InstallerMinimalSerializer(read_only=True)
    promotion = PromotionMinimalSerializer(read_only=True)
    progress = ProgressSerializer(source='*', read_only=True)
    reward_claimed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Participation
        fields = [
            'id',
            'installer',
            'promotion',
            'joined_at',
            'counting_start_date',
            'status',
            'progress',
            'completed_at',
            'reward_status',
            'reward_claimed',
            'reward_processed_at',
        ]
        read_only_fields = fields


class InstallerPromotionSerializer(serializers.Serializer):
    """A promotion as listed for one installer."""

    promotion = PromotionSerializer()
    participation = ParticipationSerializer(allow_null=True)
    is_participating = serializers.BooleanField()
    can_join = serializers.BooleanField()


class DashboardStatsSerializer(serializers.Serializer):
    available_promotions = serializers.IntegerField()
    active_participations = serializers.IntegerField()
    completed_promotions = serializers.IntegerField()
    total_rewards_earned = serializers.DecimalField(max_digits=14, decimal_places=2)


class PromotionAnalyticsSerializer(serializers.Serializer):
    promotion_id = serializers.UUIDField()
    title = serializers.CharField()
    total_participants = serializers.IntegerField()
    active = serializers.IntegerField()
    completed = serializers.IntegerField()
    expired = serializers.IntegerField()
    completion_rate = serializers.DecimalField(max_digits=6, decimal_places=2)
    average_progress = serializers.DecimalField(max_digits=6, decimal_places=2)
    rewards_paid = serializers.IntegerField()
    rewards_paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class RewardStatusInputSerializer(serializers.Serializer):
    """Validate a reward settlement request."""

    reward_status = serializers.ChoiceField(choices=RewardStatus.choices)
