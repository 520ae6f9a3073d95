from rest_framework import serializers
from .models import Payment, PaymentStatus, PaymentType, PaymentMethod
from apps.accounts.serializers import InstallerMinimalSerializer


class PaymentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for payment filtering.

    Query Parameters:
        status (str): Filter by payment status
        payment_type (str): Filter by payment type
        installer (UUID): Filter by installer (admin only)
    """

    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)
    payment_type = serializers.ChoiceField(choices=PaymentType.choices, required=False)
    installer = serializers.UUIDField(required=False)


class PaymentSerializer(serializers.ModelSerializer):
    """Read serializer for payments."""

    installer = InstallerMinimalSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'installer',
            'amount',
            'currency',
            'payment_type',
            'status',
            'description',
            'milestone_number',
            'inverter_count',
            'promotion',
            'payment_method',
            'transaction_id',
            'approved_at',
            'rejected_at',
            'rejection_reason',
            'paid_at',
            'notes',
            'requested_at',
        ]
        read_only_fields = fields


class MilestoneOverviewSerializer(serializers.Serializer):
    total_installations = serializers.IntegerField()
    completed = serializers.IntegerField()
    current_progress = serializers.IntegerField()
    progress_percentage = serializers.IntegerField()
    next_milestone_at = serializers.IntegerField(allow_null=True)
    has_unclaimed_milestone = serializers.BooleanField()
    can_request = serializers.BooleanField()
    default_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    claimed_milestones = serializers.ListField(child=serializers.IntegerField())


class MilestoneRequestSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class ApprovePaymentSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class RejectPaymentSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)


class MarkPaidSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False)
