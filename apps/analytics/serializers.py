"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting
"""

from rest_framework import serializers
from .analytics import VALID_METRICS


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class DateRangeQuerySerializer(serializers.Serializer):
    """
    Validate date range query parameters.

    Used by: overview, installations_timeseries

    Query Parameters:
        start_date (date): Start of date range
        end_date (date): End of date range
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start = attrs.get('start_date')
        end = attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({
                'start_date': 'Start date must be before end date'
            })
        return attrs


class TimeseriesQuerySerializer(DateRangeQuerySerializer):
    """
    Query Parameters:
        installer_id (UUID): Limit to one installer
        start_date, end_date (date): Date range
    """

    installer_id = serializers.UUIDField(required=False)


class TopInstallersQuerySerializer(serializers.Serializer):
    """
    Validate query parameters for top installers endpoint.

    Query Parameters:
        metric (str): 'installations', 'payments' or 'completions'
        period (int): Number of days to consider (1-365)
        limit (int): Number of results to return (1-100)
    """

    metric = serializers.CharField(required=False, default='installations')
    period = serializers.IntegerField(required=False, default=30, min_value=1, max_value=365)
    limit = serializers.IntegerField(required=False, default=10, min_value=1, max_value=100)

    def validate_metric(self, value):
        if value not in VALID_METRICS:
            raise serializers.ValidationError(
                f"Invalid metric. Valid options: {', '.join(VALID_METRICS)}"
            )
        return value


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class InstallerCountsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    approved = serializers.IntegerField()
    pending = serializers.IntegerField()
    suspended = serializers.IntegerField()


class ParticipationCountsSerializer(serializers.Serializer):
    active = serializers.IntegerField()
    completed = serializers.IntegerField()
    expired = serializers.IntegerField()


class PaymentTotalsSerializer(serializers.Serializer):
    pending_count = serializers.IntegerField()
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    paid_count = serializers.IntegerField()
    paid_amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class OverviewSerializer(serializers.Serializer):
    installers = InstallerCountsSerializer()
    installations = serializers.IntegerField()
    active_promotions = serializers.IntegerField()
    participations = ParticipationCountsSerializer()
    payments = PaymentTotalsSerializer()
    period_start = serializers.DateField(allow_null=True)
    period_end = serializers.DateField(allow_null=True)


class TimeseriesPointSerializer(serializers.Serializer):
    period = serializers.CharField()
    installations = serializers.IntegerField()
    cities = serializers.IntegerField()


class TimeseriesResponseSerializer(serializers.Serializer):
    installer_id = serializers.UUIDField(allow_null=True)
    data = TimeseriesPointSerializer(many=True)


class TopInstallerSerializer(serializers.Serializer):
    installer_id = serializers.UUIDField()
    email = serializers.EmailField()
    display_name = serializers.CharField()
    loyalty_card_id = serializers.CharField()
    city = serializers.CharField()
    score = serializers.DecimalField(max_digits=14, decimal_places=2, coerce_to_string=False)


class TopInstallersResponseSerializer(serializers.Serializer):
    metric = serializers.CharField()
    period_days = serializers.IntegerField()
    results = TopInstallerSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
