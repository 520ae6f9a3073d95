from rest_framework import serializers
from .models import SerialRecord, SerialStatus


class SerialFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for serial filtering.

    Query Parameters:
        status (str): Filter by serial status
        installer (UUID): Filter by installer (admin only)
    """

    status = serializers.ChoiceField(choices=SerialStatus.choices, required=False)
    installer = serializers.UUIDField(required=False)


class SerialRecordSerializer(serializers.ModelSerializer):
    """Read serializer for serial records."""

    class Meta:
        model = SerialRecord
        fields = [
            'id',
            'installer',
            'serial_number',
            'installation_date',
            'status',
            'city',
            'address',
            'customer_name',
            'customer_rating',
            'created_at',
        ]
        read_only_fields = fields


class SerialRegistrationSerializer(serializers.Serializer):
    """Validate a serial number submission."""

    serial_number = serializers.CharField(max_length=64)
    installation_date = serializers.DateTimeField(required=False)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    customer_rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)

    def validate_serial_number(self, value):
        if not value.strip():
            raise serializers.ValidationError('Serial number cannot be blank')
        return value
