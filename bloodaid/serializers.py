from decimal import Decimal

from rest_framework import serializers

from .lifecycle import IMMUTABLE_FIELDS, STATUS_CHOICES
from .models import (
    ACCOUNT_STATUS_CHOICES, PROFILE_FIELDS, ROLE_CHOICES,
    Account, DonationRequest, FundRecord,
)


class AccountSerializer(serializers.ModelSerializer):
    """Full projection: the account owner and administrators."""
    class Meta:
        model = Account
        fields = [
            'id', 'email', 'name', 'photo', 'role', 'status', 'blood_group',
            'district', 'upazila', 'phone', 'created_at', 'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'status', 'created_at', 'last_login']


class AccountSummarySerializer(serializers.ModelSerializer):
    """Reduced projection for volunteers: no contact or login details."""
    class Meta:
        model = Account
        fields = ['email', 'name', 'photo', 'role', 'status', 'blood_group', 'district', 'upazila']
        read_only_fields = fields


class PublicDonorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Account
        fields = ['name', 'email', 'photo', 'blood_group', 'district', 'upazila']
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """Fields a caller may set on their own account."""
    class Meta:
        model = Account
        fields = list(PROFILE_FIELDS)
        extra_kwargs = {field: {'required': False} for field in PROFILE_FIELDS}


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=ROLE_CHOICES)


class AccountStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ACCOUNT_STATUS_CHOICES)


class DonationRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = DonationRequest
        fields = '__all__'
        read_only_fields = IMMUTABLE_FIELDS


class PublicDonationRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = DonationRequest
        fields = [
            'id', 'recipient_name', 'recipient_district', 'recipient_upazila',
            'hospital_name', 'blood_group', 'donation_date', 'donation_time', 'status',
        ]
        read_only_fields = fields


class StatusTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    donor_name = serializers.CharField(max_length=150, required=False)
    donor_email = serializers.EmailField(required=False)


class FundRecordSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))

    class Meta:
        model = FundRecord
        fields = ['id', 'name', 'email', 'amount', 'date', 'external_session_id']
        read_only_fields = ['id', 'date', 'external_session_id']


class CheckoutSessionSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)


class ConfirmSessionSerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)
