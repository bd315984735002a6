from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    currency_symbol = serializers.CharField(source='get_currency_symbol', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'created_at',
            'last_login',
            'preferences',
            'currency_symbol',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'last_login']

    def validate_preferences(self, value):
        """Preferences must be a JSON object; currency symbol must be short text."""
        if not isinstance(value, dict):
            raise serializers.ValidationError('Preferences must be an object')

        symbol = value.get('currency_symbol')
        if symbol is not None and (not isinstance(symbol, str) or len(symbol) > 5):
            raise serializers.ValidationError({
                'currency_symbol': 'Currency symbol must be at most 5 characters'
            })
        return value


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'password_confirm', 'display_name']

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class DataResetSerializer(serializers.Serializer):
    """
    Validate a data reset request.

    Fields:
        collection (str): Optional single collection to wipe; all data when omitted
        confirm (bool): Must be true
    """

    collection = serializers.ChoiceField(
        choices=['vendors', 'customers', 'vendor_payments', 'summaries'],
        required=False
    )
    confirm = serializers.BooleanField()

    def validate_confirm(self, value):
        if not value:
            raise serializers.ValidationError('Confirmation required')
        return value
