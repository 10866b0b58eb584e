"""
Serializers for authentication endpoints.

This module provides DRF serializers for:
- User (read)
- Registration, login and account setup
- Settings update and deactivation

Related files:
    - validators.py: CPF, phone and password rules
    - services.py: AuthService / AccountProvisioner
    - views.py: Views that use these serializers

Security:
    - Password fields are write-only
    - credits, credential_state and plan_tier are read-only everywhere
"""

from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import (
    TokenObtainPairSerializer,
    TokenRefreshSerializer,
)
from rest_framework_simplejwt.settings import api_settings as jwt_settings

from authentication.models import User
from authentication.validators import (
    validate_cpf,
    validate_mobile_phone,
    validate_password_strength,
)
from core.helpers import digits_only


class UserSerializer(serializers.ModelSerializer):
    """Account as shown to its owner."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "national_id",
            "phone",
            "credits",
            "plan_tier",
            "credential_state",
            "has_placeholder_email",
            "preferences",
            "date_joined",
            "last_login",
        ]
        read_only_fields = fields


class NationalIdField(serializers.CharField):
    """CPF input accepting punctuation, stored as 11 digits."""

    def to_internal_value(self, data):
        value = digits_only(super().to_internal_value(data))
        validate_cpf(value)
        return value


class PhoneField(serializers.CharField):
    """Brazilian phone input accepting punctuation, stored as digits."""

    def to_internal_value(self, data):
        value = digits_only(super().to_internal_value(data))
        validate_mobile_phone(value)
        return value


class RegisterSerializer(serializers.Serializer):
    """
    Registration payload.

    Uniqueness of email and CPF is checked by AuthService so that the
    response carries the CONFLICT error code.
    """

    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password_strength],
        style={"input_type": "password"},
    )
    national_id = NationalIdField()
    phone = PhoneField()


class LoginSerializer(TokenObtainPairSerializer):
    """
    Email/password login returning a JWT pair.

    Suspended accounts are refused even with the right password. Pending
    accounts never reach this point because their password is unusable.
    """

    default_error_messages = {
        "no_active_account": "Invalid email or password",
    }

    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.can_authenticate:
            raise AuthenticationFailed(
                "Account is not active", code="account_not_active"
            )
        data["user"] = UserSerializer(self.user).data
        return data


class RefreshSerializer(TokenRefreshSerializer):
    """
    Refresh token exchange that re-checks the account.

    A suspended or deactivated account cannot mint new access tokens from
    a refresh token issued before the change.
    """

    def validate(self, attrs):
        refresh = self.token_class(attrs["refresh"])
        user_id = refresh.payload.get(jwt_settings.USER_ID_CLAIM)
        user = User.objects.filter(**{jwt_settings.USER_ID_FIELD: user_id}).first()
        if user is None or not user.can_authenticate:
            raise AuthenticationFailed(
                "Account is not active", code="account_not_active"
            )
        return super().validate(attrs)


class SettingsSerializer(serializers.Serializer):
    """Partial update of name, phone and preferences."""

    name = serializers.CharField(min_length=2, max_length=100, required=False)
    phone = PhoneField(required=False)
    preferences = serializers.DictField(required=False)


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Owner-editable profile fields."""

    phone = PhoneField(required=False)

    class Meta:
        model = User
        fields = ["name", "phone"]


class CompleteSetupSerializer(serializers.Serializer):
    """Payload of the account setup link."""

    token = serializers.CharField()
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password_strength],
        style={"input_type": "password"},
    )
    email = serializers.EmailField(required=False)


class DeactivateAccountSerializer(serializers.Serializer):
    """Password confirmation for soft deletion."""

    password = serializers.CharField(write_only=True, style={"input_type": "password"})
