"""
DRF authentication classes.

JWTAuthentication only checks is_active. Tokens issued before an account
was suspended stay valid until they expire, so the credential state is
checked again on every request.
"""

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication


class AccountStateJWTAuthentication(JWTAuthentication):
    """JWT authentication that refuses accounts which may not log in."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if not user.can_authenticate:
            raise AuthenticationFailed(
                "Account is not active", code="account_not_active"
            )
        return user
