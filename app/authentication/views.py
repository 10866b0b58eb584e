"""
Authentication views.

This module provides API views for:
- Registration and JWT login/refresh
- Profile, settings and dashboard of the current account
- Completing setup of an account provisioned from a payment
- Self-service soft deactivation

Related files:
    - serializers.py: Request/response serialization
    - services.py: AuthService, AccountProvisioner
    - urls.py: URL routing
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from analysis.services import AnalysisQueryService
from authentication.exceptions import InvalidSetupTokenError
from authentication.serializers import (
    CompleteSetupSerializer,
    DeactivateAccountSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RefreshSerializer,
    RegisterSerializer,
    SettingsSerializer,
    UserSerializer,
)
from authentication.services import AccountProvisioner, AuthService
from core.responses import error_response
from core.services import ServiceResult


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


# =============================================================================
# Registration & Login
# =============================================================================


class RegisterView(APIView):
    """
    POST: Create an account and return a JWT pair.

    URL: /api/v1/auth/register/

    Responses:
        201: {"user": {...}, "access": "...", "refresh": "..."}
        400: Field validation errors
        409: Email or CPF already registered
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Register",
        request=RegisterSerializer,
        responses={201: UserSerializer},
        tags=["Auth"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.register(**serializer.validated_data)
        if not result:
            return error_response(result)

        body = {"user": UserSerializer(result.data).data, **_token_pair(result.data)}
        return Response(body, status=status.HTTP_201_CREATED)


@extend_schema(summary="Log in", tags=["Auth"])
class LoginView(TokenObtainPairView):
    """
    POST: Exchange email/password for a JWT pair.

    URL: /api/v1/auth/login/
    """

    serializer_class = LoginSerializer


class RefreshView(TokenRefreshView):
    """
    POST: Exchange a refresh token for a new access token.

    URL: /api/v1/auth/refresh/
    """

    serializer_class = RefreshSerializer


# =============================================================================
# Current Account
# =============================================================================


class ProfileView(APIView):
    """
    GET: Current account.
    PATCH: Update name / phone.

    URL: /api/v1/auth/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get profile", responses={200: UserSerializer}, tags=["Auth"])
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        summary="Update profile",
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
        tags=["Auth"],
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(
            request.user, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(request.user).data)


class SettingsView(APIView):
    """
    GET: Name, phone and preferences.
    PUT/PATCH: Update them (preferences are merged).

    URL: /api/v1/users/settings/
    """

    permission_classes = [IsAuthenticated]

    @staticmethod
    def _payload(user):
        return {
            "id": user.pk,
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "preferences": user.preferences,
        }

    @extend_schema(summary="Get settings", tags=["Users"])
    def get(self, request):
        return Response(self._payload(request.user))

    @extend_schema(summary="Update settings", request=SettingsSerializer, tags=["Users"])
    def put(self, request):
        serializer = SettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = AuthService.update_settings(request.user, **serializer.validated_data)
        return Response(self._payload(result.data))

    patch = put


class DashboardView(APIView):
    """
    GET: Balance, analysis statistics and the five most recent analyses.

    URL: /api/v1/users/dashboard/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Dashboard", tags=["Users"])
    def get(self, request):
        user = request.user
        return Response(
            {
                "user": {
                    "id": user.pk,
                    "name": user.name,
                    "email": user.email,
                    "credits": user.credits,
                    "plan_tier": user.plan_tier,
                    "date_joined": user.date_joined,
                },
                **AnalysisQueryService.dashboard(user),
            }
        )


# =============================================================================
# Account Setup & Deactivation
# =============================================================================


class CompleteSetupView(APIView):
    """
    POST: Finish setup of an account provisioned from a payment.

    URL: /api/v1/auth/complete-setup/

    Request body:
        {"token": "<from setup link>", "password": "...", "email": "optional"}

    Responses:
        200: {"user": {...}, "access": "...", "refresh": "..."}
        400: Invalid or expired token
        409: Already active, or email taken
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Complete account setup",
        request=CompleteSetupSerializer,
        responses={200: UserSerializer},
        tags=["Auth"],
    )
    def post(self, request):
        serializer = CompleteSetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            user_id = AccountProvisioner.user_id_from_setup_token(data["token"])
        except InvalidSetupTokenError as exc:
            return error_response(ServiceResult.from_error(exc))

        result = AccountProvisioner.complete_setup(
            user_id=user_id,
            password=data["password"],
            email=data.get("email"),
        )
        if not result:
            return error_response(result)

        return Response({"user": UserSerializer(result.data).data, **_token_pair(result.data)})


class DeactivateAccountView(APIView):
    """
    POST: Soft-delete the current account after password confirmation.

    URL: /api/v1/auth/deactivate/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Deactivate account",
        request=DeactivateAccountSerializer,
        tags=["Auth"],
    )
    def post(self, request):
        serializer = DeactivateAccountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.deactivate(
            request.user, serializer.validated_data["password"]
        )
        if not result:
            return error_response(result)
        return Response({"detail": "Account deactivated"})
