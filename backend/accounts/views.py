"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``RegisterView``  — POST /auth/register/
- ``LoginView``     — POST /auth/login/
- ``MeView``        — GET  /auth/me/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    CustomTokenObtainPairSerializer,
    LoginRequestSerializer,
    RegisterRequestSerializer,
    TokenResponseSerializer,
    UserDetailSerializer,
)
from .services import AuthenticationService, UserRegistrationService


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(APIView):
    """
    POST /api/v1/auth/register/

    Public endpoint.  Creates a new citizen account and logs it in.

    Request body  → ``RegisterRequestSerializer``
    Response body → ``TokenResponseSerializer`` (201 Created)
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Register a citizen account",
        request=RegisterRequestSerializer,
        responses={
            201: OpenApiResponse(response=TokenResponseSerializer, description="Account created."),
            400: OpenApiResponse(description="Validation error."),
            409: OpenApiResponse(description="Email or BI number already registered."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_user(serializer.validated_data)
        payload = AuthenticationService.generate_tokens(user)
        payload["user"] = user
        return Response(
            TokenResponseSerializer(payload).data,
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    POST /api/v1/auth/login/

    Public endpoint.  Authenticates with email or BI number plus
    password and returns a JWT pair.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Log in with email or BI number",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=TokenResponseSerializer, description="Authenticated."),
            400: OpenApiResponse(description="Invalid credentials or disabled account."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = CustomTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = dict(serializer.validated_data)
        payload["user"] = serializer.user
        return Response(TokenResponseSerializer(payload).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET /api/v1/auth/me/ → the authenticated user's profile.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: UserDetailSerializer},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        return Response(UserDetailSerializer(request.user).data, status=status.HTTP_200_OK)
