"""
Core app views — **Thin Views**.

Each view delegates all business logic to the corresponding service in
``core.services``.  Views are responsible only for:

1. Validating query parameters with a serializer.
2. Calling the service with the authenticated user and parameters.
3. Serialising the result and returning an HTTP ``Response``.
"""

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .constants import SERVICE_NAME, SERVICE_VERSION
from .serializers import (
    CaseSearchResponseSerializer,
    CaseSearchSerializer,
    DashboardStatsSerializer,
    HealthSerializer,
    MissingPersonSearchResponseSerializer,
    MissingPersonSearchSerializer,
    MySummarySerializer,
    NotificationFilterSerializer,
    NotificationListSerializer,
    NotificationSerializer,
)
from .services import NotificationInboxService, SearchService, StatsService


class HealthCheckView(APIView):
    """
    **GET /health/**

    Liveness probe.  No authentication and no database access.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Health check",
        responses={200: HealthSerializer},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        payload = {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "timestamp": timezone.now(),
        }
        return Response(HealthSerializer(payload).data, status=status.HTTP_200_OK)


# ════════════════════════════════════════════════════════════════════
#  Search
# ════════════════════════════════════════════════════════════════════

class MissingPersonSearchView(APIView):
    """
    **GET /api/v1/search/missing-persons/**

    Public search over missing-person complaints.

    **Error Responses**:
        - ``400 Bad Request``: ``q`` shorter than 2 characters, unknown
          gender/status, ages outside 0..150 or ``limit`` above 50.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Search missing persons",
        parameters=[
            OpenApiParameter(name="q", type=str, required=False, description="Name or location (min 2 chars)."),
            OpenApiParameter(name="gender", type=str, required=False),
            OpenApiParameter(name="age_min", type=int, required=False),
            OpenApiParameter(name="age_max", type=int, required=False),
            OpenApiParameter(name="province", type=str, required=False),
            OpenApiParameter(name="status", type=str, required=False),
            OpenApiParameter(name="page", type=int, required=False),
            OpenApiParameter(name="limit", type=int, required=False, description="Default 10, maximum 50."),
        ],
        responses={
            200: MissingPersonSearchResponseSerializer,
            400: OpenApiResponse(description="Invalid query parameter."),
        },
        tags=["Search"],
    )
    def get(self, request: Request) -> Response:
        params = MissingPersonSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = SearchService.search_missing_persons(params.validated_data)
        return Response(MissingPersonSearchResponseSerializer(data).data, status=status.HTTP_200_OK)


class CaseSearchView(APIView):
    """
    **GET /api/v1/search/cases/?bi_number=<BI>**

    Public lookup of the complaints filed under a BI number.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Search complaints by BI number",
        parameters=[
            OpenApiParameter(name="bi_number", type=str, required=True, description="9 digits, 2 letters, 3 digits."),
        ],
        responses={
            200: CaseSearchResponseSerializer,
            400: OpenApiResponse(description="Missing or malformed BI number."),
        },
        tags=["Search"],
    )
    def get(self, request: Request) -> Response:
        params = CaseSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = SearchService.search_cases_by_bi(params.validated_data["bi_number"])
        return Response(CaseSearchResponseSerializer(data).data, status=status.HTTP_200_OK)


# ════════════════════════════════════════════════════════════════════
#  Statistics
# ════════════════════════════════════════════════════════════════════

class DashboardStatsView(APIView):
    """
    **GET /api/v1/stats/dashboard/**

    Organisation-wide counters.  Investigators and admins only; the
    role check lives in ``StatsService.dashboard``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Dashboard statistics",
        responses={
            200: DashboardStatsSerializer,
            403: OpenApiResponse(description="Caller is not staff."),
        },
        tags=["Statistics"],
    )
    def get(self, request: Request) -> Response:
        data = StatsService.dashboard(request.user)
        return Response(DashboardStatsSerializer(data).data, status=status.HTTP_200_OK)


class MySummaryView(APIView):
    """
    **GET /api/v1/stats/my-summary/**
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Summary of the caller's complaints",
        responses={200: MySummarySerializer},
        tags=["Statistics"],
    )
    def get(self, request: Request) -> Response:
        data = StatsService.my_summary(request.user)
        return Response(MySummarySerializer(data).data, status=status.HTTP_200_OK)


# ════════════════════════════════════════════════════════════════════
#  Notifications
# ════════════════════════════════════════════════════════════════════

class NotificationListView(APIView):
    """
    **GET /api/v1/notifications/?unread_only=&page=&limit=**
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List notifications",
        parameters=[
            OpenApiParameter(name="unread_only", type=bool, required=False),
            OpenApiParameter(name="page", type=int, required=False),
            OpenApiParameter(name="limit", type=int, required=False, description="Default 20, maximum 50."),
        ],
        responses={200: NotificationListSerializer},
        tags=["Notifications"],
    )
    def get(self, request: Request) -> Response:
        params = NotificationFilterSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = NotificationInboxService.list_for_user(request.user, params.validated_data)
        return Response(NotificationListSerializer(data).data, status=status.HTTP_200_OK)


class NotificationReadView(APIView):
    """
    **PUT /api/v1/notifications/{id}/read/**

    A notification of another user is reported as ``404``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Mark notification as read",
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Notification not found."),
        },
        tags=["Notifications"],
    )
    def put(self, request: Request, notification_id: int) -> Response:
        notification = NotificationInboxService.mark_read(request.user, notification_id)
        return Response(NotificationSerializer(notification).data, status=status.HTTP_200_OK)


class NotificationReadAllView(APIView):
    """
    **PUT /api/v1/notifications/read-all/**
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Mark all notifications as read",
        request=None,
        responses={200: OpenApiResponse(description="Number of notifications updated.")},
        tags=["Notifications"],
    )
    def put(self, request: Request) -> Response:
        updated = NotificationInboxService.mark_all_read(request.user)
        return Response({"updated": updated}, status=status.HTTP_200_OK)
