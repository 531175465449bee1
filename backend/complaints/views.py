"""
Complaints app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

No database queries, workflow logic, or access rules live here.

ViewSets
--------
- ``ComplaintViewSet`` — submission, tracking by protocol number, the
  caller's own complaints, status updates and investigator assignment.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    AssignInvestigatorSerializer,
    ComplaintCompositeSerializer,
    ComplaintCreatedSerializer,
    ComplaintCreateSerializer,
    MyComplaintsFilterSerializer,
    MyComplaintsResponseSerializer,
    StatusUpdateResultSerializer,
    StatusUpdateSerializer,
)
from .services import (
    ComplaintQueryService,
    ComplaintReadModelService,
    ComplaintSubmissionService,
    ComplaintWorkflowService,
)

logger = logging.getLogger(__name__)


class ComplaintViewSet(viewsets.ViewSet):
    """
    Central ViewSet for the complaints app.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined.

    Permission Strategy
    -------------------
    Submission and lookup by protocol number are public (a bearer token,
    when sent, links the complaint to the account and feeds the access
    guard).  Everything else requires authentication; role and
    ownership checks are enforced inside the service layer.
    """

    permission_classes = [AllowAny]
    lookup_field = "protocol_number"
    lookup_value_regex = r"[^/]+"

    @extend_schema(
        summary="Submit a complaint",
        description=(
            "Create a complaint of one of five types together with its "
            "type-specific details. Authentication is optional; anonymous "
            "complaints never store reporter identity."
        ),
        request=ComplaintCreateSerializer,
        responses={
            201: OpenApiResponse(response=ComplaintCreatedSerializer, description="Complaint registered."),
            400: OpenApiResponse(description="Validation error."),
            409: OpenApiResponse(description="Protocol number could not be allocated."),
        },
        tags=["Complaints"],
    )
    def create(self, request: Request) -> Response:
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintSubmissionService.submit(serializer.validated_data, request.user)
        return Response(
            {
                "message": "Denúncia registrada com sucesso",
                **ComplaintCreatedSerializer(complaint).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Track a complaint by protocol number",
        responses={
            200: OpenApiResponse(response=ComplaintCompositeSerializer, description="Composite view."),
            403: OpenApiResponse(description="Authenticated caller has no relation to the complaint."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    def retrieve(self, request: Request, protocol_number: str = None) -> Response:
        view = ComplaintReadModelService.get_composite_view(protocol_number, request.user)
        return Response(ComplaintCompositeSerializer(view).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="List my complaints",
        description=(
            "Complaints linked to the caller's account or filed under the "
            "caller's BI number."
        ),
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Filter by status."),
            OpenApiParameter(name="type", type=str, location=OpenApiParameter.QUERY, description="Filter by complaint type."),
            OpenApiParameter(name="page", type=int, location=OpenApiParameter.QUERY, description="Page number (1-based)."),
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, description="Page size (1–50)."),
        ],
        responses={200: MyComplaintsResponseSerializer},
        tags=["Complaints"],
    )
    @action(detail=False, methods=["get"], url_path="my", permission_classes=[IsAuthenticated])
    def my(self, request: Request) -> Response:
        filters = MyComplaintsFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        result = ComplaintQueryService.list_for_identity(request.user, filters.validated_data)
        return Response(MyComplaintsResponseSerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update complaint status",
        description="Investigator or admin only. Appends a timeline entry.",
        request=StatusUpdateSerializer,
        responses={
            200: OpenApiResponse(response=StatusUpdateResultSerializer, description="Status updated."),
            400: OpenApiResponse(description="Validation error."),
            403: OpenApiResponse(description="Caller is not staff."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    @action(
        detail=False,
        methods=["put"],
        url_path=r"(?P<complaint_id>[0-9]+)/update",
        url_name="update-status",
        permission_classes=[IsAuthenticated],
    )
    def update_status(self, request: Request, complaint_id: str = None) -> Response:
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update = ComplaintWorkflowService.apply_status_update(
            complaint_id=int(complaint_id),
            actor=request.user,
            new_status=serializer.validated_data["status"],
            description=serializer.validated_data["description"],
            is_public=serializer.validated_data["is_public"],
        )
        return Response(StatusUpdateResultSerializer(update).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Assign an investigator",
        description="Admin only. Records a private timeline entry.",
        request=AssignInvestigatorSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintCreatedSerializer, description="Investigator assigned."),
            400: OpenApiResponse(description="Assignee is not an active investigator."),
            403: OpenApiResponse(description="Caller is not an admin."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    @action(
        detail=False,
        methods=["put"],
        url_path=r"(?P<complaint_id>[0-9]+)/assign",
        url_name="assign",
        permission_classes=[IsAuthenticated],
    )
    def assign(self, request: Request, complaint_id: str = None) -> Response:
        serializer = AssignInvestigatorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintWorkflowService.assign_investigator(
            complaint_id=int(complaint_id),
            actor=request.user,
            investigator_id=serializer.validated_data["investigator_id"],
            description=serializer.validated_data["description"],
        )
        return Response(
            {
                **ComplaintCreatedSerializer(complaint).data,
                "investigator_id": complaint.investigator_id,
            },
            status=status.HTTP_200_OK,
        )
