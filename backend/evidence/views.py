"""
Evidence app views.

Thin views: validate input via serializers, delegate to
``services.py``, serialize the result.

View Map
--------
- ``ComplaintEvidenceView`` — GET / POST /complaints/{id}/evidence/
- ``EvidenceDetailView``    — DELETE /{id}/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import EvidenceReadSerializer, EvidenceUploadSerializer
from .services import EvidenceDeleteService, EvidenceQueryService, EvidenceUploadService


class ComplaintEvidenceView(APIView):
    """
    POST  /api/v1/evidence/complaints/{complaint_id}/evidence/ → upload
    GET   /api/v1/evidence/complaints/{complaint_id}/evidence/ → list

    Authentication is optional for both; an authenticated caller must
    pass the complaint read check.
    """

    permission_classes = [AllowAny]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="List evidence of a complaint",
        responses={
            200: EvidenceReadSerializer(many=True),
            403: OpenApiResponse(description="Access denied."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Evidence"],
    )
    def get(self, request: Request, complaint_id: int) -> Response:
        evidence = EvidenceQueryService.list_for_complaint(complaint_id, request.user)
        data = EvidenceReadSerializer(evidence, many=True, context={"request": request}).data
        return Response({"evidence": data}, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Upload evidence files",
        request={"multipart/form-data": EvidenceUploadSerializer},
        responses={
            201: EvidenceReadSerializer(many=True),
            400: OpenApiResponse(description="No files, bad type, too large or too many."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Evidence"],
    )
    def post(self, request: Request, complaint_id: int) -> Response:
        serializer = EvidenceUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        evidence = EvidenceUploadService.upload(
            complaint_id=complaint_id,
            files=serializer.validated_data["files"],
            descriptions=serializer.validated_data.get("descriptions"),
            actor=request.user,
        )
        data = EvidenceReadSerializer(evidence, many=True, context={"request": request}).data
        return Response({"uploaded_files": data}, status=status.HTTP_201_CREATED)


class EvidenceDetailView(APIView):
    """
    DELETE /api/v1/evidence/{evidence_id}/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Delete an evidence file",
        responses={
            204: OpenApiResponse(description="Deleted."),
            403: OpenApiResponse(description="Not the uploader, reporter or staff."),
            404: OpenApiResponse(description="Evidence not found."),
        },
        tags=["Evidence"],
    )
    def delete(self, request: Request, evidence_id: int) -> Response:
        EvidenceDeleteService.delete(evidence_id, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
