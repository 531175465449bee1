"""
Evidence app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/v1/evidence/', include('evidence.urls'))

Endpoint summary
----------------
GET    /complaints/{complaint_id}/evidence/  — list attachments
POST   /complaints/{complaint_id}/evidence/  — upload attachments (multipart)
DELETE /{evidence_id}/                       — delete one attachment
"""

from django.urls import path

from .views import ComplaintEvidenceView, EvidenceDetailView

app_name = "evidence"

urlpatterns = [
    path(
        "complaints/<int:complaint_id>/evidence/",
        ComplaintEvidenceView.as_view(),
        name="complaint-evidence",
    ),
    path(
        "<int:evidence_id>/",
        EvidenceDetailView.as_view(),
        name="evidence-detail",
    ),
]
