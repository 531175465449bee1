"""
Complaints app URL configuration.

Included in the project-level ``urls.py`` under ``api/v1/``.

Endpoint summary
----------------
  POST /complaints/                          — submit (public)
  GET  /complaints/my/                       — caller's complaints
  GET  /complaints/{protocol_number}/        — tracking view (public)
  PUT  /complaints/{id}/update/              — status update (staff)
  PUT  /complaints/{id}/assign/              — investigator assignment (admin)
"""

from rest_framework.routers import SimpleRouter

from .views import ComplaintViewSet

router = SimpleRouter()
router.register(
    prefix=r"complaints",
    viewset=ComplaintViewSet,
    basename="complaint",
)

urlpatterns = router.urls
