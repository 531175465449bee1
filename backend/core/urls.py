"""
Core app URL configuration.

Cross-app read endpoints: public search, statistics and the in-app
notification inbox.

URL prefix (registered in ``denuncias/urls.py``)::

    path('api/v1/', include('core.urls'))

Endpoint summary
----------------
GET  /api/v1/search/missing-persons/        — Public missing-person search.
GET  /api/v1/search/cases/?bi_number=        — Complaints filed under a BI number.
GET  /api/v1/stats/dashboard/                — Staff dashboard counters.
GET  /api/v1/stats/my-summary/               — Caller's own complaint counters.
GET  /api/v1/notifications/                  — Caller's notifications.
PUT  /api/v1/notifications/{id}/read/        — Mark one notification read.
PUT  /api/v1/notifications/read-all/         — Mark all notifications read.

``/health/`` is mounted at the project root.
"""

from django.urls import path

from . import views

app_name = "core"

urlpatterns = [
    # ── Search ───────────────────────────────────────────────────────
    path(
        "search/missing-persons/",
        views.MissingPersonSearchView.as_view(),
        name="search-missing-persons",
    ),
    path(
        "search/cases/",
        views.CaseSearchView.as_view(),
        name="search-cases",
    ),

    # ── Statistics ───────────────────────────────────────────────────
    path(
        "stats/dashboard/",
        views.DashboardStatsView.as_view(),
        name="stats-dashboard",
    ),
    path(
        "stats/my-summary/",
        views.MySummaryView.as_view(),
        name="stats-my-summary",
    ),

    # ── Notifications ────────────────────────────────────────────────
    path(
        "notifications/",
        views.NotificationListView.as_view(),
        name="notification-list",
    ),
    path(
        "notifications/read-all/",
        views.NotificationReadAllView.as_view(),
        name="notification-read-all",
    ),
    path(
        "notifications/<int:notification_id>/read/",
        views.NotificationReadView.as_view(),
        name="notification-read",
    ),
]
