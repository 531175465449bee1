"""
URL configuration for the complaint intake backend.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.1/topics/http/urls/
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', HealthCheckView.as_view(), name='health'),

    # ── App routes ───────────────────────────────────────────────────
    path('api/v1/auth/', include('accounts.urls')),
    path('api/v1/', include('complaints.urls')),
    path('api/v1/evidence/', include('evidence.urls')),
    path('api/v1/', include('core.urls')),

    # ── Swagger / OpenAPI schema ─────────────────────────────────────
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

# ── Serve uploaded evidence in local development ─────────────────────
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
