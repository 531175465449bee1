"""
Accounts app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/v1/auth/', include('accounts.urls')),

Endpoint Map
------------
    POST   /register/         → RegisterView
    POST   /login/            → LoginView
    POST   /token/refresh/    → TokenRefreshView (SimpleJWT)
    GET    /me/               → MeView
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import LoginView, MeView, RegisterView

app_name = "accounts"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
]
