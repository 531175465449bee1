"""
Custom authentication backend for email-or-BI login.

Allows users to authenticate using either their ``email`` or their
``bi_number`` together with their ``password``.

This backend is registered in ``settings.AUTHENTICATION_BACKENDS``
so that Django's ``authenticate()`` call dispatches to it.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

User = get_user_model()


class EmailOrBIAuthBackend(ModelBackend):
    """
    Authenticate against ``email`` (case-insensitive) or ``bi_number``.

    When ``django.contrib.auth.authenticate(identifier=..., password=...)``
    is called, this backend resolves the user from the ``identifier``
    keyword argument.
    """

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        """
        Resolve the user by *identifier* and verify *password*.

        Parameters
        ----------
        request : HttpRequest | None
        identifier : str
            The value supplied in the login form: an email address or
            a BI number.
        password : str
            The raw password to verify.

        Returns
        -------
        User | None
            The authenticated user, or ``None`` on failure.
        """
        if identifier is None or password is None:
            return None

        identifier = identifier.strip()
        try:
            user = User.objects.get(
                Q(email__iexact=identifier) | Q(bi_number=identifier.upper())
            )
        except User.DoesNotExist:
            # Run the default password hasher to mitigate timing attacks
            User().set_password(password)
            return None
        except User.MultipleObjectsReturned:
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
