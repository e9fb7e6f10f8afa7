"""
Token authentication for the dashboard.

Kept apart from the views so that REST framework can import the
authentication classes listed in settings without pulling in any view
modules.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication under the ``Token`` keyword.

    JWT access tokens are handled separately by simplejwt under the
    ``Bearer`` keyword.
    """

    keyword = 'Token'
