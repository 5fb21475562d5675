"""
Token authentication for clinic staff.

Kept apart from the views so that Django REST framework can import the
authentication class from settings without pulling in view modules.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """``Authorization: Token <key>`` for the tokens issued at login."""

    keyword = 'Token'
