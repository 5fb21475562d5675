"""
Bearer token cache shared by the insurer clients.

One :class:`~dental.models.InsurerToken` row is kept per provider.  A
cached token is used until ``INSURER_TOKEN_SKEW`` seconds before it
expires; after that the provider's token endpoint is called again and
the row is replaced.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from dental.models import InsurerToken

logger = logging.getLogger(__name__)

# () -> (access_token, token_type, expires_in_seconds)
TokenFetcher = Callable[[], Tuple[str, str, int]]


@dataclass
class TokenInfo:
    access_token: str
    token_type: str
    expires_at: datetime.datetime
    cached: bool

    @property
    def expires_at_ms(self) -> int:
        return int(self.expires_at.timestamp() * 1000)


def cached_token(provider: str) -> Optional[InsurerToken]:
    row = InsurerToken.objects.filter(provider=provider).first()
    if row is None:
        return None
    skew = datetime.timedelta(seconds=settings.INSURER_TOKEN_SKEW)
    if timezone.now() < row.expires_at - skew:
        return row
    return None


def store_token(provider: str, access_token: str, token_type: str, expires_at: datetime.datetime) -> None:
    """Upsert the provider's row; a storage failure only costs a refetch later."""
    try:
        with transaction.atomic():
            InsurerToken.objects.update_or_create(
                provider=provider,
                defaults={'access_token': access_token, 'token_type': token_type, 'expires_at': expires_at},
            )
    except Exception:
        logger.warning("could not store %s token", provider, exc_info=True)


def get_valid_token(provider: str, fetch: TokenFetcher, *, force: bool = False) -> TokenInfo:
    if not force:
        row = cached_token(provider)
        if row is not None:
            logger.info("using cached %s token (expires %s)", provider, row.expires_at.isoformat())
            return TokenInfo(row.access_token, row.token_type or 'Bearer', row.expires_at, cached=True)

    access_token, token_type, expires_in = fetch()
    expires_at = timezone.now() + datetime.timedelta(seconds=expires_in)
    store_token(provider, access_token, token_type, expires_at)
    logger.info("refreshed %s token, valid for %ss", provider, expires_in)
    return TokenInfo(access_token, token_type, expires_at, cached=False)
