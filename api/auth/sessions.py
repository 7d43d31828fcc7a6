"""
Session token lifecycle.

Tokens are opaque bearer credentials with a fixed TTL counted from issuance
(no sliding, no refresh). Expiry is enforced lazily: an expired record is
deleted the first time someone presents it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from . import repository as token_repository
from . import security

TOKEN_TTL = timedelta(days=14)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionTokenStore:
    """
    `repository` needs async `insert_token`, `get_token` and `delete_token`;
    the `auth.repository` module is the production one.
    """

    def __init__(
        self,
        repository: Any = token_repository,
        *,
        clock: Callable[[], datetime] = _utc_now,
        ttl: timedelta = TOKEN_TTL,
    ) -> None:
        self._repo = repository
        self._clock = clock
        self._ttl = ttl

    async def issue_token(self, email: str) -> str:
        token = security.build_session_token()
        now = self._clock()
        await self._repo.insert_token(
            token=token,
            email=email,
            created_at=now,
            expires_at=now + self._ttl,
        )
        return token

    async def resolve_account_id(self, token: str | None) -> str | None:
        token = (token or "").strip()
        if not token:
            return None

        row = await self._repo.get_token(token)
        if row is None:
            return None

        if self._clock() > row["expires_at"]:
            await self._repo.delete_token(token)
            logger.info("session_expired")
            return None

        return str(row["email"])

    async def revoke_token(self, token: str | None) -> None:
        token = (token or "").strip()
        if not token:
            return
        await self._repo.delete_token(token)
