"""Connection resolution.

Turns a stored credential record into a usable, scheme-tagged
``PlatformConnection``. Resolution is pure: it never calls a provider and
never refreshes tokens (refresh is the credential store's job and happens
before resolution).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..constants import AuthScheme, ErrorKind, Provider
from .exceptions import ConnectionResolutionError
from .models import ConnectionRecord, PlatformConnection


def select_scheme(record: ConnectionRecord) -> AuthScheme:
    """Signed requests when a secondary secret is present, bearer otherwise."""
    return AuthScheme.SECONDARY if record.token_secret else AuthScheme.PRIMARY


def resolve(
    provider: Provider | str,
    record: Optional[ConnectionRecord],
    now: Optional[datetime] = None,
) -> PlatformConnection:
    """Resolve a credential record for one provider.

    Args:
        provider: Provider the connection is needed for.
        record: Stored credentials, or None when the user never connected.
        now: Current time (defaults to UTC now).

    Returns:
        A usable PlatformConnection.

    Raises:
        ConnectionResolutionError: NOT_CONNECTED when the record is absent,
            belongs to another provider or has no access token;
            TOKEN_EXPIRED when ``expires_at <= now``.
    """
    provider = Provider(provider)
    now = now or datetime.now(timezone.utc)

    if record is None or record.provider != provider:
        raise ConnectionResolutionError(
            ErrorKind.NOT_CONNECTED, f"{provider.value} account is not connected"
        )
    if not record.access_token:
        raise ConnectionResolutionError(
            ErrorKind.NOT_CONNECTED, f"{provider.value} connection has no access token"
        )

    connection = PlatformConnection(
        provider=provider,
        access_token=record.access_token,
        scheme=select_scheme(record),
        refresh_token=record.refresh_token,
        token_secret=record.token_secret,
        expires_at=record.expires_at,
        account_id=record.account_id,
        account_name=record.account_name,
    )

    if not connection.is_usable(now):
        raise ConnectionResolutionError(
            ErrorKind.TOKEN_EXPIRED,
            f"{provider.value} access token expired at {record.expires_at.isoformat()}",
        )
    return connection
