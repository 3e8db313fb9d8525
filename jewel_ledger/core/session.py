"""
Per-request shop session.

The session is built explicitly and handed down to the remote API client.
Logging in populates it, logging out clears the token together with every
value derived from it, so nothing survives into the next request.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from jewel_ledger.core.config import settings


class ShopSession:
    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None):
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        if token:
            self.login(token, user)

    def login(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.user = dict(user) if user else None

    def logout(self) -> None:
        self.token = None
        self.user = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def shop_name(self) -> str:
        return (self.user or {}).get("shopName") or settings.DEFAULT_SHOP_NAME

    @property
    def phone_number(self) -> str:
        return (self.user or {}).get("phoneNumber") or ""

    def expires_at(self) -> Optional[datetime]:
        """Expiry from the token's ``exp`` claim; the signature is not checked here."""
        if not self.token:
            return None
        try:
            claims = jwt.get_unverified_claims(self.token)
        except JWTError:
            return None
        exp = claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(int(exp), tz=timezone.utc)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if not self.token:
            return True
        expires_at = self.expires_at()
        if expires_at is None:
            # Opaque tokens are left for the remote API to judge
            return False
        now = now or datetime.now(timezone.utc)
        return now.timestamp() >= expires_at.timestamp() - settings.TOKEN_EXPIRY_LEEWAY_SECONDS
