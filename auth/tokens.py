"""
JWT-style token creation and verification.

Tokens are base64-encoded JSON claims signed with HMAC-SHA256.  They are
self-contained: verification never touches the database, so a user who
disappears after issuance keeps a working token until it expires.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import b64decode, b64encode
from typing import Callable

from pydantic import BaseModel, ConfigDict

from utils.errors import ExpiredToken, InvalidToken

DEFAULT_EXPIRY_SECONDS = 86400 * 7


class TokenClaims(BaseModel):
    """Identity carried by a verified token."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str


class TokenService:
    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret.encode()
        self._expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, user_id: str, username: str) -> str:
        """Create a signed token containing ``id``, ``username`` and expiry."""
        now = int(self._clock())
        payload = {
            "id": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + self._expiry_seconds,
        }
        raw = json.dumps(payload).encode()
        return b64encode(raw).decode() + "." + self._sign(raw)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidToken`` on malformed or tampered tokens and
        ``ExpiredToken`` once ``exp`` has passed.
        """
        try:
            encoded, sig = token.split(".", 1)
            raw = b64decode(encoded, validate=True)
            if not hmac.compare_digest(sig, self._sign(raw)):
                raise InvalidToken("bad signature")
            payload = json.loads(raw)
            claims = TokenClaims(id=payload["id"], username=payload["username"])
            exp = float(payload["exp"])
        except InvalidToken:
            raise
        except (ValueError, KeyError, TypeError, binascii.Error) as exc:
            raise InvalidToken(f"malformed token: {exc}") from exc

        if exp <= self._clock():
            raise ExpiredToken()
        return claims
