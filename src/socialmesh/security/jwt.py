# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""JWT token issuing, validation, and SecurityContext extraction."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from socialmesh.kernel.exceptions import ConfigurationException, InvalidTokenException
from socialmesh.security.context import SecurityContext

MIN_SECRET_BYTES = 32

AUTHORITIES_CLAIM = "authorities"
EMAIL_CLAIM = "email"


class JwtProvider:
    """Issues and validates HMAC-signed bearer tokens.

    Tokens carry the account email as ``sub`` and ``email`` and the granted
    authorities as a comma-separated ``authorities`` claim.

    Args:
        secret: Secret key for HMAC signing; at least 32 bytes.
        algorithm: JWT algorithm (default: HS256).
        expiration_seconds: Token lifetime (default: 24 hours).
        issuer: Optional ``iss`` claim, enforced on decode when set.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiration_seconds: int = 86400,
        issuer: str | None = None,
    ) -> None:
        if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ConfigurationException(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes; "
                "set SOCIALMESH_JWT_SECRET or socialmesh.security.jwt.secret",
                code="WEAK_JWT_SECRET",
            )
        self._secret = secret
        self._algorithm = algorithm
        self._expiration = timedelta(seconds=expiration_seconds)
        self._issuer = issuer

    def generate_token(self, email: str, authorities: Iterable[str] = ()) -> str:
        """Issue a signed token for *email* with the given authorities."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": email,
            EMAIL_CLAIM: email,
            AUTHORITIES_CLAIM: ",".join(authorities),
            "iat": now,
            "exp": now + self._expiration,
        }
        if self._issuer:
            payload["iss"] = self._issuer
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token.

        Raises:
            InvalidTokenException: If the token is malformed, wrongly signed, or expired.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenException("Token has expired", code="TOKEN_EXPIRED") from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenException(f"Invalid token: {exc}", code="INVALID_TOKEN") from exc

    def get_email_from_token(self, token: str) -> str:
        claims = self.decode(token)
        return str(claims.get(EMAIL_CLAIM) or claims["sub"])

    def to_security_context(self, token: str) -> SecurityContext:
        """Decode a token and build the authenticated SecurityContext."""
        claims = self.decode(token)
        return SecurityContext(
            principal=str(claims.get(EMAIL_CLAIM) or claims["sub"]),
            authorities=_parse_authorities(claims.get(AUTHORITIES_CLAIM)),
        )


def _parse_authorities(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return [a.strip() for a in raw.split(",") if a.strip()]
    return [str(a) for a in raw]
