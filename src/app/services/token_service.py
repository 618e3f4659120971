"""
Token Service

Signs and verifies access/refresh JWTs (HS256, python-jose).
"""

import hashlib
import uuid
from datetime import UTC, datetime
from typing import Optional, Union

from jose import JWTError, jwt

from src.domain.entities import Admin, User

from .auth_settings import AuthSettings

Identity = Union[User, Admin]


class TokenService:
    """
    Access and refresh tokens use distinct secrets and lifetimes but the same
    issuer/audience pair, so a token minted elsewhere never verifies here.
    """

    def __init__(self, settings: AuthSettings):
        self.settings = settings

    @staticmethod
    def build_claims(identity: Identity) -> dict:
        """
        Identity claims shared by both tokens.

        Admins carry `role`; tenant users carry `tenant_id` and `account_type`.
        """
        claims = {
            "user_id": str(identity.id),
            "email": identity.email,
            "name": identity.name,
        }
        if isinstance(identity, Admin):
            claims["role"] = getattr(identity.role, "value", identity.role)
        else:
            claims["tenant_id"] = str(identity.tenant_id)
            claims["account_type"] = getattr(
                identity.account_type, "value", identity.account_type
            )
        return claims

    def _sign(self, claims: dict, secret: str, lifetime) -> str:
        now = datetime.now(UTC)
        payload = {
            **claims,
            "iss": self.settings.issuer,
            "aud": self.settings.audience,
            "iat": now,
            "exp": now + lifetime,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def create_access_token(self, identity: Identity) -> str:
        return self._sign(
            self.build_claims(identity),
            self.settings.access_secret,
            self.settings.access_expires,
        )

    def create_refresh_token(self, identity: Identity) -> str:
        return self._sign(
            self.build_claims(identity),
            self.settings.refresh_secret,
            self.settings.refresh_expires,
        )

    def _decode(self, token: str, secret: str) -> Optional[dict]:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                audience=self.settings.audience,
                issuer=self.settings.issuer,
            )
        except JWTError:
            return None

    def verify_access_token(self, token: str) -> Optional[dict]:
        """
        Verify signature, issuer, audience and expiry of an access token.

        Returns:
            Decoded claims, or None if the token is expired, malformed or forged
        """
        return self._decode(token, self.settings.access_secret)

    def decode_refresh_token(self, token: str) -> Optional[dict]:
        """
        Verify a refresh token's signature only.

        Revocation is checked against stored hashes by the refresh use case.
        """
        return self._decode(token, self.settings.refresh_secret)

    def refresh_expires_at(self) -> datetime:
        """Naive UTC expiry stored alongside a new refresh token hash"""
        return (datetime.now(UTC) + self.settings.refresh_expires).replace(tzinfo=None)

    @staticmethod
    def hash_refresh_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
