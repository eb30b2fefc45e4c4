"""
Password hashing and identity token signing.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from pos_auth.core.config import AuthSettings, settings
from pos_auth.utils.timezone import utc_now

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.auth.bcrypt_rounds,
)

# Claims added by the codec itself; everything else is identity data.
REGISTERED_CLAIMS = frozenset({"sub", "iat", "exp", "nbf", "jti"})


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    """Spend the time of a real verification when there is no account."""
    pwd_context.dummy_verify()


class TokenError(Exception):
    """Token could not be decoded: bad signature, expired or malformed."""


class TokenCodec:
    """
    Stateless JWT signing/verification for identity payloads.

    Each signed token gets a fresh ``iat``/``exp`` pair and a random
    ``jti``, so signing the same claims twice never yields the same token.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 120,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, auth: AuthSettings) -> "TokenCodec":
        return cls(
            secret_key=auth.secret_key,
            algorithm=auth.algorithm,
            expire_minutes=auth.access_token_expire_minutes,
        )

    def sign(self, claims: dict[str, Any]) -> str:
        """Sign identity claims into a token."""
        now = utc_now()
        payload = {
            **claims,
            "iat": now,
            "exp": now + self.expires_in,
            "jti": uuid4().hex,
        }
        if "id" in claims:
            payload["sub"] = str(claims["id"])
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Decode and validate a token, returning all of its claims."""
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError as exc:
            raise TokenError(str(exc)) from exc

    @staticmethod
    def strip_registered_claims(claims: dict[str, Any]) -> dict[str, Any]:
        """Drop codec-owned claims, leaving only identity fields."""
        return {k: v for k, v in claims.items() if k not in REGISTERED_CLAIMS}


@lru_cache
def get_token_codec() -> TokenCodec:
    """Get the process-wide token codec."""
    return TokenCodec.from_settings(settings.auth)
