"""Password hashing, session token issue/verification and the resource ownership rule."""

import base64
import binascii
import hmac
import re
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any, Protocol

import bcrypt
import jwt

# bcrypt only reads the first 72 bytes of its input; longer passwords are refused, never cut.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for registration input validation.
NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_BYTES = BCRYPT_MAX_BYTES

REQUIRED_CLAIMS = ("sub", "iat", "exp", "jti")

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _pw_bytes(plain_password: str) -> bytes:
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
    return encoded


class PasswordHasher:
    """
    Salted bcrypt hashing with a cost fixed at construction.

    The salt string returned by hash() records the algorithm and cost, so hashes made
    under an older cost still verify after BCRYPT_ROUNDS changes.
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> tuple[str, str]:
        """Return (hash, salt) for storage. Raises ValueError for passwords over BCRYPT_MAX_BYTES."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_pw_bytes(plain_password), salt)
        return hashed.decode("utf-8"), salt.decode("utf-8")

    def verify(self, plain_password: str, stored_hash: str, stored_salt: str) -> bool:
        """Recompute with the stored salt and compare in constant time. Over-long input never matches."""
        try:
            computed = bcrypt.hashpw(_pw_bytes(plain_password), stored_salt.encode("utf-8"))
            expected = stored_hash.encode("utf-8")
        except (ValueError, TypeError, AttributeError):
            return False
        return hmac.compare_digest(computed, expected)

    def needs_rehash(self, stored_salt: str) -> bool:
        """True when the stored salt was generated with a different cost than the current one."""
        return salt_rounds(stored_salt) != self.rounds

    def burn(self, plain_password: str) -> None:
        """Run one verification against a throwaway hash so unknown accounts cost the same time."""
        dummy_hash, dummy_salt = _dummy_credentials(self.rounds)
        self.verify(plain_password, dummy_hash, dummy_salt)


def salt_rounds(stored_salt: str) -> int | None:
    """Cost recorded in a bcrypt salt ("$2b$12$..."), or None if the salt is malformed."""
    parts = (stored_salt or "").split("$")
    if len(parts) != 4 or not parts[2].isdigit():
        return None
    return int(parts[2])


@lru_cache
def _dummy_credentials(rounds: int) -> tuple[str, str]:
    return PasswordHasher(rounds).hash(secrets.token_urlsafe(16))


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a verified session token."""

    user_id: int
    token_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class Valid:
    claims: SessionClaims


@dataclass(frozen=True)
class Expired:
    pass


@dataclass(frozen=True)
class Malformed:
    reason: str = ""


@dataclass(frozen=True)
class SignatureMismatch:
    pass


TokenResult = Valid | Expired | Malformed | SignatureMismatch


def _is_canonical_segment(segment: str) -> bool:
    """A base64url segment that re-encodes to itself (no alternative spellings of the same bytes)."""
    if not _SEGMENT_RE.match(segment):
        return False
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (binascii.Error, ValueError):
        return False
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii") == segment


class TokenService:
    """Issues and verifies HMAC-signed JWT session tokens with a single active secret."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 604800) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(seconds=ttl_seconds)

    def issue(self, user_id: int, ttl: timedelta | None = None) -> str:
        """Create a signed token with sub (user id), iat, exp and a random jti."""
        now = datetime.now(UTC)
        expire = now + (self.ttl if ttl is None else ttl)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": expire,
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> TokenResult:
        """
        Check structure, signature and expiry, in that order, before trusting any claim.

        Only the configured algorithm is accepted, so unsigned ("none") tokens are rejected.
        """
        if not token:
            return Malformed("empty token")
        segments = token.split(".")
        if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
            return Malformed("not a compact JWS")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError:
            return Expired()
        except jwt.InvalidSignatureError:
            return SignatureMismatch()
        except jwt.PyJWTError as e:
            return Malformed(type(e).__name__)

        sub = payload.get("sub")
        jti = payload.get("jti")
        if not isinstance(sub, str) or not sub.isdigit():
            return Malformed("invalid sub")
        if not isinstance(jti, str) or not jti:
            return Malformed("invalid jti")
        return Valid(
            SessionClaims(
                user_id=int(sub),
                token_id=jti,
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        )


class _Principal(Protocol):
    id: int
    is_admin: bool


def can_modify(principal: _Principal | None, author_id: int) -> bool:
    """Ownership rule: admins may modify anything, everyone else only what they authored."""
    if principal is None:
        return False
    return bool(principal.is_admin) or principal.id == author_id
