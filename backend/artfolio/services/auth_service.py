"""
Artfolio Backend — Authentication Service
==========================================

What:  Password hashing, session token issuance/validation, register & login.
Why:   Keeps every credential decision in one place; routes and other
       services only ever see an Identity.
How:   bcrypt for one-way password hashes (random salt per record), PyJWT
       HS256 tokens with a `sub` (user id) and `exp` claim.
Who:   Auth routes call register()/login(); the identity dependencies call
       resolve_identity() for every authenticated request.

Token Lifecycle:
    register/login ──▶ JWT {sub: <user id>, iat, exp: now + 7 days}
                               │
    Authorization: Bearer <jwt>│
                               ▼
    resolve_identity ──▶ decode (signature + expiry) ──▶ load user ──▶ Identity

    A token whose user has disappeared is rejected the same way as a forged
    or expired one.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from artfolio.config import settings
from artfolio.exceptions import (
    ArtfolioError,
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    UnauthorizedError,
    ValidationError,
)
from artfolio.models.user import User, UserRole
from artfolio.schemas.user import AuthResponse, AuthUser, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password and recent releases
# refuse longer input outright.
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class Identity:
    """
    The authenticated caller, resolved from a session token.

    Produced by the identity dependencies and handed to services as an
    explicit argument.
    """
    user: User

    @property
    def id(self) -> uuid.UUID:
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role

    @property
    def is_artist(self) -> bool:
        return self.user.role == UserRole.ARTIST.value

    @property
    def is_client(self) -> bool:
        return self.user.role == UserRole.CLIENT.value


# ══════════════════════════════════════════════════════════════════════════
# Password Hashing
# ══════════════════════════════════════════════════════════════════════════


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt. CPU-bound: call off the event loop."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            message=f"Password must be at most {BCRYPT_MAX_BYTES} bytes",
            field="password",
        )
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Compare a candidate password with a stored bcrypt hash."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Unreadable password hash encountered during login")
        return False


# ══════════════════════════════════════════════════════════════════════════
# Session Tokens
# ══════════════════════════════════════════════════════════════════════════


def create_access_token(user_id: uuid.UUID, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.jwt_expires_minutes)
    payload = {"sub": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Verify signature and expiry and return the user id the token names.

    Raises:
        UnauthorizedError for any invalid, expired or malformed token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(message="Session expired, please log in again")
    except jwt.PyJWTError as e:
        raise UnauthorizedError(message="Invalid token", context={"error": str(e)})

    try:
        return uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise UnauthorizedError(message="Invalid token subject")


# ══════════════════════════════════════════════════════════════════════════
# Service
# ══════════════════════════════════════════════════════════════════════════


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Registration, login and token resolution.

    Stateless: the database session arrives with each call.
    """

    async def register(self, db: AsyncSession, data: RegisterRequest) -> AuthResponse:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: email already registered (pre-check or unique index)
            DatabaseError: insert failed for another reason
        """
        email = _normalize_email(data.email)
        try:
            existing = await db.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(message="User already exists", context={"email": email})

            password_hash = await run_in_threadpool(hash_password, data.password)
            user = User(
                email=email,
                password_hash=password_hash,
                role=data.role.value,
                display_name=data.display_name,
            )
            db.add(user)
            await db.flush()
        except ArtfolioError:
            raise
        except IntegrityError:
            raise ConflictError(message="User already exists", context={"email": email})
        except SQLAlchemyError as e:
            logger.error("Database error during registration: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Registered %s account %s", user.role, user.id)
        return AuthResponse(
            token=create_access_token(user.id),
            user=AuthUser.model_validate(user),
        )

    async def login(self, db: AsyncSession, data: LoginRequest) -> AuthResponse:
        """
        Check credentials, stamp last_login and issue a token.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
        """
        email = _normalize_email(data.email)
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            raise InvalidCredentialsError(context={"reason": "unknown_email"})

        matches = await run_in_threadpool(verify_password, data.password, user.password_hash)
        if not matches:
            raise InvalidCredentialsError(context={"reason": "password_mismatch", "user_id": str(user.id)})

        try:
            user.last_login = datetime.now(timezone.utc)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to record login for %s: %s", user.id, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("User %s logged in", user.id)
        return AuthResponse(
            token=create_access_token(user.id),
            user=AuthUser.model_validate(user),
        )

    async def resolve_identity(self, db: AsyncSession, token: Optional[str]) -> Identity:
        """
        Turn a raw token into the caller's Identity.

        Raises:
            UnauthorizedError: token missing, invalid, expired, or user gone
        """
        if not token:
            raise UnauthorizedError(message="No token, authorization denied")

        user_id = decode_access_token(token)
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error resolving identity: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            raise UnauthorizedError(message="User not found", context={"user_id": str(user_id)})
        return Identity(user=user)


auth_service = AuthService()
