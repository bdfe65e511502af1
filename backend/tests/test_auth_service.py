"""
Artfolio Backend — Auth Service Unit Tests
===========================================

What:  Password hashing, token issue/verify, registration, login and
       identity resolution.
How:   Real bcrypt (4 rounds, set in conftest) and a per-test SQLite database.

Test Strategy:
    ✅ Hashes are salted and never equal the plaintext
    ✅ Duplicate email → ConflictError, case-insensitively
    ✅ Unknown email and wrong password give the same error
    ✅ Expired, tampered and subject-less tokens → UnauthorizedError
    ✅ Token for a deleted user → UnauthorizedError
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from artfolio.config import settings
from artfolio.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    UnauthorizedError,
    ValidationError,
)
from artfolio.models.user import User, UserRole
from artfolio.schemas.user import LoginRequest, RegisterRequest
from artfolio.services.auth_service import (
    AuthService,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert hashed.startswith("$2")

    def test_same_password_gets_different_salt(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_verify_roundtrip(self):
        hashed = hash_password("secret123")
        assert verify_password("secret123", hashed) is True
        assert verify_password("wrong-one", hashed) is False

    def test_verify_garbage_hash_is_false(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_password_over_72_bytes_rejected(self):
        with pytest.raises(ValidationError):
            hash_password("é" * 40)


class TestTokens:

    def test_decode_returns_subject(self):
        user_id = uuid.uuid4()
        assert decode_access_token(create_access_token(user_id)) == user_id

    def test_default_expiry_is_seven_days(self):
        token = create_access_token(uuid.uuid4())
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        lifetime = payload["exp"] - payload["iat"]
        assert lifetime == 7 * 24 * 60 * 60

    def test_expired_token_rejected(self):
        token = create_access_token(uuid.uuid4(), expires_minutes=-1)
        with pytest.raises(UnauthorizedError, match="expired"):
            decode_access_token(token)

    def test_wrong_signature_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "some-other-secret-that-is-also-long-enough",
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_access_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(UnauthorizedError):
            decode_access_token("not.a.jwt")

    def test_non_uuid_subject_rejected(self):
        token = jwt.encode(
            {"sub": "12345", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthorizedError):
            decode_access_token(token)


class TestRegisterAndLogin:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_register_returns_token_and_public_fields(self, db_session):
        result = await self.service.register(
            db_session,
            RegisterRequest(
                email="Dora@Example.com",
                password="secret123",
                display_name="Dora",
                role=UserRole.ARTIST,
            ),
        )

        assert result.user.email == "dora@example.com"
        assert result.user.role == "artist"
        assert result.user.profile_image == "default-profile.jpg"
        assert decode_access_token(result.token) == result.user.id
        assert "password" not in result.model_dump_json()

        stored = await db_session.get(User, result.user.id)
        assert stored.password_hash != "secret123"

    @pytest.mark.asyncio
    async def test_register_duplicate_email_conflicts(self, db_session):
        data = RegisterRequest(
            email="dup@example.com", password="secret123", display_name="A", role=UserRole.CLIENT
        )
        await self.service.register(db_session, data)

        with pytest.raises(ConflictError, match="User already exists"):
            await self.service.register(
                db_session,
                data.model_copy(update={"email": "DUP@example.com"}),
            )

    @pytest.mark.asyncio
    async def test_login_success_updates_last_login(self, db_session):
        registered = await self.service.register(
            db_session,
            RegisterRequest(
                email="eve@example.com", password="secret123", display_name="Eve", role=UserRole.CLIENT
            ),
        )
        user = await db_session.get(User, registered.user.id)
        before = user.last_login

        result = await self.service.login(
            db_session, LoginRequest(email="EVE@example.com", password="secret123")
        )

        assert result.user.id == registered.user.id
        assert user.last_login >= before

    @pytest.mark.asyncio
    async def test_login_unknown_email_and_wrong_password_look_the_same(self, db_session):
        await self.service.register(
            db_session,
            RegisterRequest(
                email="finn@example.com", password="secret123", display_name="Finn", role=UserRole.CLIENT
            ),
        )

        with pytest.raises(InvalidCredentialsError) as unknown:
            await self.service.login(db_session, LoginRequest(email="nobody@example.com", password="x"))
        with pytest.raises(InvalidCredentialsError) as wrong:
            await self.service.login(db_session, LoginRequest(email="finn@example.com", password="nope"))

        assert unknown.value.message == wrong.value.message == "Invalid credentials"


class TestResolveIdentity:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_missing_token(self, db_session):
        with pytest.raises(UnauthorizedError, match="No token"):
            await self.service.resolve_identity(db_session, None)

    @pytest.mark.asyncio
    async def test_valid_token(self, db_session, artist):
        identity = await self.service.resolve_identity(db_session, artist.token)
        assert identity.id == artist.id
        assert identity.is_artist
        assert not identity.is_client

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, db_session):
        token = create_access_token(uuid.uuid4())
        with pytest.raises(UnauthorizedError, match="User not found"):
            await self.service.resolve_identity(db_session, token)
