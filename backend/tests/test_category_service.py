"""Category registry tests: ordering, uniqueness, lookups."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from artfolio.exceptions import ConflictError, DatabaseError, NotFoundError
from artfolio.schemas.category import CategoryCreate
from artfolio.services.category_service import CategoryService


class TestCategories:

    def setup_method(self):
        self.service = CategoryService()

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_name(self, db_session, artist):
        for name in ("Sculpture", "Photography", "Painting"):
            await self.service.create_category(db_session, artist.identity, CategoryCreate(name=name))

        names = [c.name for c in await self.service.list_categories(db_session)]
        assert names == ["Painting", "Photography", "Sculpture"]

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts_case_insensitively(self, db_session, client):
        await self.service.create_category(db_session, client.identity, CategoryCreate(name="Ceramics"))
        with pytest.raises(ConflictError, match="Category already exists"):
            await self.service.create_category(db_session, client.identity, CategoryCreate(name="ceramics"))

    @pytest.mark.asyncio
    async def test_get(self, db_session, artist):
        created = await self.service.create_category(
            db_session,
            artist.identity,
            CategoryCreate(name="Digital", description="Born-digital work"),
        )
        fetched = await self.service.get_category(db_session, str(created.id))
        assert fetched.description == "Born-digital work"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["nope", str(uuid.uuid4())])
    async def test_get_missing(self, db_session, bad_id):
        with pytest.raises(NotFoundError, match="Category not found"):
            await self.service.get_category(db_session, bad_id)


class TestDatabaseFailures:
    """Driver errors surface as DatabaseError, never as raw SQLAlchemy exceptions."""

    def setup_method(self):
        self.service = CategoryService()

    @pytest.fixture
    def broken_session(self):
        session = AsyncMock()
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))
        session.get = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))
        session.add = MagicMock()
        return session

    @pytest.mark.asyncio
    async def test_list(self, broken_session):
        with pytest.raises(DatabaseError):
            await self.service.list_categories(broken_session)

    @pytest.mark.asyncio
    async def test_get(self, broken_session):
        with pytest.raises(DatabaseError):
            await self.service.get_category(broken_session, str(uuid.uuid4()))
