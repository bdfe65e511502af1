"""
Artfolio Backend — Artwork Service Unit Tests
==============================================

What:  Catalog rules: who may create/change artworks, pagination, lookups.

Test Strategy:
    ✅ Only artists create; title, category and image are required
    ✅ update/delete: missing → 404 before ownership → 403
    ✅ pages = ceil(total / limit), newest first, stable across pages
    ✅ Detail view joins the artist's public profile (no email)
"""

import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from artfolio.exceptions import ForbiddenError, NotFoundError, ValidationError
from artfolio.models.artwork import Artwork
from artfolio.schemas.artwork import ArtworkUpdate
from artfolio.services.artwork_service import ArtworkService, parse_tags
from artfolio.services.media_service import MediaKind, media_service


async def add_artworks(db_session, artist_id, count, category="Painting"):
    """Insert artworks directly with strictly increasing created_at."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    artworks = []
    for i in range(count):
        artwork = Artwork(
            title=f"Piece {i}",
            category=category,
            image=f"artwork-{i}.png",
            artist_id=artist_id,
            created_at=base + timedelta(minutes=i),
        )
        db_session.add(artwork)
        artworks.append(artwork)
    await db_session.flush()
    return artworks


class TestParseTags:

    def test_empty(self):
        assert parse_tags(None) == []
        assert parse_tags("") == []

    def test_trims_and_deduplicates(self):
        assert parse_tags(" oil, portrait ,,oil, blue ") == ["oil", "portrait", "blue"]


class TestCreateArtwork:

    def setup_method(self):
        self.service = ArtworkService()

    @pytest.mark.asyncio
    async def test_client_cannot_create(self, db_session, client, sample_image_bytes):
        with pytest.raises(ForbiddenError, match="Only artists"):
            await self.service.create_artwork(
                db_session, client.identity, "Title", "Painting", None, None,
                "a.png", sample_image_bytes, "image/png",
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title, category", [("", "Painting"), ("Title", "   "), (None, None)])
    async def test_title_and_category_required(self, db_session, artist, sample_image_bytes, title, category):
        with pytest.raises(ValidationError, match="Title and category required"):
            await self.service.create_artwork(
                db_session, artist.identity, title, category, None, None,
                "a.png", sample_image_bytes, "image/png",
            )

    @pytest.mark.asyncio
    async def test_image_required(self, db_session, artist):
        with pytest.raises(ValidationError, match="Artwork image required"):
            await self.service.create_artwork(
                db_session, artist.identity, "Title", "Painting", None, None, None, None, None,
            )

    @pytest.mark.asyncio
    async def test_create_stores_image_variants(self, db_session, artist, sample_image_bytes):
        created = await self.service.create_artwork(
            db_session,
            artist.identity,
            title="Harbour at Dusk",
            category="Painting",
            description="  Oil on linen  ",
            tags="oil, harbour",
            filename="harbour.png",
            content=sample_image_bytes,
            content_type="image/png",
        )

        assert created.artist_id == artist.id
        assert created.description == "Oil on linen"
        assert created.tags == ["oil", "harbour"]
        directory = media_service.directory_for(MediaKind.ARTWORK)
        for name in (created.image, created.thumbnail, created.medium):
            assert (directory / name).is_file()


class TestListArtworks:

    def setup_method(self):
        self.service = ArtworkService()

    @pytest.mark.asyncio
    async def test_pagination(self, db_session, artist):
        await add_artworks(db_session, artist.id, 25)

        first = await self.service.list_artworks(db_session, page=1, limit=10)
        last = await self.service.list_artworks(db_session, page=3, limit=10)

        assert first.total == 25
        assert first.pages == 3
        assert [a.title for a in first.artworks][:2] == ["Piece 24", "Piece 23"]
        assert [a.title for a in last.artworks] == [f"Piece {i}" for i in range(4, -1, -1)]
        assert first.artworks[0].artist.display_name == "Ada Painter"

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, db_session, artist):
        await add_artworks(db_session, artist.id, 3)
        result = await self.service.list_artworks(db_session, page=5, limit=10)
        assert result.artworks == []
        assert result.total == 3
        assert result.pages == 1

    @pytest.mark.asyncio
    async def test_offset_beyond_integer_range_is_not_queried(self, db_session, artist):
        await add_artworks(db_session, artist.id, 2)
        result = await self.service.list_artworks(db_session, page=10**20, limit=100)
        assert result.artworks == []
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_empty_catalog(self, db_session):
        result = await self.service.list_artworks(db_session)
        assert result.total == 0
        assert result.pages == 0

    @pytest.mark.asyncio
    async def test_filters(self, db_session, artist, other_artist):
        await add_artworks(db_session, artist.id, 2, category="Painting")
        await add_artworks(db_session, other_artist.id, 3, category="Sculpture")

        by_category = await self.service.list_artworks(db_session, category="Sculpture")
        by_artist = await self.service.list_artworks(db_session, artist_id=str(artist.id))
        bad_artist = await self.service.list_artworks(db_session, artist_id="garbage")

        assert by_category.total == 3
        assert {a.artist_id for a in by_category.artworks} == {other_artist.id}
        assert by_artist.total == 2
        assert bad_artist.total == 0

    @pytest.mark.asyncio
    async def test_list_by_artist(self, db_session, artist, other_artist):
        await add_artworks(db_session, artist.id, 2)
        await add_artworks(db_session, other_artist.id, 1)

        result = await self.service.list_by_artist(db_session, str(artist.id))

        assert [a.title for a in result] == ["Piece 1", "Piece 0"]


class TestGetUpdateDelete:

    def setup_method(self):
        self.service = ArtworkService()

    @pytest.mark.asyncio
    async def test_detail_joins_public_artist_profile(self, db_session, artist):
        (artwork,) = await add_artworks(db_session, artist.id, 1)

        detail = await self.service.get_artwork(db_session, str(artwork.id))

        assert detail.artist.id == artist.id
        assert "email" not in detail.artist.model_dump()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["xyz", str(uuid.uuid4())])
    async def test_detail_not_found(self, db_session, bad_id):
        with pytest.raises(NotFoundError, match="Artwork not found"):
            await self.service.get_artwork(db_session, bad_id)

    @pytest.mark.asyncio
    async def test_partial_update_by_owner(self, db_session, artist):
        (artwork,) = await add_artworks(db_session, artist.id, 1)

        updated = await self.service.update_artwork(
            db_session,
            artist.identity,
            str(artwork.id),
            ArtworkUpdate(title="Renamed", tags=["new"]),
        )

        assert updated.title == "Renamed"
        assert updated.tags == ["new"]
        assert updated.category == "Painting"

    @pytest.mark.asyncio
    async def test_null_title_is_ignored(self, db_session, artist):
        (artwork,) = await add_artworks(db_session, artist.id, 1)
        updated = await self.service.update_artwork(
            db_session, artist.identity, str(artwork.id), ArtworkUpdate(title=None)
        )
        assert updated.title == "Piece 0"

    @pytest.mark.asyncio
    async def test_update_by_other_artist_forbidden(self, db_session, artist, other_artist):
        (artwork,) = await add_artworks(db_session, artist.id, 1)
        with pytest.raises(ForbiddenError):
            await self.service.update_artwork(
                db_session, other_artist.identity, str(artwork.id), ArtworkUpdate(title="Mine now")
            )

    @pytest.mark.asyncio
    async def test_missing_checked_before_ownership(self, db_session, client):
        with pytest.raises(NotFoundError):
            await self.service.delete_artwork(db_session, client.identity, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_delete_by_other_artist_forbidden(self, db_session, artist, other_artist):
        (artwork,) = await add_artworks(db_session, artist.id, 1)
        with pytest.raises(ForbiddenError):
            await self.service.delete_artwork(db_session, other_artist.identity, str(artwork.id))
        assert await db_session.get(Artwork, artwork.id) is not None

    @pytest.mark.asyncio
    async def test_delete_removes_record_and_files(self, db_session, artist, sample_image_bytes):
        created = await self.service.create_artwork(
            db_session, artist.identity, "Gone Soon", "Painting", None, None,
            "gone.png", sample_image_bytes, "image/png",
        )
        directory: Path = media_service.directory_for(MediaKind.ARTWORK)

        await self.service.delete_artwork(db_session, artist.identity, str(created.id))

        assert await db_session.get(Artwork, created.id) is None
        assert not (directory / created.image).exists()
        assert not (directory / created.thumbnail).exists()
