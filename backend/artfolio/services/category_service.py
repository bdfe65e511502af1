"""Category registry: list, create (unique name), fetch by id."""

import logging
from typing import List

from sqlalchemy import asc, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.exceptions import ArtfolioError, ConflictError, DatabaseError, NotFoundError
from artfolio.models.category import Category
from artfolio.schemas.category import CategoryCreate, CategoryResponse
from artfolio.services.auth_service import Identity
from artfolio.services.lookups import parse_id

logger = logging.getLogger(__name__)


class CategoryService:

    async def list_categories(self, db: AsyncSession) -> List[CategoryResponse]:
        try:
            result = await db.execute(select(Category).order_by(asc(Category.name)))
            return [CategoryResponse.model_validate(c) for c in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def create_category(
        self,
        db: AsyncSession,
        identity: Identity,
        data: CategoryCreate,
    ) -> CategoryResponse:
        """
        Any signed-in user may add a category; names are unique
        case-insensitively.
        """
        try:
            existing = await db.execute(
                select(Category.id).where(func.lower(Category.name) == data.name.lower())
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    message="Category already exists",
                    context={"name": data.name},
                )

            category = Category(name=data.name, description=data.description, image=data.image)
            db.add(category)
            await db.flush()
        except ArtfolioError:
            raise
        except IntegrityError:
            raise ConflictError(message="Category already exists", context={"name": data.name})
        except SQLAlchemyError as e:
            logger.error("Database error creating category: %s", str(e), exc_info=True)
            raise DatabaseError(context={"name": data.name})

        logger.info("User %s created category '%s'", identity.id, category.name)
        return CategoryResponse.model_validate(category)

    async def get_category(self, db: AsyncSession, category_id: str) -> CategoryResponse:
        parsed = parse_id(category_id, "category")
        try:
            category = await db.get(Category, parsed)
        except SQLAlchemyError as e:
            logger.error("Database error fetching category %s: %s", parsed, str(e))
            raise DatabaseError(context={"category_id": str(parsed)})

        if category is None:
            raise NotFoundError(resource="category", resource_id=str(parsed))
        return CategoryResponse.model_validate(category)


category_service = CategoryService()
