"""Category routes: public listing and lookup, authenticated creation."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.database import get_db_session
from artfolio.dependencies import get_identity
from artfolio.schemas.category import CategoryCreate, CategoryResponse
from artfolio.schemas.common import ErrorResponse
from artfolio.services.auth_service import Identity
from artfolio.services.category_service import category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse], summary="List categories")
async def list_categories(db: AsyncSession = Depends(get_db_session)) -> List[CategoryResponse]:
    return await category_service.list_categories(db)


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create a category",
)
async def create_category(
    data: CategoryCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    return await category_service.create_category(db, identity, data)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a category",
)
async def get_category(
    category_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryResponse:
    return await category_service.get_category(db, category_id)
