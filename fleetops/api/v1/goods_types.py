from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_
from typing import List
from fleetops.database import get_db
from fleetops.models.user import User
from fleetops.models.goods_type import GoodsType
from fleetops.middleware.auth import get_current_active_user
from fleetops.schemas.goods_type import GoodsTypeCreate, GoodsTypeResponse

router = APIRouter()


@router.get("", response_model=List[GoodsTypeResponse])
async def list_goods_types(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Goods types ordered by name"""
    result = await db.execute(
        select(GoodsType)
        .where(GoodsType.user_id == current_user.id)
        .order_by(GoodsType.name)
    )
    return result.scalars().all()


@router.post("", response_model=GoodsTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_goods_type(
    goods_data: GoodsTypeCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Inline creation from a trip item row; returns the row to select it"""
    name = goods_data.name.strip()
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Goods type name is required"
        )

    result = await db.execute(
        select(GoodsType.id).where(
            and_(GoodsType.user_id == current_user.id, func.lower(GoodsType.name) == name.lower())
        )
    )
    if result.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Goods type '{name}' already exists"
        )

    goods_type = GoodsType(user_id=current_user.id, name=name)
    db.add(goods_type)
    await db.commit()
    await db.refresh(goods_type)
    return goods_type
