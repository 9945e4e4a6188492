from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from sqlalchemy.orm import selectinload
from typing import Optional
from fleetops.database import get_db
from fleetops.models.user import User
from fleetops.models.vehicle import Vehicle
from fleetops.models.expense import Expense, ExpenseType
from fleetops.middleware.auth import get_current_active_user
from fleetops.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse
from fleetops.core.filters import filter_rows
from fleetops.core.totals import to_decimal

router = APIRouter()


def _vehicle_plate(expense: Expense) -> Optional[str]:
    return expense.vehicle.license_plate if expense.vehicle else None


EXPENSE_SEARCH_FIELDS = ("description", _vehicle_plate)


def to_response(expense: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=expense.id,
        type=expense.type,
        amount=float(expense.amount),
        description=expense.description,
        date=expense.date,
        vehicle_id=expense.vehicle_id,
        vehicle_plate=_vehicle_plate(expense),
        receipt=expense.receipt,
        created_at=expense.created_at,
    )


async def get_owned_expense(db: AsyncSession, user: User, expense_id: str) -> Expense:
    result = await db.execute(
        select(Expense)
        .where(and_(Expense.id == expense_id, Expense.user_id == user.id))
        .options(selectinload(Expense.vehicle))
        .execution_options(populate_existing=True)
    )
    expense = result.scalar_one_or_none()
    if not expense:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Expense not found"
        )
    return expense


async def ensure_vehicle_owned(db: AsyncSession, user: User, vehicle_id: Optional[str]):
    if not vehicle_id:
        return
    result = await db.execute(
        select(Vehicle.id).where(and_(Vehicle.id == vehicle_id, Vehicle.user_id == user.id))
    )
    if result.first() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(
    search: Optional[str] = Query(None),
    expense_type: Optional[str] = Query(None, alias="type"),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """List expenses filtered by search term and type, with their total and per-type totals"""
    result = await db.execute(
        select(Expense)
        .where(Expense.user_id == current_user.id)
        .options(selectinload(Expense.vehicle))
        .order_by(Expense.date.desc(), Expense.created_at.desc())
    )
    all_expenses = result.scalars().all()
    expenses = filter_rows(
        all_expenses,
        search=search,
        fields=EXPENSE_SEARCH_FIELDS,
        status=expense_type,
        status_field="type",
    )
    total_amount = sum((to_decimal(expense.amount) for expense in expenses), to_decimal(0))

    # Per-type totals ignore the search and type filters
    totals_by_type = {kind.value: to_decimal(0) for kind in ExpenseType}
    for expense in all_expenses:
        totals_by_type[expense.type.value] += to_decimal(expense.amount)

    return ExpenseListResponse(
        items=[to_response(expense) for expense in expenses],
        total_amount=float(total_amount),
        totals_by_type={name: float(amount) for name, amount in totals_by_type.items()},
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Get expense details"""
    return to_response(await get_owned_expense(db, current_user, expense_id))


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Record an expense"""
    await ensure_vehicle_owned(db, current_user, expense_data.vehicle_id)

    expense = Expense(user_id=current_user.id, **expense_data.model_dump())
    db.add(expense)
    await db.commit()

    return to_response(await get_owned_expense(db, current_user, expense.id))


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: str,
    expense_data: ExpenseUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Update expense fields that were sent"""
    expense = await get_owned_expense(db, current_user, expense_id)
    changes = expense_data.model_dump(exclude_unset=True)

    if "vehicle_id" in changes:
        await ensure_vehicle_owned(db, current_user, changes["vehicle_id"])

    for field, value in changes.items():
        setattr(expense, field, value)
    await db.commit()

    return to_response(await get_owned_expense(db, current_user, expense_id))


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete an expense"""
    expense = await get_owned_expense(db, current_user, expense_id)
    await db.delete(expense)
    await db.commit()
    return {"message": "Expense deleted successfully"}
