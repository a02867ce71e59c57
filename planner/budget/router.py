from datetime import datetime
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr

from planner.budget.dtos import BudgetCategoryDTO, BudgetDTO, ExpenseDTO, PaymentSplitDTO
from planner.budget.write_model import BudgetWriteModel, SqlBudgetWriteModel
from planner.events.repository.read_models import EventReadModel
from planner.events.router import get_event_read_model

router = APIRouter()

BUDGET_URL = "/api/v1/events/{event_id}/budget"
CATEGORIES_URL = "/api/v1/events/{event_id}/budget/categories"
CATEGORY_URL = "/api/v1/events/{event_id}/budget/categories/{category_id}"
CATEGORY_EXPENSES_URL = "/api/v1/events/{event_id}/budget/categories/{category_id}/expenses"
EXPENSE_URL = "/api/v1/events/{event_id}/budget/expenses/{expense_id}"
EXPENSE_PAID_URL = "/api/v1/events/{event_id}/budget/expenses/{expense_id}/paid"
SPLITS_URL = "/api/v1/events/{event_id}/budget/splits"
SPLIT_URL = "/api/v1/events/{event_id}/budget/splits/{split_id}"
SPLIT_PAYMENTS_URL = "/api/v1/events/{event_id}/budget/splits/{split_id}/payments"


class BudgetCreate(BaseModel):
    total_budget: Decimal = Decimal("0")
    with_default_categories: bool = False


class BudgetTotalUpdate(BaseModel):
    total_budget: Decimal


class CategoryCreate(BaseModel):
    name: str
    allocated: Decimal = Decimal("0")
    icon: str = "dollarsign.circle"
    color: str = "purple"
    sort_order: int | None = None


class AllocationUpdate(BaseModel):
    allocated: Decimal


class ExpenseCreate(BaseModel):
    name: str
    amount: Decimal
    is_paid: bool = False
    vendor_name: str | None = None
    paid_by_name: str | None = None
    due_date: datetime | None = None


class SplitCreate(BaseModel):
    name: str
    share_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    email: EmailStr | None = None


class SplitPayment(BaseModel):
    amount: Decimal


def get_budget_write_model() -> BudgetWriteModel:
    """Dependency to get budget write model instance."""
    return SqlBudgetWriteModel()


@router.get(BUDGET_URL)
async def get_budget(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> BudgetDTO:
    return await read_model.get_budget(event_id)


@router.post(BUDGET_URL, status_code=status.HTTP_201_CREATED)
async def create_budget(
    event_id: UUID,
    request: BudgetCreate,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> BudgetDTO:
    """Create the event's budget. An event has at most one; a second request gets 409."""
    return await write_model.create_budget(
        event_id, request.total_budget, request.with_default_categories
    )


@router.patch(BUDGET_URL)
async def set_total_budget(
    event_id: UUID,
    request: BudgetTotalUpdate,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> BudgetDTO:
    return await write_model.set_total_budget(event_id, request.total_budget)


@router.post(CATEGORIES_URL, status_code=status.HTTP_201_CREATED)
async def add_category(
    event_id: UUID,
    request: CategoryCreate,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> BudgetCategoryDTO:
    return await write_model.add_category(event_id, **request.model_dump())


@router.patch(CATEGORY_URL)
async def set_allocation(
    event_id: UUID,
    category_id: UUID,
    request: AllocationUpdate,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> BudgetCategoryDTO:
    return await write_model.set_allocation(event_id, category_id, request.allocated)


@router.delete(CATEGORY_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_category(
    event_id: UUID,
    category_id: UUID,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> Response:
    await write_model.remove_category(event_id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(CATEGORY_EXPENSES_URL, status_code=status.HTTP_201_CREATED)
async def add_expense(
    event_id: UUID,
    category_id: UUID,
    request: ExpenseCreate,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> ExpenseDTO:
    return await write_model.add_expense(event_id, category_id, **request.model_dump())


@router.delete(EXPENSE_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_expense(
    event_id: UUID,
    expense_id: UUID,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> Response:
    await write_model.remove_expense(event_id, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(EXPENSE_PAID_URL)
async def mark_paid(
    event_id: UUID,
    expense_id: UUID,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> ExpenseDTO:
    return await write_model.mark_paid(event_id, expense_id)


@router.delete(EXPENSE_PAID_URL)
async def mark_unpaid(
    event_id: UUID,
    expense_id: UUID,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> ExpenseDTO:
    return await write_model.mark_unpaid(event_id, expense_id)


@router.post(SPLITS_URL, status_code=status.HTTP_201_CREATED)
async def record_split(
    event_id: UUID,
    request: SplitCreate,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> PaymentSplitDTO:
    return await write_model.record_split(event_id, **request.model_dump())


@router.post(SPLIT_PAYMENTS_URL)
async def record_split_payment(
    event_id: UUID,
    split_id: UUID,
    request: SplitPayment,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> PaymentSplitDTO:
    return await write_model.record_split_payment(event_id, split_id, request.amount)


@router.delete(SPLIT_URL, status_code=status.HTTP_204_NO_CONTENT)
async def remove_split(
    event_id: UUID,
    split_id: UUID,
    write_model: BudgetWriteModel = Depends(get_budget_write_model),
) -> Response:
    await write_model.remove_split(event_id, split_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
