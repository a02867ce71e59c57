"""Budget ledger: categories, expenses and contributor splits.

What a category has spent is the sum of its paid expenses. It is derived on
read, so marking an expense paid or unpaid is reflected immediately.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from uuid import UUID, uuid4

from planner.budget.dtos import (
    CASUAL_CATEGORIES,
    PARTY_CATEGORIES,
    WEDDING_CATEGORIES,
    CategoryTemplate,
)
from planner.errors import AlreadyExists, NotFoundError, ValidationError
from planner.events.aggregate import require_text
from planner.events.dtos import EventCategory
from planner.events.repository.orm_models import (
    Budget,
    BudgetCategory,
    Event,
    Expense,
    PaymentSplit,
)
from planner.models.base import utcnow

ZERO = Decimal("0")


def to_money(value, field: str, operation: str, entity: str) -> Decimal:
    """Coerce to a non-negative ``Decimal``."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number", operation=operation, entity=entity)
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number", operation=operation, entity=entity)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative", operation=operation, entity=entity)
    return amount


def default_categories(category: EventCategory) -> tuple[CategoryTemplate, ...]:
    category = EventCategory(category)
    if category == EventCategory.WEDDING:
        return WEDDING_CATEGORIES
    if category == EventCategory.PARTY:
        return PARTY_CATEGORIES
    return CASUAL_CATEGORIES


def create_budget(event: Event, total_budget=ZERO, with_default_categories: bool = False) -> Budget:
    operation = "create_budget"
    if event.budget is not None:
        raise AlreadyExists(
            "This event already has a budget",
            operation=operation,
            entity="Budget",
            entity_id=event.budget.uuid,
        )
    total = to_money(total_budget, "Total budget", operation, "Budget")

    now = utcnow()
    budget = Budget(
        uuid=uuid4(),
        event_id=event.uuid,
        total_budget=total,
        created_at=now,
        updated_at=now,
        categories=[],
        splits=[],
    )
    event.budget = budget
    if with_default_categories:
        for template in default_categories(event.category):
            add_category(budget, template.name, icon=template.icon, color=template.color)
    return budget


def set_total_budget(budget: Budget, total_budget) -> Budget:
    budget.total_budget = to_money(total_budget, "Total budget", "set_total_budget", "Budget")
    return budget


def add_category(
    budget: Budget,
    name: str,
    allocated=ZERO,
    icon: str = "dollarsign.circle",
    color: str = "purple",
    sort_order: int | None = None,
) -> BudgetCategory:
    operation = "add_category"
    name = require_text(name, "Category name", operation, "BudgetCategory")
    allocated = to_money(allocated, "Allocated amount", operation, "BudgetCategory")

    now = utcnow()
    category = BudgetCategory(
        uuid=uuid4(),
        budget_id=budget.uuid,
        name=name,
        icon=icon,
        color=color,
        sort_order=len(budget.categories) if sort_order is None else sort_order,
        allocated=allocated,
        created_at=now,
        updated_at=now,
        expenses=[],
    )
    budget.categories.append(category)
    return category


def set_allocation(category: BudgetCategory, allocated) -> BudgetCategory:
    category.allocated = to_money(allocated, "Allocated amount", "set_allocation", "BudgetCategory")
    return category


def remove_category(budget: Budget, category_id: UUID) -> BudgetCategory:
    for category in budget.categories:
        if category.uuid == category_id:
            budget.categories.remove(category)
            return category
    raise NotFoundError("BudgetCategory", category_id, "remove_category")


def add_expense(
    category: BudgetCategory,
    name: str,
    amount,
    is_paid: bool = False,
    vendor_name: str | None = None,
    paid_by_name: str | None = None,
    due_date: datetime | None = None,
    notes: str | None = None,
) -> Expense:
    """Add an expense; paid ones get a paid date, unpaid ones a due date (default now)."""
    operation = "add_expense"
    name = require_text(name, "Expense name", operation, "Expense")
    amount = to_money(amount, "Amount", operation, "Expense")

    now = utcnow()
    expense = Expense(
        uuid=uuid4(),
        category_id=category.uuid,
        name=name,
        amount=amount,
        is_paid=is_paid,
        paid_date=now if is_paid else None,
        due_date=None if is_paid else (due_date or now),
        vendor_name=vendor_name,
        paid_by_name=paid_by_name,
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    category.expenses.append(expense)
    return expense


def mark_paid(expense: Expense, paid_date: datetime | None = None) -> Expense:
    if expense.is_paid:
        return expense
    expense.is_paid = True
    expense.paid_date = paid_date or utcnow()
    expense.due_date = None
    return expense


def mark_unpaid(expense: Expense, due_date: datetime | None = None) -> Expense:
    if not expense.is_paid:
        return expense
    expense.is_paid = False
    expense.due_date = due_date or expense.paid_date or utcnow()
    expense.paid_date = None
    return expense


def remove_expense(category: BudgetCategory, expense_id: UUID) -> Expense:
    for expense in category.expenses:
        if expense.uuid == expense_id:
            category.expenses.remove(expense)
            return expense
    raise NotFoundError("Expense", expense_id, "remove_expense")


def record_split(
    budget: Budget,
    name: str,
    share_amount,
    paid_amount=ZERO,
    email: str | None = None,
) -> PaymentSplit:
    operation = "record_split"
    name = require_text(name, "Contributor name", operation, "PaymentSplit")
    share = to_money(share_amount, "Share amount", operation, "PaymentSplit")
    paid = to_money(paid_amount, "Paid amount", operation, "PaymentSplit")

    now = utcnow()
    split = PaymentSplit(
        uuid=uuid4(),
        budget_id=budget.uuid,
        name=name,
        email=(email or "").strip() or None,
        share_amount=share,
        paid_amount=paid,
        created_at=now,
        updated_at=now,
    )
    budget.splits.append(split)
    return split


def record_split_payment(split: PaymentSplit, amount) -> PaymentSplit:
    split.paid_amount += to_money(amount, "Payment", "record_split_payment", "PaymentSplit")
    return split


def remove_split(budget: Budget, split_id: UUID) -> PaymentSplit:
    for split in budget.splits:
        if split.uuid == split_id:
            budget.splits.remove(split)
            return split
    raise NotFoundError("PaymentSplit", split_id, "remove_split")
