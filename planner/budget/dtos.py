from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from planner.events.repository.orm_models import Budget, BudgetCategory, Expense, PaymentSplit


@dataclass(frozen=True)
class CategoryTemplate:
    name: str
    icon: str
    color: str


WEDDING_CATEGORIES = (
    CategoryTemplate("Venue", "building.2", "purple"),
    CategoryTemplate("Catering", "fork.knife", "pink"),
    CategoryTemplate("Photography", "camera", "blue"),
    CategoryTemplate("Flowers", "leaf", "green"),
    CategoryTemplate("Music/DJ", "music.note", "orange"),
    CategoryTemplate("Attire", "tshirt", "indigo"),
    CategoryTemplate("Invitations", "envelope", "teal"),
    CategoryTemplate("Decorations", "sparkles", "yellow"),
    CategoryTemplate("Transportation", "car", "gray"),
    CategoryTemplate("Miscellaneous", "ellipsis.circle", "secondary"),
)

PARTY_CATEGORIES = (
    CategoryTemplate("Venue", "building.2", "purple"),
    CategoryTemplate("Food & Drinks", "fork.knife", "pink"),
    CategoryTemplate("Decorations", "sparkles", "yellow"),
    CategoryTemplate("Entertainment", "music.note", "orange"),
    CategoryTemplate("Favors", "gift", "teal"),
)

CASUAL_CATEGORIES = (
    CategoryTemplate("Food", "fork.knife", "pink"),
    CategoryTemplate("Drinks", "cup.and.saucer", "blue"),
    CategoryTemplate("Supplies", "bag", "orange"),
    CategoryTemplate("Miscellaneous", "ellipsis.circle", "secondary"),
)


@dataclass(frozen=True)
class ExpenseDTO:
    id: UUID
    name: str
    amount: Decimal
    is_paid: bool
    paid_date: datetime | None = None
    due_date: datetime | None = None
    vendor_name: str | None = None
    paid_by_name: str | None = None
    notes: str | None = None

    @classmethod
    def from_expense(cls, expense: "Expense") -> "ExpenseDTO":
        return cls(
            id=expense.uuid,
            name=expense.name,
            amount=expense.amount,
            is_paid=expense.is_paid,
            paid_date=expense.paid_date,
            due_date=expense.due_date,
            vendor_name=expense.vendor_name,
            paid_by_name=expense.paid_by_name,
            notes=expense.notes,
        )


@dataclass(frozen=True)
class BudgetCategoryDTO:
    id: UUID
    name: str
    allocated: Decimal
    spent: Decimal
    remaining: Decimal
    percent_spent: float
    is_over_budget: bool
    sort_order: int
    icon: str | None = None
    color: str | None = None
    expenses: list[ExpenseDTO] = field(default_factory=list)

    @classmethod
    def from_category(cls, category: "BudgetCategory") -> "BudgetCategoryDTO":
        return cls(
            id=category.uuid,
            name=category.name,
            allocated=category.allocated,
            spent=category.spent,
            remaining=category.remaining,
            percent_spent=category.percent_spent,
            is_over_budget=category.is_over_budget,
            sort_order=category.sort_order,
            icon=category.icon,
            color=category.color,
            expenses=[ExpenseDTO.from_expense(e) for e in category.expenses],
        )


@dataclass(frozen=True)
class PaymentSplitDTO:
    id: UUID
    name: str
    share_amount: Decimal
    paid_amount: Decimal
    balance: Decimal
    is_paid_up: bool
    email: str | None = None

    @classmethod
    def from_split(cls, split: "PaymentSplit") -> "PaymentSplitDTO":
        return cls(
            id=split.uuid,
            name=split.name,
            share_amount=split.share_amount,
            paid_amount=split.paid_amount,
            balance=split.balance,
            is_paid_up=split.is_paid_up,
            email=split.email,
        )


@dataclass(frozen=True)
class BudgetDTO:
    """DTO for the budget ledger with every derived total."""

    id: UUID
    total_budget: Decimal
    total_allocated: Decimal
    total_spent: Decimal
    remaining: Decimal
    percent_spent: float
    total_paid: Decimal
    total_pending: Decimal
    categories: list[BudgetCategoryDTO] = field(default_factory=list)
    splits: list[PaymentSplitDTO] = field(default_factory=list)

    @classmethod
    def from_budget(cls, budget: "Budget") -> "BudgetDTO":
        return cls(
            id=budget.uuid,
            total_budget=budget.total_budget,
            total_allocated=budget.total_allocated,
            total_spent=budget.total_spent,
            remaining=budget.remaining,
            percent_spent=budget.percent_spent,
            total_paid=budget.total_paid,
            total_pending=budget.total_pending,
            categories=[BudgetCategoryDTO.from_category(c) for c in budget.categories],
            splits=[PaymentSplitDTO.from_split(s) for s in budget.splits],
        )
