"""Write model for the budget ledger. Returns DTOs, never ORM models."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from planner.budget import ledger
from planner.budget.dtos import BudgetCategoryDTO, BudgetDTO, ExpenseDTO, PaymentSplitDTO
from planner.events.aggregate import get_budget, get_category, get_expense, get_split
from planner.events.repository.write_models import SqlEventAggregateWriteModel


class BudgetWriteModel(ABC):
    @abstractmethod
    async def create_budget(
        self, event_id: UUID, total_budget: Decimal, with_default_categories: bool = False
    ) -> BudgetDTO:
        """Create the event's only budget; a second one raises ``AlreadyExists``."""
        raise NotImplementedError

    @abstractmethod
    async def set_total_budget(self, event_id: UUID, total_budget: Decimal) -> BudgetDTO:
        raise NotImplementedError

    @abstractmethod
    async def add_category(
        self,
        event_id: UUID,
        name: str,
        allocated: Decimal = Decimal("0"),
        icon: str = "dollarsign.circle",
        color: str = "purple",
        sort_order: int | None = None,
    ) -> BudgetCategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def set_allocation(
        self, event_id: UUID, category_id: UUID, allocated: Decimal
    ) -> BudgetCategoryDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_category(self, event_id: UUID, category_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def add_expense(
        self,
        event_id: UUID,
        category_id: UUID,
        name: str,
        amount: Decimal,
        is_paid: bool = False,
        vendor_name: str | None = None,
        paid_by_name: str | None = None,
        due_date: datetime | None = None,
    ) -> ExpenseDTO:
        raise NotImplementedError

    @abstractmethod
    async def mark_paid(self, event_id: UUID, expense_id: UUID) -> ExpenseDTO:
        raise NotImplementedError

    @abstractmethod
    async def mark_unpaid(self, event_id: UUID, expense_id: UUID) -> ExpenseDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_expense(self, event_id: UUID, expense_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def record_split(
        self,
        event_id: UUID,
        name: str,
        share_amount: Decimal,
        paid_amount: Decimal = Decimal("0"),
        email: str | None = None,
    ) -> PaymentSplitDTO:
        raise NotImplementedError

    @abstractmethod
    async def record_split_payment(
        self, event_id: UUID, split_id: UUID, amount: Decimal
    ) -> PaymentSplitDTO:
        raise NotImplementedError

    @abstractmethod
    async def remove_split(self, event_id: UUID, split_id: UUID) -> None:
        raise NotImplementedError


class SqlBudgetWriteModel(SqlEventAggregateWriteModel, BudgetWriteModel):
    async def create_budget(
        self, event_id: UUID, total_budget: Decimal, with_default_categories: bool = False
    ) -> BudgetDTO:
        async with self._event_aggregate(event_id, "create_budget") as event:
            budget = ledger.create_budget(event, total_budget, with_default_categories)
        return BudgetDTO.from_budget(budget)

    async def set_total_budget(self, event_id: UUID, total_budget: Decimal) -> BudgetDTO:
        operation = "set_total_budget"
        async with self._event_aggregate(event_id, operation) as event:
            budget = ledger.set_total_budget(get_budget(event, operation), total_budget)
        return BudgetDTO.from_budget(budget)

    async def add_category(
        self,
        event_id: UUID,
        name: str,
        allocated: Decimal = Decimal("0"),
        icon: str = "dollarsign.circle",
        color: str = "purple",
        sort_order: int | None = None,
    ) -> BudgetCategoryDTO:
        operation = "add_category"
        async with self._event_aggregate(event_id, operation) as event:
            category = ledger.add_category(
                get_budget(event, operation),
                name,
                allocated=allocated,
                icon=icon,
                color=color,
                sort_order=sort_order,
            )
        return BudgetCategoryDTO.from_category(category)

    async def set_allocation(
        self, event_id: UUID, category_id: UUID, allocated: Decimal
    ) -> BudgetCategoryDTO:
        operation = "set_allocation"
        async with self._event_aggregate(event_id, operation) as event:
            category = ledger.set_allocation(get_category(event, category_id, operation), allocated)
        return BudgetCategoryDTO.from_category(category)

    async def remove_category(self, event_id: UUID, category_id: UUID) -> None:
        operation = "remove_category"
        async with self._event_aggregate(event_id, operation) as event:
            ledger.remove_category(get_budget(event, operation), category_id)

    async def add_expense(
        self,
        event_id: UUID,
        category_id: UUID,
        name: str,
        amount: Decimal,
        is_paid: bool = False,
        vendor_name: str | None = None,
        paid_by_name: str | None = None,
        due_date: datetime | None = None,
    ) -> ExpenseDTO:
        operation = "add_expense"
        async with self._event_aggregate(event_id, operation) as event:
            expense = ledger.add_expense(
                get_category(event, category_id, operation),
                name,
                amount,
                is_paid=is_paid,
                vendor_name=vendor_name,
                paid_by_name=paid_by_name,
                due_date=due_date,
            )
        return ExpenseDTO.from_expense(expense)

    async def mark_paid(self, event_id: UUID, expense_id: UUID) -> ExpenseDTO:
        operation = "mark_paid"
        async with self._event_aggregate(event_id, operation) as event:
            expense = ledger.mark_paid(get_expense(event, expense_id, operation))
        return ExpenseDTO.from_expense(expense)

    async def mark_unpaid(self, event_id: UUID, expense_id: UUID) -> ExpenseDTO:
        operation = "mark_unpaid"
        async with self._event_aggregate(event_id, operation) as event:
            expense = ledger.mark_unpaid(get_expense(event, expense_id, operation))
        return ExpenseDTO.from_expense(expense)

    async def remove_expense(self, event_id: UUID, expense_id: UUID) -> None:
        operation = "remove_expense"
        async with self._event_aggregate(event_id, operation) as event:
            expense = get_expense(event, expense_id, operation)
            category = get_category(event, expense.category_id, operation)
            ledger.remove_expense(category, expense_id)

    async def record_split(
        self,
        event_id: UUID,
        name: str,
        share_amount: Decimal,
        paid_amount: Decimal = Decimal("0"),
        email: str | None = None,
    ) -> PaymentSplitDTO:
        operation = "record_split"
        async with self._event_aggregate(event_id, operation) as event:
            split = ledger.record_split(
                get_budget(event, operation), name, share_amount, paid_amount, email=email
            )
        return PaymentSplitDTO.from_split(split)

    async def record_split_payment(
        self, event_id: UUID, split_id: UUID, amount: Decimal
    ) -> PaymentSplitDTO:
        operation = "record_split_payment"
        async with self._event_aggregate(event_id, operation) as event:
            split = ledger.record_split_payment(get_split(event, split_id, operation), amount)
        return PaymentSplitDTO.from_split(split)

    async def remove_split(self, event_id: UUID, split_id: UUID) -> None:
        operation = "remove_split"
        async with self._event_aggregate(event_id, operation) as event:
            ledger.remove_split(get_budget(event, operation), split_id)
