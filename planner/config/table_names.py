from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    GUESTS = "guests"
    PARTY_MEMBERS = "party_members"
    EVENT_FUNCTIONS = "event_functions"
    FUNCTION_INVITES = "function_invites"
    SEATING_TABLES = "seating_tables"
    SEAT_ASSIGNMENTS = "seat_assignments"
    BUDGETS = "budgets"
    BUDGET_CATEGORIES = "budget_categories"
    EXPENSES = "expenses"
    PAYMENT_SPLITS = "payment_splits"
    EVENT_MEMBERS = "event_members"
