"""
Budget Module - Ledger rollups, health and budget alerts

Rolls per-vendor budget entries up into category and whole-event
summaries, ranks cost drivers and raises budget alerts.
"""

from wedding_ledger.budget.models import (
    BudgetCategory,
    BudgetEntry,
    BudgetHealth,
    BudgetSummary,
    CategoryBudget,
    CostDriver,
)

__all__ = [
    "BudgetCategory",
    "BudgetEntry",
    "BudgetHealth",
    "BudgetSummary",
    "CategoryBudget",
    "CostDriver",
]
