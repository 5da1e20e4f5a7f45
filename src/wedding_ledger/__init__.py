"""
Wedding Ledger - Budget and guest aggregation for event planning

Turns raw ledger rows (budget entries, guest records) into decision-ready
views: category totals, budget health, guest cost projections and alerts.
"""

from wedding_ledger.ledger import WeddingLedger

__version__ = "0.1.0"
__all__ = ["WeddingLedger", "__version__"]
