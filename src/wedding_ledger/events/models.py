"""
Event Models - The wedding (or other celebration) being planned

An event owns its budget entries and its guests. It carries the two
numbers the aggregation core cannot derive: the total budget ceiling and
the per-event rates.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field
from sqlmodel import SQLModel

from wedding_ledger.guests.models import RateConfig


class WeddingEvent(BaseModel):
    """
    One planned event

    total_budget of 0 means no ceiling has been set yet.
    """

    event_id: str
    name: str
    event_date: date | None = None
    rsvp_cutoff: datetime | None = None
    total_budget: int = Field(default=0, ge=0)
    rates: RateConfig = Field(default_factory=RateConfig)
    created_at: datetime

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "event_id": "evt-001",
                    "name": "Asha & Rohan",
                    "event_date": "2026-12-12",
                    "rsvp_cutoff": "2026-11-20T00:00:00Z",
                    "total_budget": 420000000,
                    "rates": {
                        "catering_per_head": 150000,
                        "room_cost_per_night": 400000,
                        "transport_cost_per_seat": 50000,
                        "guests_per_room": 2,
                    },
                    "created_at": "2026-06-01T10:00:00Z",
                }
            ]
        }
    }


# Read models (for list queries)


class EventListing(SQLModel):
    """
    Read model for event lists

    Denormalized row counts so a list screen never loads every guest.
    """

    event_id: str
    name: str
    event_date: date | None = None
    total_budget: int = 0
    guest_count: int = 0
    budget_entry_count: int = 0
    created_at: datetime
