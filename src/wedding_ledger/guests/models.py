"""
Guest Domain Models - Invitees, rate configuration and projections

Guests belong to an event; a family group is only a classification key.
The stats models here are what callers hand to the projector and to the
alert triggers.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field, field_validator


class RsvpStatus(str, Enum):
    """
    Guest response state

    PENDING: invited, no response yet
    ACCEPTED: attending
    DECLINED: not attending
    MAYBE: tentative
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    MAYBE = "maybe"

    @classmethod
    def _missing_(cls, value: object) -> "RsvpStatus | None":
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        aliases = {
            "attending": cls.ACCEPTED,
            "not_attending": cls.DECLINED,
            "": cls.PENDING,
        }
        if normalized in aliases:
            return aliases[normalized]
        for member in cls:
            if member.value == normalized:
                return member
        return None


class GuestSource(str, Enum):
    """How the guest row was created"""

    MANUAL = "manual"
    IMPORTED = "imported"
    FAMILY = "family"


class FamilySide(str, Enum):
    BRIDE = "bride"
    GROOM = "groom"


class Guest(BaseModel):
    """
    One invitee

    Boolean flags arrive from SQLite as 0/1 or NULL; NULL reads as False.
    """

    guest_id: str | None = None
    event_id: str | None = None
    first_name: str
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    rsvp_status: RsvpStatus = RsvpStatus.PENDING
    rsvp_updated_at: datetime | None = None
    is_outstation: bool = False
    needs_room: bool = False
    needs_pickup: bool = False
    room_assigned: bool = False
    pickup_assigned: bool = False
    is_vip: bool = False
    is_elderly: bool = False
    is_child: bool = False
    family_group: str | None = None
    family_side: FamilySide | None = None
    group_id: str | None = None
    plus_one_allowed: bool = False
    source: GuestSource = GuestSource.MANUAL

    @field_validator("rsvp_status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return RsvpStatus.PENDING if value is None else value

    @field_validator(
        "is_outstation",
        "needs_room",
        "needs_pickup",
        "room_assigned",
        "pickup_assigned",
        "is_vip",
        "is_elderly",
        "is_child",
        "plus_one_allowed",
        mode="before",
    )
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def is_confirmed(self) -> bool:
        return self.rsvp_status == RsvpStatus.ACCEPTED


class RateConfig(BaseModel):
    """
    Per-event unit costs supplied by the caller

    Rates vary per event, so the projector never carries defaults of its
    own; an unset rate is simply zero.
    """

    catering_per_head: int = Field(default=0, ge=0)
    room_cost_per_night: int = Field(default=0, ge=0)
    transport_cost_per_seat: int = Field(default=0, ge=0)
    guests_per_room: int = Field(
        default=2,
        ge=1,
        description="Occupancy rule callers use to turn outstation headcount into rooms",
    )


class CostImpact(BaseModel):
    """Projected spend attributable to guest headcount"""

    catering: int = Field(default=0, ge=0)
    rooms: int = Field(default=0, ge=0)
    transport: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    pending_impact: int = Field(default=0, ge=0)


class RateColor(str, Enum):
    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class ConfirmationRate(BaseModel):
    rate: int = Field(ge=0, le=100)
    color: RateColor


class GuestStats(BaseModel):
    """RSVP counts for one event"""

    total: int = 0
    confirmed: int = 0
    pending: int = 0
    declined: int = 0
    maybe: int = 0
    confirmation_rate: int = 0


class OutstationStats(BaseModel):
    """Room and pickup logistics for guests travelling in"""

    total: int = 0
    rooms_required: int = 0
    rooms_assigned: int = 0
    pickup_needed: int = 0
    pickup_assigned: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rooms_unassigned(self) -> int:
        return max(0, self.rooms_required - self.rooms_assigned)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pickup_unassigned(self) -> int:
        return max(0, self.pickup_needed - self.pickup_assigned)


class VIPStats(BaseModel):
    total: int = 0
    elderly: int = 0
    children: int = 0


class HouseholdCompleteness(BaseModel):
    """How many family groups have fully answered the invitation"""

    percentage: int = 0
    fully_responded: int = 0
    partial_responses: int = 0
    pending: int = 0


class GuestGroup(BaseModel):
    """A named bucket of guests ("College friends"); names are unique per event, ignoring case"""

    group_id: str | None = None
    event_id: str | None = None
    name: str
    group_type: str = "other"


class Family(BaseModel):
    """
    A household invited together

    Members are ordinary guests carrying the family name in family_group;
    the family row holds the household-level logistics.
    """

    family_id: str | None = None
    event_id: str | None = None
    family_name: str
    family_side: FamilySide
    primary_contact_name: str | None = None
    primary_contact_phone: str | None = None
    is_outstation: bool = False
    rooms_required: int = Field(default=0, ge=0)
    pickup_required: bool = False

    @field_validator("is_outstation", "pickup_required", mode="before")
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("rooms_required", mode="before")
    @classmethod
    def _default_rooms(cls, value: Any) -> Any:
        return 0 if value is None else value


class ImportResult(BaseModel):
    """Outcome of one CSV import; row-level problems are counted, not raised"""

    imported: int = 0
    skipped: int = 0
    families_created: int = 0
