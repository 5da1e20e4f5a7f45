"""
Reminder & Invitation Templates - Built-in message catalog

Templates are immutable and built once per process. Rendering fills
{placeholder} fields from a context mapping; delivery (email, WhatsApp)
happens elsewhere.
"""

import string
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field

from wedding_ledger.kernel.errors import TemplateNotFound, TemplateRenderError


class ReminderType(str, Enum):
    RSVP_DEADLINE = "rsvp_deadline"
    PAYMENT_DUE = "payment_due"
    TASK_DEADLINE = "task_deadline"
    EVENT_COUNTDOWN = "event_countdown"
    VENDOR_FOLLOWUP = "vendor_followup"
    GUEST_TRAVEL = "guest_travel"
    CUSTOM = "custom"


class ReminderTemplate(BaseModel):
    """
    A reminder message with its default lead time

    default_days_before is counted back from the date the reminder is
    about (RSVP deadline, payment due date, event day).
    """

    model_config = {"frozen": True}

    template_id: str
    reminder_type: ReminderType
    name: str
    title_template: str
    message_template: str
    default_days_before: int = Field(ge=0)


class InvitationContent(BaseModel):
    model_config = {"frozen": True}

    header: str
    body: str
    footer: str


class InvitationColors(BaseModel):
    model_config = {"frozen": True}

    primary: str
    secondary: str
    accent: str


class InvitationTemplate(BaseModel):
    model_config = {"frozen": True}

    template_id: str
    name: str
    invitation_type: str = "invitation"
    design: str
    content: InvitationContent
    colors: InvitationColors
    is_default: bool = False


class RenderedReminder(BaseModel):
    template_id: str
    title: str
    message: str
    scheduled_for: datetime | None = None


class TemplateCatalog(BaseModel):
    """Lookup over the built-in templates"""

    model_config = {"frozen": True}

    reminders: tuple[ReminderTemplate, ...]
    invitations: tuple[InvitationTemplate, ...]

    def get_reminder(self, template_id: str) -> ReminderTemplate:
        for template in self.reminders:
            if template.template_id == template_id:
                return template
        raise TemplateNotFound(template_id)

    def reminders_of_type(self, reminder_type: ReminderType | str) -> list[ReminderTemplate]:
        reminder_type = ReminderType(reminder_type)
        return [t for t in self.reminders if t.reminder_type == reminder_type]

    def get_invitation(self, template_id: str) -> InvitationTemplate:
        for template in self.invitations:
            if template.template_id == template_id:
                return template
        raise TemplateNotFound(template_id)

    def default_invitation(self) -> InvitationTemplate:
        for template in self.invitations:
            if template.is_default:
                return template
        return self.invitations[0]


def placeholders(text: str) -> list[str]:
    """Field names used in a template string, in order of appearance"""
    return [field for _, field, _, _ in string.Formatter().parse(text) if field]


def render_text(template_id: str, text: str, context: Mapping[str, Any]) -> str:
    """
    Fill {placeholder} fields from context

    Raises:
        TemplateRenderError: A placeholder has no value in context
    """
    for field in placeholders(text):
        if field not in context:
            raise TemplateRenderError(template_id, field)
    return text.format_map({key: str(value) for key, value in context.items()})


def schedule_for(template: ReminderTemplate, anchor: date | datetime) -> datetime:
    """
    When a reminder should go out: the anchor date minus the lead time

    A bare date is taken as midnight UTC.
    """
    if not isinstance(anchor, datetime):
        anchor = datetime.combine(anchor, time.min, tzinfo=timezone.utc)
    return anchor - timedelta(days=template.default_days_before)


def render_reminder(
    template: ReminderTemplate,
    context: Mapping[str, Any],
    anchor: date | datetime | None = None,
) -> RenderedReminder:
    return RenderedReminder(
        template_id=template.template_id,
        title=render_text(template.template_id, template.title_template, context),
        message=render_text(template.template_id, template.message_template, context),
        scheduled_for=schedule_for(template, anchor) if anchor is not None else None,
    )


@lru_cache(maxsize=1)
def load_template_catalog() -> TemplateCatalog:
    """Build the built-in catalog (once per process)"""
    reminders = (
        ReminderTemplate(
            template_id="rsvp-1",
            reminder_type=ReminderType.RSVP_DEADLINE,
            name="RSVP Reminder",
            title_template="RSVP Reminder - {event_name}",
            message_template=(
                "Dear {guest_name}, please confirm your attendance for {event_name} "
                "by {deadline}. We would be honored to have you celebrate with us!"
            ),
            default_days_before=3,
        ),
        ReminderTemplate(
            template_id="payment-1",
            reminder_type=ReminderType.PAYMENT_DUE,
            name="Payment Due Reminder",
            title_template="Payment Due: {vendor_name}",
            message_template=(
                "Reminder: Payment of {amount} is due to {vendor_name} on {due_date}. "
                "Please ensure timely payment."
            ),
            default_days_before=3,
        ),
        ReminderTemplate(
            template_id="countdown-7",
            reminder_type=ReminderType.EVENT_COUNTDOWN,
            name="7 Day Countdown",
            title_template="7 Days to {event_name}!",
            message_template=(
                "{event_name} is just a week away! We hope you're as excited as we are. "
                "See you soon!"
            ),
            default_days_before=7,
        ),
        ReminderTemplate(
            template_id="countdown-1",
            reminder_type=ReminderType.EVENT_COUNTDOWN,
            name="1 Day Countdown",
            title_template="Tomorrow is {event_name}!",
            message_template=(
                "The big day is tomorrow! {event_name} will begin at {event_time} "
                "at {venue}. We can't wait to see you!"
            ),
            default_days_before=1,
        ),
        ReminderTemplate(
            template_id="travel-1",
            reminder_type=ReminderType.GUEST_TRAVEL,
            name="Travel Reminder",
            title_template="Travel Reminder for {event_name}",
            message_template=(
                "Dear {guest_name}, your travel for {event_name} is scheduled for "
                "{travel_date}. Pickup: {pickup_details}. Safe travels!"
            ),
            default_days_before=2,
        ),
    )

    invitations = (
        InvitationTemplate(
            template_id="traditional-1",
            name="Traditional Elegance",
            design="traditional",
            content=InvitationContent(
                header="With the blessings of the Almighty",
                body="We cordially invite you to celebrate the wedding of",
                footer="Your presence will make our celebration complete",
            ),
            colors=InvitationColors(primary="#8B0000", secondary="#FFD700", accent="#FFF8DC"),
            is_default=True,
        ),
        InvitationTemplate(
            template_id="modern-1",
            name="Modern Minimal",
            design="modern",
            content=InvitationContent(
                header="You're Invited",
                body="Join us as we celebrate love",
                footer="We hope to see you there!",
            ),
            colors=InvitationColors(primary="#2C3E50", secondary="#E74C3C", accent="#ECF0F1"),
        ),
        InvitationTemplate(
            template_id="floral-1",
            name="Floral Romance",
            design="floral",
            content=InvitationContent(
                header="Together with their families",
                body="Request the pleasure of your company at the marriage of",
                footer="Dinner and celebrations to follow",
            ),
            colors=InvitationColors(primary="#D4A5A5", secondary="#4A4A4A", accent="#FDF5E6"),
        ),
        InvitationTemplate(
            template_id="royal-1",
            name="Royal Celebration",
            design="royal",
            content=InvitationContent(
                header="Shubh Vivah",
                body="You are cordially invited to witness the sacred union of",
                footer="Kindly grace the occasion with your presence",
            ),
            colors=InvitationColors(primary="#4B0082", secondary="#FFD700", accent="#FFFAF0"),
        ),
    )

    return TemplateCatalog(reminders=reminders, invitations=invitations)
