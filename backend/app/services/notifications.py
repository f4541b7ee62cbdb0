from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from markupsafe import Markup, escape

from app.models.inquiry import Inquiry
from app.schemas.contact import ContactCreate


@dataclass(frozen=True)
class NotificationMessage:
    to: str
    from_addr: str
    reply_to: str
    subject: str
    text: str
    html: str


def nl2br(value: Any) -> Markup:
    """Escape user text and keep its line breaks in HTML."""
    escaped = escape("" if value is None else str(value))
    return Markup(escaped.replace("\r\n", "\n").replace("\n", Markup("<br>")))


def _build_env() -> Environment:
    env = Environment(
        loader=PackageLoader("app", "templates/email"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        keep_trailing_newline=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["nl2br"] = nl2br
    return env


env = _build_env()


def render_template(template_name: str, context: dict[str, Any]) -> str:
    return env.get_template(template_name).render(**context)


def header_text(value: str) -> str:
    """Fold user text onto one line so it is safe inside a mail header."""
    return " ".join(value.split())


def _iso_utc(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def compose_contact_notification(
    contact: ContactCreate,
    *,
    sender: str,
    receiver: str,
    site_name: str,
    submitted_at: Optional[datetime] = None,
) -> NotificationMessage:
    context = {
        "contact": contact,
        "site_name": site_name,
        "submitted_at": _iso_utc(submitted_at or datetime.now(timezone.utc)),
    }
    return NotificationMessage(
        to=receiver,
        from_addr=sender,
        reply_to=contact.email,
        subject=header_text(f"Contact Message - {contact.subject}"),
        text=render_template("contact.txt", context),
        html=render_template("contact.html", context),
    )


def compose_inquiry_notification(
    inquiry: Inquiry,
    *,
    sender: str,
    receiver: str,
    site_name: str,
) -> NotificationMessage:
    context = {
        "inquiry": inquiry,
        "customer_no": inquiry.customer_no or "N/A",
        "site_name": site_name,
        "submitted_at": _iso_utc(inquiry.created_at),
    }
    return NotificationMessage(
        to=receiver,
        from_addr=sender,
        reply_to=inquiry.email,
        subject=header_text(f"New Solar Inquiry from {inquiry.name}"),
        text=render_template("inquiry.txt", context),
        html=render_template("inquiry.html", context),
    )
