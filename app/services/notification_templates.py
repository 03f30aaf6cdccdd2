"""
Push and email message templates for date notifications.
"""
from dataclasses import dataclass
from typing import Optional
from html import escape
import enum
from app.core.config import settings
from app.core.utils import format_date_time
from app.schemas.date import DateResponse


class NotificationType(str, enum.Enum):
    """Date event kinds that produce notifications."""
    REQUEST = "request"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CREATED = "created"
    REMINDER = "reminder"


@dataclass(frozen=True)
class Recipient:
    """Contact details of one couple member, detached from the DB session."""
    user_id: str
    email: Optional[str]
    name: str
    timezone: Optional[str] = None
    push_token: Optional[str] = None

    @classmethod
    def from_member(cls, member) -> "Recipient":
        return cls(
            user_id=member.user_id,
            email=member.email,
            name=member.name,
            timezone=member.timezone,
            push_token=member.push_token
        )


@dataclass(frozen=True)
class EmailContent:
    subject: str
    text: str
    html: str


def push_title_body(date: DateResponse, kind: NotificationType, tz_name: Optional[str] = None):
    """(title, body) for a push notification."""
    when = format_date_time(date.date_time, tz_name)

    if kind == NotificationType.REQUEST:
        return f"📬 Date Request from {date.created_by_name}", f"{date.title} • {when}"
    if kind == NotificationType.ACCEPTED:
        return "✅ Date Request Accepted!", f"{date.title} is confirmed for {when}"
    if kind == NotificationType.DECLINED:
        return "Date Request Update", f"Your request for \"{date.title}\" couldn't be accepted"
    if kind == NotificationType.CREATED:
        return "💕 New Date Scheduled", f"{date.title} • {when}"
    return "⏰ Date in 1 Hour!", f"{date.title} is happening soon"


def build_push_message(token: str, date: DateResponse, kind: NotificationType,
                       tz_name: Optional[str] = None) -> dict:
    """FCM HTTP v1 request body with high-priority platform hints."""
    title, body = push_title_body(date, kind, tz_name)
    return {
        "message": {
            "token": token,
            "notification": {
                "title": title,
                "body": body
            },
            "data": {
                "dateId": str(date.id),
                "type": kind.value,
                "click_action": settings.NOTIFICATION_CLICK_ACTION
            },
            "android": {
                "priority": "high",
                "notification": {
                    "sound": "default",
                    "notification_priority": "PRIORITY_HIGH",
                    "channel_id": "date_notifications"
                }
            },
            "apns": {
                "payload": {
                    "aps": {
                        "sound": "default",
                        "badge": 1
                    }
                }
            },
            "webpush": {
                "notification": {
                    "icon": "/favicon.svg",
                    "badge": "/favicon.svg",
                    "requireInteraction": True,
                    "tag": f"date-{date.id}"
                }
            }
        }
    }


def build_email(date: DateResponse, kind: NotificationType, recipient_name: str,
                tz_name: Optional[str] = None) -> EmailContent:
    """Subject, plaintext and HTML bodies for an email notification."""
    when = format_date_time(date.date_time, tz_name)
    link = f"{settings.APP_BASE_URL.rstrip('/')}/dates"

    if kind == NotificationType.REQUEST:
        subject = f"{date.created_by_name} asked you on a date: {date.title}"
        lines = [
            f"{date.created_by_name} would like to plan \"{date.title}\" on {when}.",
            "Open SoulSync to accept or decline the request.",
        ]
    elif kind == NotificationType.ACCEPTED:
        subject = f"Your date request was accepted: {date.title}"
        lines = [
            f"Good news! \"{date.title}\" is confirmed for {when}.",
            "We'll remind you an hour before it starts.",
        ]
    elif kind == NotificationType.DECLINED:
        subject = f"Update on your date request: {date.title}"
        lines = [f"Your request for \"{date.title}\" couldn't be accepted this time."]
        if date.decline_reason:
            lines.append(f"Reason: {date.decline_reason}")
        lines.append("Why not suggest another time?")
    elif kind == NotificationType.CREATED:
        subject = f"New date scheduled: {date.title}"
        lines = [f"\"{date.title}\" has been scheduled for {when}."]
        if date.notes:
            lines.append(f"Notes: {date.notes}")
    else:
        subject = f"Reminder: {date.title} starts in 1 hour"
        lines = [f"\"{date.title}\" is happening soon ({when}). Have a wonderful time!"]

    greeting = f"Hi {recipient_name},"
    text = "\n\n".join([greeting, *lines, f"Open SoulSync: {link}", "The SoulSync team"])

    paragraphs = "\n".join(f"        <p>{escape(line)}</p>" for line in lines)
    html = f"""
      <div style="font-family: system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; padding: 16px;">
        <p>{escape(greeting)}</p>
{paragraphs}
        <p style="margin: 12px 0;">
          <a href="{escape(link)}" style="display: inline-block; padding: 10px 14px; border-radius: 10px; background: #db2777; color: #fff; text-decoration: none;">
            Open SoulSync
          </a>
        </p>
        <p style="color:#667; font-size: 13px;">Sent with love by SoulSync 💕</p>
      </div>
    """
    return EmailContent(subject=subject, text=text, html=html)
