"""
Calendar export: Google Calendar links and iCalendar files for a date.
"""
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlencode
from app.core.config import settings
from app.core.utils import utcnow

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render?action=TEMPLATE"
DEFAULT_TITLE = "Date with Partner"
DEFAULT_DETAILS = "Scheduled date via SoulSync"


def _calendar_stamp(dt: datetime) -> str:
    """yyyyMMddTHHmmssZ from a naive UTC datetime."""
    return dt.strftime("%Y%m%dT%H%M%SZ")


def _escape_ical(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def event_window(date_time: datetime):
    """Start and end of the calendar event."""
    return date_time, date_time + timedelta(hours=settings.DATE_DEFAULT_DURATION_HOURS)


def google_calendar_link(title: Optional[str], date_time: datetime, notes: Optional[str] = None) -> str:
    """Google Calendar 'add event' URL."""
    start, end = event_window(date_time)
    params = {
        "text": title or DEFAULT_TITLE,
        "dates": f"{_calendar_stamp(start)}/{_calendar_stamp(end)}",
        "details": notes or DEFAULT_DETAILS,
        "location": "",
    }
    return f"{GOOGLE_CALENDAR_URL}&{urlencode(params)}"


def ical_content(date_id: Optional[int], title: Optional[str], date_time: datetime,
                 notes: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """iCalendar document with a one-hour display alarm."""
    start, end = event_window(date_time)
    now = now or utcnow()
    uid = date_id if date_id is not None else int(now.timestamp() * 1000)

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//SoulSync//Date Planner//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"DTSTART:{_calendar_stamp(start)}",
        f"DTEND:{_calendar_stamp(end)}",
        f"SUMMARY:{_escape_ical(title or DEFAULT_TITLE)}",
        f"DESCRIPTION:{_escape_ical(notes or DEFAULT_DETAILS)}",
        f"UID:{uid}@soulsync.app",
        f"DTSTAMP:{_calendar_stamp(now)}",
        "STATUS:CONFIRMED",
        "BEGIN:VALARM",
        "TRIGGER:-PT1H",
        "ACTION:DISPLAY",
        "DESCRIPTION:Date reminder",
        "END:VALARM",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines)


def ical_filename(date_id: Optional[int]) -> str:
    return f"soulsync-date-{date_id}.ics"
