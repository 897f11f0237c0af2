"""Deadline and status badges, computed per request and never stored."""

from datetime import datetime

import pytz
from dateutil.relativedelta import relativedelta
from flask import current_app

PROJECT_DURATION = relativedelta(months=4)

DUE_SOON_DAYS = 7
UPCOMING_DAYS = 30


def today():
    tz = pytz.timezone(current_app.config.get('APP_TIMEZONE', 'UTC'))
    return datetime.now(tz).date()


def compute_end_date(start_date):
    """Start date plus four calendar months, clamped to the month's end."""
    if start_date is None:
        return None
    return start_date + PROJECT_DURATION


def plural_days(days):
    return "1 day" if days == 1 else f"{days} days"


def deadline_badge(target_date, reference=None):
    if target_date is None:
        return {"days_remaining": None, "urgency": "not_set",
                "text": "Not set", "class": "bg-secondary"}

    if isinstance(target_date, datetime):
        target_date = target_date.date()
    reference = reference or today()
    days = (target_date - reference).days

    if days < 0:
        urgency, text, css = "overdue", f"Overdue by {plural_days(abs(days))}", "bg-danger"
    elif days == 0:
        urgency, text, css = "due_today", "Due today", "bg-danger"
    elif days <= DUE_SOON_DAYS:
        urgency, text, css = "due_soon", f"Due in {plural_days(days)}", "bg-warning"
    elif days <= UPCOMING_DAYS:
        urgency, text, css = "upcoming", f"{days} days remaining", "bg-info"
    else:
        urgency, text, css = "on_track", f"{days} days remaining", "bg-success"

    return {"days_remaining": days, "urgency": urgency, "text": text, "class": css}


def status_badge_class(status_name):
    name = (status_name or '').lower()
    if 'completed' in name:
        return 'bg-success'
    if 'in progress' in name:
        return 'bg-primary'
    if 'yet to start' in name:
        return 'bg-warning'
    return 'bg-secondary'


def is_upcoming(value, reference=None):
    return value is not None and value >= (reference or today())
