"""
Mentor time sheets: logged working hours per project, checked against
overlaps and the daily hour limit, reviewed and approved by admins.
"""

import datetime
import io

import pandas as pd
from dateutil.relativedelta import relativedelta
from flask import current_app
from sqlalchemy import func

from models import db, Project, User, TimesheetActivity, TimesheetEntry, TimesheetApproval
from services.auth_services import log_audit_trail
from services.deadlines import today
from services.errors import ValidationFailed
from services.filters import FilterError, apply_filters, date_from, date_to, eq, flag
from services.project_services import by_any_mentor

REPORT_FILTERS = {
    'mentor': eq(TimesheetEntry.mentor_id),
    'project': eq(TimesheetEntry.project_id),
    'activity': eq(TimesheetEntry.activity_id),
    'start_date': date_from(TimesheetEntry.entry_date),
    'end_date': date_to(TimesheetEntry.entry_date),
    'is_approved': flag(TimesheetEntry.is_approved),
}

EXPORT_COLUMNS = [
    'entry_date', 'start_time', 'end_time', 'hours_worked', 'mentor_name',
    'project_code', 'project_name', 'activity_name', 'task_description',
    'is_approved', 'approver_name',
]


def hours_between(start, end):
    span = datetime.datetime.combine(datetime.date.min, end) - \
        datetime.datetime.combine(datetime.date.min, start)
    return round(span.total_seconds() / 3600, 2)


def visible_entries(ctx):
    """Admins see every mentor's entries, mentors only their own."""
    query = TimesheetEntry.query
    if not ctx.is_admin:
        query = query.filter(TimesheetEntry.mentor_id == ctx.user.id)
    return query


def can_edit(entry, ctx):
    return ctx.is_admin or entry.mentor_id == ctx.user.id


def serialize_entry(entry):
    data = entry.to_dict()
    data.update({
        "activity_name": entry.activity.activity_name if entry.activity else None,
        "color": entry.activity.color if entry.activity else None,
        "project_code": entry.project.project_id if entry.project else None,
        "project_name": entry.project.project_name if entry.project else None,
        "mentor_name": entry.mentor.full_name if entry.mentor else None,
        "approver_name": entry.approver.full_name if entry.approver else None,
    })
    return data


def mentor_projects(mentor_id):
    """Projects the mentor leads or is assigned to."""
    return Project.query.filter(by_any_mentor(mentor_id)) \
        .order_by(Project.project_name).all()


def active_activities():
    return TimesheetActivity.query.filter_by(is_active=True) \
        .order_by(TimesheetActivity.activity_name).all()


def active_mentors():
    return User.query.filter_by(user_type='mentor', status='active') \
        .order_by(User.full_name).all()


def max_hours_per_day():
    return current_app.config.get('TIMESHEET_MAX_HOURS_PER_DAY', 10)


def resolve_mentor(form, ctx):
    if form.mentor_id is None or form.mentor_id == ctx.user.id:
        return ctx.user
    if not ctx.is_admin:
        raise ValidationFailed("You can only log your own time",
                               {"mentor_id": "Only admins may log time for another mentor"})
    mentor = db.session.get(User, form.mentor_id)
    if mentor is None or mentor.user_type != 'mentor':
        raise ValidationFailed("Invalid mentor", {"mentor_id": f"No mentor with id {form.mentor_id}"})
    return mentor


def check_references(form, project_id, mentor, ctx):
    fields = {}
    activity = db.session.get(TimesheetActivity, form.activity_id)
    if activity is None or not activity.is_active:
        fields['activity_id'] = f"Unknown activity {form.activity_id}"

    project = db.session.get(Project, project_id)
    if project is None:
        fields['project_id'] = f"Unknown id {project_id}"
    elif not ctx.is_admin and project not in mentor_projects(mentor.id):
        fields['project_id'] = "You are not a mentor on this project"

    if fields:
        raise ValidationFailed("Invalid references: " + ", ".join(fields), fields)


def check_time_slot(mentor_id, form, exclude_id=None):
    """Reject inverted times, overlaps with the mentor's other entries and days over the limit."""
    if form.start_time >= form.end_time:
        raise ValidationFailed("End time must be after start time",
                               {"end_time": "Must be after start time"})

    same_day = TimesheetEntry.query.filter(
        TimesheetEntry.mentor_id == mentor_id,
        TimesheetEntry.entry_date == form.entry_date
    )
    if exclude_id is not None:
        same_day = same_day.filter(TimesheetEntry.id != exclude_id)

    clash = same_day.filter(
        TimesheetEntry.start_time < form.end_time,
        TimesheetEntry.end_time > form.start_time
    ).first()
    if clash:
        raise ValidationFailed(
            "Time entry overlaps with existing entries for this date",
            {"start_time": f"Overlaps {clash.start_time:%H:%M}-{clash.end_time:%H:%M}"}
        )

    logged = same_day.with_entities(func.coalesce(func.sum(TimesheetEntry.hours_worked), 0)).scalar()
    limit = max_hours_per_day()
    if logged + hours_between(form.start_time, form.end_time) > limit:
        raise ValidationFailed("Total hours for this day exceed the maximum allowed",
                               {"end_time": f"At most {limit:g} hours per day, {logged:g} already logged"})


def apply_form(entry, form):
    entry.activity_id = form.activity_id
    entry.entry_date = form.entry_date
    entry.start_time = form.start_time
    entry.end_time = form.end_time
    entry.hours_worked = hours_between(form.start_time, form.end_time)
    entry.task_description = form.task_description
    entry.notes = form.notes


def create_entry(form, ctx):
    mentor = resolve_mentor(form, ctx)
    check_references(form, form.project_id, mentor, ctx)
    check_time_slot(mentor.id, form)

    entry = TimesheetEntry(project_id=form.project_id, mentor_id=mentor.id)
    apply_form(entry, form)
    db.session.add(entry)
    db.session.commit()

    log_audit_trail(ctx.user, 'TimesheetEntry', entry.id, 'CREATE',
                    f"Logged {entry.hours_worked:g}h on {entry.entry_date} for {mentor.username}")
    return entry


def ensure_editable(entry, verb):
    if entry.is_approved:
        raise ValidationFailed(f"Cannot {verb} approved time sheet entry")


def update_entry(entry, form, ctx):
    ensure_editable(entry, 'update')
    mentor = db.session.get(User, entry.mentor_id)
    check_references(form, entry.project_id, mentor, ctx)
    check_time_slot(entry.mentor_id, form, exclude_id=entry.id)

    apply_form(entry, form)
    db.session.commit()
    log_audit_trail(ctx.user, 'TimesheetEntry', entry.id, 'UPDATE',
                    f"Updated time entry on {entry.entry_date}")
    return entry


def delete_entry(entry, ctx):
    ensure_editable(entry, 'delete')
    entry_id, entry_date = entry.id, entry.entry_date
    db.session.delete(entry)
    db.session.commit()
    log_audit_trail(ctx.user, 'TimesheetEntry', entry_id, 'DELETE',
                    f"Deleted time entry on {entry_date}")


def review_entry(entry, form, ctx):
    """Approve or reject an entry and keep the decision in its history."""
    approved = form.action == 'approve'
    entry.is_approved = approved
    entry.approved_by = ctx.user.id
    entry.approved_at = datetime.datetime.now() if approved else None
    entry.approvals.append(TimesheetApproval(
        approver_id=ctx.user.id, action=form.action, comments=form.comments
    ))
    db.session.commit()

    log_audit_trail(ctx.user, 'TimesheetEntry', entry.id, 'UPDATE',
                    f"{'Approved' if approved else 'Rejected'} time entry on {entry.entry_date}")
    return entry


def add_activity(form, ctx):
    if TimesheetActivity.query.filter(
            func.lower(TimesheetActivity.activity_name) == form.activity_name.lower()).first():
        raise ValidationFailed("Activity already exists", {"activity_name": "Already exists"})
    activity = TimesheetActivity(activity_name=form.activity_name, color=form.color)
    db.session.add(activity)
    db.session.commit()
    log_audit_trail(ctx.user, 'TimesheetActivity', activity.id, 'CREATE',
                    f"Added activity '{activity.activity_name}'")
    return activity


def scoped_query(ctx, args, builders):
    return apply_filters(visible_entries(ctx), args, builders)


def month_arg(args):
    current = today()
    try:
        year = int(args.get('year') or current.year)
        month = int(args.get('month') or current.month)
        first = datetime.date(year, month, 1)
    except ValueError:
        raise FilterError('month', f"{args.get('year')}-{args.get('month')}")
    return first, first + relativedelta(months=1) - datetime.timedelta(days=1)


def calendar(ctx, args):
    """A month of entries grouped by day, with hours per day."""
    first, last = month_arg(args)
    query = scoped_query(ctx, args, {'mentor': REPORT_FILTERS['mentor'],
                                     'project': REPORT_FILTERS['project']})
    entries = query.filter(TimesheetEntry.entry_date.between(first, last)) \
        .order_by(TimesheetEntry.entry_date, TimesheetEntry.start_time).all()

    days = {}
    for entry in entries:
        day = days.setdefault(entry.entry_date.isoformat(), {"entries": [], "total_hours": 0})
        day["entries"].append(serialize_entry(entry))
        day["total_hours"] = round(day["total_hours"] + entry.hours_worked, 2)

    return {
        "year": first.year,
        "month": first.month,
        "start_date": first.isoformat(),
        "end_date": last.isoformat(),
        "days": days,
        "total_hours": round(sum(e.hours_worked for e in entries), 2),
    }


def entries_on(ctx, args):
    raw = args.get('date')
    try:
        day = datetime.date.fromisoformat(raw.strip()) if raw else today()
    except ValueError:
        raise FilterError('date', raw)
    query = scoped_query(ctx, args, {'mentor': REPORT_FILTERS['mentor'],
                                     'project': REPORT_FILTERS['project']})
    entries = query.filter(TimesheetEntry.entry_date == day) \
        .order_by(TimesheetEntry.start_time).all()
    return day, entries


def report_entries(ctx, args):
    query = scoped_query(ctx, args, REPORT_FILTERS) \
        .order_by(TimesheetEntry.entry_date.desc(), TimesheetEntry.start_time.desc())
    limit = args.get('limit')
    if limit:
        try:
            query = query.limit(int(limit))
        except ValueError:
            raise FilterError('limit', limit)
    return query.all()


def summary_stats(ctx, args):
    row = scoped_query(ctx, args, REPORT_FILTERS).with_entities(
        func.count(TimesheetEntry.id),
        func.coalesce(func.sum(TimesheetEntry.hours_worked), 0),
        func.avg(TimesheetEntry.hours_worked),
        func.count(func.distinct(TimesheetEntry.mentor_id)),
        func.count(func.distinct(TimesheetEntry.project_id)),
        func.count(func.distinct(TimesheetEntry.entry_date)),
    ).one()
    total, hours, average, mentors, projects, days = row
    return {
        "total_entries": total,
        "total_hours": round(hours, 2),
        "avg_hours_per_entry": round(average, 2) if average is not None else 0,
        "unique_mentors": mentors,
        "unique_projects": projects,
        "unique_days": days,
    }


def activity_breakdown(ctx, args):
    hours = func.sum(TimesheetEntry.hours_worked)
    rows = scoped_query(ctx, args, REPORT_FILTERS) \
        .join(TimesheetActivity, TimesheetEntry.activity_id == TimesheetActivity.id) \
        .with_entities(TimesheetActivity.activity_name, TimesheetActivity.color,
                       func.count(TimesheetEntry.id), hours, func.avg(TimesheetEntry.hours_worked)) \
        .group_by(TimesheetActivity.id, TimesheetActivity.activity_name, TimesheetActivity.color) \
        .order_by(hours.desc()).all()
    return [
        {"activity_name": name, "color": color, "entry_count": count,
         "total_hours": round(total, 2), "avg_hours": round(average, 2)}
        for name, color, count, total, average in rows
    ]


def export_entries_csv(entries):
    df = pd.DataFrame([serialize_entry(e) for e in entries], columns=EXPORT_COLUMNS)
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    return buffer.getvalue()
