from flask import Blueprint, jsonify, request, Response
from sqlalchemy.exc import SQLAlchemyError

from models import TimesheetEntry
from schemas import parse_payload, read_payload
from schemas.timesheet import TimesheetEntryForm, TimesheetUpdateForm, ActivityForm, ApprovalForm
from services import timesheet_services
from services.auth_services import admin_required, mentor_required
from services.deadlines import today
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

timesheet = Blueprint('timesheet', __name__)


def find_entry(entry_id, ctx):
    """The entry, or the error response to return instead."""
    entry = TimesheetEntry.find(entry_id)
    if entry is None:
        return None, not_found("Time sheet entry")
    if not timesheet_services.can_edit(entry, ctx):
        return None, (jsonify({"error": "You can only manage your own time entries"}), 403)
    return entry, None


@timesheet.route('/lookups', methods=['GET'])
@mentor_required
def lookups(ctx):
    mentor_id = ctx.user.id
    if ctx.is_admin and request.args.get('mentor', '').isdigit():
        mentor_id = int(request.args['mentor'])

    data = {
        "activities": [a.to_dict() for a in timesheet_services.active_activities()],
        "projects": [
            {"id": p.id, "project_id": p.project_id, "project_name": p.project_name}
            for p in timesheet_services.mentor_projects(mentor_id)
        ],
        "max_hours_per_day": timesheet_services.max_hours_per_day(),
    }
    if ctx.is_admin:
        data["mentors"] = [{"id": m.id, "full_name": m.full_name}
                           for m in timesheet_services.active_mentors()]
    return jsonify(data), 200


@timesheet.route('/calendar', methods=['GET'])
@mentor_required
def calendar(ctx):
    try:
        return jsonify(timesheet_services.calendar(ctx, request.args)), 200
    except FilterError as e:
        return jsonify({"error": str(e)}), 400


@timesheet.route('/entries', methods=['GET'])
@mentor_required
def entries_by_date(ctx):
    try:
        day, rows = timesheet_services.entries_on(ctx, request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "date": day.isoformat(),
        "entries": [timesheet_services.serialize_entry(e) for e in rows],
        "total_hours": round(sum(e.hours_worked for e in rows), 2),
    }), 200


@timesheet.route('/<int:entry_id>', methods=['GET'])
@mentor_required
def view_entry(entry_id, ctx):
    entry, error = find_entry(entry_id, ctx)
    if error:
        return error

    data = timesheet_services.serialize_entry(entry)
    data["approvals"] = [
        {"action": a.action, "comments": a.comments,
         "approver_name": a.approver.full_name if a.approver else None,
         "created_at": a.created_at.isoformat() if a.created_at else None}
        for a in entry.approvals
    ]
    return jsonify(data), 200


@timesheet.route('/add_entry', methods=['POST'])
@mentor_required
def add_entry(ctx):
    data = read_payload()
    form, error = parse_payload(TimesheetEntryForm, data)
    if error:
        return error

    try:
        entry = timesheet_services.create_entry(form, ctx)
        return jsonify({"message": "Time entry added successfully", "id": entry.id,
                        "hours_worked": entry.hours_worked}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("adding time entry")


@timesheet.route('/update_entry/<int:entry_id>', methods=['PUT', 'POST'])
@mentor_required
def update_entry(entry_id, ctx):
    entry, error = find_entry(entry_id, ctx)
    if error:
        return error

    data = read_payload()
    form, error = parse_payload(TimesheetUpdateForm, data)
    if error:
        return error

    try:
        entry = timesheet_services.update_entry(entry, form, ctx)
        return jsonify({"message": "Time entry updated successfully",
                        "hours_worked": entry.hours_worked}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating time entry")


@timesheet.route('/delete_entry/<int:entry_id>', methods=['DELETE'])
@mentor_required
def delete_entry(entry_id, ctx):
    entry, error = find_entry(entry_id, ctx)
    if error:
        return error

    try:
        timesheet_services.delete_entry(entry, ctx)
        return jsonify({"message": "Time entry deleted successfully"}), 200
    except ValidationFailed as e:
        return e.response()
    except SQLAlchemyError:
        return store_failure("deleting time entry")


@timesheet.route('/approve_entry/<int:entry_id>', methods=['POST'])
@admin_required
def approve_entry(entry_id, ctx):
    entry = TimesheetEntry.find(entry_id)
    if entry is None:
        return not_found("Time sheet entry")

    data = read_payload()
    form, error = parse_payload(ApprovalForm, data)
    if error:
        return error

    try:
        entry = timesheet_services.review_entry(entry, form, ctx)
        verb = "approved" if entry.is_approved else "rejected"
        return jsonify({"message": f"Time entry {verb} successfully",
                        "is_approved": entry.is_approved}), 200
    except SQLAlchemyError:
        return store_failure("reviewing time entry")


@timesheet.route('/add_activity', methods=['POST'])
@admin_required
def add_activity(ctx):
    data = read_payload()
    form, error = parse_payload(ActivityForm, data)
    if error:
        return error

    try:
        activity = timesheet_services.add_activity(form, ctx)
        return jsonify({"message": "Activity added successfully", "activity": activity.to_dict()}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("adding activity")


@timesheet.route('/reports', methods=['GET'])
@mentor_required
def reports(ctx):
    try:
        rows = timesheet_services.report_entries(ctx, request.args)
        payload = {
            "entries": [timesheet_services.serialize_entry(e) for e in rows],
            "summary": timesheet_services.summary_stats(ctx, request.args),
            "activity_breakdown": timesheet_services.activity_breakdown(ctx, request.args),
        }
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    if not rows:
        payload["message"] = "No time entries found"
    return jsonify(payload), 200


@timesheet.route('/reports/export', methods=['GET'])
@mentor_required
def export_report(ctx):
    try:
        rows = timesheet_services.report_entries(ctx, request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    filename = f"timesheet_{today().isoformat()}.csv"
    return Response(
        timesheet_services.export_entries_csv(rows),
        mimetype='text/csv',
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
