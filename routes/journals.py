from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from models import Journal
from schemas import parse_payload, read_payload
from schemas.venue import JournalForm
from services import venue_services
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

journals = Blueprint('journals', __name__)


@journals.route('/', methods=['GET'])
@login_required
def list_journals(ctx):
    try:
        rows = venue_services.list_journals(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {
        "journals": [j.to_dict() for j in rows],
        "publishers": venue_services.publishers(),
        "statistics": venue_services.journal_statistics(),
    }
    if not rows:
        payload["message"] = "No journals found"
    return jsonify(payload), 200


@journals.route('/<int:journal_id>', methods=['GET'])
@login_required
def view_journal(journal_id, ctx):
    row = Journal.find(journal_id)
    if row is None:
        return not_found("Journal")
    return jsonify(row.to_dict()), 200


@journals.route('/add_journal', methods=['POST'])
@login_required
def add_journal(ctx):
    data = read_payload()
    form, error = parse_payload(JournalForm, data)
    if error:
        return error

    try:
        row = venue_services.create_journal(form, ctx)
        return jsonify({"message": "Journal added successfully", "id": row.id}), 201
    except SQLAlchemyError:
        return store_failure("adding journal")


@journals.route('/update_journal/<int:journal_id>', methods=['PUT', 'POST'])
@login_required
def update_journal(journal_id, ctx):
    row = Journal.find(journal_id)
    if row is None:
        return not_found("Journal")

    data = read_payload()
    form, error = parse_payload(JournalForm, data)
    if error:
        return error

    try:
        venue_services.update_journal(row, form, ctx)
        return jsonify({"message": "Journal updated successfully"}), 200
    except SQLAlchemyError:
        return store_failure("updating journal")


@journals.route('/delete_journal/<int:journal_id>', methods=['DELETE'])
@admin_required
def delete_journal(journal_id, ctx):
    row = Journal.find(journal_id)
    if row is None:
        return not_found("Journal")

    try:
        venue_services.delete_journal(row, ctx)
        return jsonify({"message": "Journal deleted successfully"}), 200
    except ValidationFailed as e:
        return e.response()
    except SQLAlchemyError:
        return store_failure("deleting journal")


@journals.route('/statistics', methods=['GET'])
@login_required
def statistics(ctx):
    return jsonify(venue_services.journal_statistics()), 200
