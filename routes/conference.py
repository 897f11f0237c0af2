from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from models import Conference
from schemas import parse_payload, read_payload
from schemas.venue import ConferenceForm
from services import venue_services
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

conference = Blueprint('conference', __name__)


@conference.route('/', methods=['GET'])
@login_required
def list_conferences(ctx):
    try:
        rows = venue_services.list_conferences(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {
        "conferences": [venue_services.serialize_conference(c) for c in rows],
        "statistics": venue_services.conference_statistics(),
        **venue_services.conference_options(),
    }
    if not rows:
        payload["message"] = "No conferences found"
    return jsonify(payload), 200


@conference.route('/<int:conference_id>', methods=['GET'])
@login_required
def view_conference(conference_id, ctx):
    row = Conference.find(conference_id)
    if row is None:
        return not_found("Conference")
    return jsonify(venue_services.serialize_conference(row)), 200


@conference.route('/add_conference', methods=['POST'])
@login_required
def add_conference(ctx):
    data = read_payload()
    form, error = parse_payload(ConferenceForm, data)
    if error:
        return error

    try:
        row = venue_services.create_conference(form, ctx)
        return jsonify({"message": "Conference added successfully", "id": row.id}), 201
    except SQLAlchemyError:
        return store_failure("adding conference")


@conference.route('/update_conference/<int:conference_id>', methods=['PUT', 'POST'])
@login_required
def update_conference(conference_id, ctx):
    row = Conference.find(conference_id)
    if row is None:
        return not_found("Conference")

    data = read_payload()
    form, error = parse_payload(ConferenceForm, data)
    if error:
        return error

    try:
        venue_services.update_conference(row, form, ctx)
        return jsonify({"message": "Conference updated successfully"}), 200
    except SQLAlchemyError:
        return store_failure("updating conference")


@conference.route('/delete_conference/<int:conference_id>', methods=['DELETE'])
@admin_required
def delete_conference(conference_id, ctx):
    row = Conference.find(conference_id)
    if row is None:
        return not_found("Conference")

    try:
        venue_services.delete_conference(row, ctx)
        return jsonify({"message": "Conference deleted successfully"}), 200
    except ValidationFailed as e:
        return e.response()
    except SQLAlchemyError:
        return store_failure("deleting conference")


@conference.route('/statistics', methods=['GET'])
@login_required
def statistics(ctx):
    return jsonify(venue_services.conference_statistics()), 200
