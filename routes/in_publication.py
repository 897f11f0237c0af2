from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from schemas import parse_payload, read_payload
from schemas.pipeline import (
    PublicationLinksForm, ConferenceApplicationForm, JournalApplicationForm, ApplicationStatusForm
)
from services import publication_pipeline, venue_services
from services.auth_services import login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

in_publication = Blueprint('in_publication', __name__)


@in_publication.route('/', methods=['GET'])
@login_required
def list_in_publication(ctx):
    try:
        rows = publication_pipeline.list_in_publication(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {"publications": [publication_pipeline.serialize_in_publication(r) for r in rows]}
    if not rows:
        payload["message"] = "No papers in publication found"
    return jsonify(payload), 200


@in_publication.route('/<int:entry_id>', methods=['GET'])
@login_required
def view_in_publication(entry_id, ctx):
    entry = publication_pipeline.get_in_publication(entry_id)
    if entry is None:
        return not_found("Publication")

    data = publication_pipeline.serialize_in_publication(entry, detail=True)
    data["conferences"] = [venue_services.serialize_conference(c)
                           for c in venue_services.list_conferences({})]
    data["journals"] = [j.to_dict() for j in venue_services.list_journals({})]
    return jsonify(data), 200


@in_publication.route('/update_links/<int:entry_id>', methods=['PUT', 'POST'])
@login_required
def update_links(entry_id, ctx):
    entry = publication_pipeline.get_in_publication(entry_id)
    if entry is None:
        return not_found("Publication")

    data = read_payload()
    form, error = parse_payload(PublicationLinksForm, data)
    if error:
        return error

    try:
        publication_pipeline.update_links(entry, form, ctx)
        return jsonify({"message": "Publication links updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating publication links")


@in_publication.route('/apply_conference/<int:entry_id>', methods=['POST'])
@login_required
def apply_conference(entry_id, ctx):
    entry = publication_pipeline.get_in_publication(entry_id)
    if entry is None:
        return not_found("Publication")

    data = read_payload()
    form, error = parse_payload(ConferenceApplicationForm, data)
    if error:
        return error

    try:
        application = publication_pipeline.apply_to_conference(entry, form, ctx)
        return jsonify({"message": "Conference application submitted successfully",
                        "id": application.id}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("applying to conference")


@in_publication.route('/apply_journal/<int:entry_id>', methods=['POST'])
@login_required
def apply_journal(entry_id, ctx):
    entry = publication_pipeline.get_in_publication(entry_id)
    if entry is None:
        return not_found("Publication")

    data = read_payload()
    form, error = parse_payload(JournalApplicationForm, data)
    if error:
        return error

    try:
        application = publication_pipeline.apply_to_journal(entry, form, ctx)
        return jsonify({"message": "Journal application submitted successfully",
                        "id": application.id}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("applying to journal")


@in_publication.route('/update_application_status/<int:entry_id>', methods=['POST'])
@login_required
def update_application_status(entry_id, ctx):
    entry = publication_pipeline.get_in_publication(entry_id)
    if entry is None:
        return not_found("Publication")

    data = read_payload()
    form, error = parse_payload(ApplicationStatusForm, data)
    if error:
        return error

    try:
        application = publication_pipeline.update_application_status(entry, form, ctx)
        return jsonify({"message": "Application status updated successfully",
                        "status": application.status}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating application status")


@in_publication.route('/statistics', methods=['GET'])
@login_required
def statistics(ctx):
    return jsonify(publication_pipeline.in_publication_statistics()), 200
