from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from models import Project, Publication
from schemas import parse_payload, read_payload
from schemas.publication import PublicationForm
from services import publication_services
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

publications = Blueprint('publications', __name__)

AUTHOR_FIELDS = ('student_ids', 'mentor_ids')


@publications.route('/', methods=['GET'])
@login_required
def list_publications(ctx):
    try:
        rows = publication_services.list_publications(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {"publications": [publication_services.serialize_publication(p) for p in rows]}
    if not rows:
        payload["message"] = "No publications found"
    return jsonify(payload), 200


@publications.route('/create_publication', methods=['POST'])
@login_required
def create_publication(ctx):
    data = read_payload(AUTHOR_FIELDS)
    form, error = parse_payload(PublicationForm, data)
    if error:
        return error

    try:
        publication = publication_services.create_publication(form, ctx)
        return jsonify({
            "message": "Publication added successfully",
            "id": publication.id,
            "publication_id": publication.publication_id
        }), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("creating publication")


@publications.route('/<int:publication_id>', methods=['GET'])
@login_required
def view_publication(publication_id, ctx):
    publication = Publication.find(publication_id)
    if publication is None:
        return not_found("Publication")
    return jsonify(publication_services.serialize_publication(publication, detail=True)), 200


@publications.route('/update_publication/<int:publication_id>', methods=['PUT', 'POST'])
@login_required
def update_publication(publication_id, ctx):
    publication = Publication.find(publication_id)
    if publication is None:
        return not_found("Publication")

    data = read_payload(AUTHOR_FIELDS)
    form, error = parse_payload(PublicationForm, data)
    if error:
        return error

    try:
        publication_services.update_publication(publication, form, ctx)
        return jsonify({"message": "Publication updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating publication")


@publications.route('/delete_publication/<int:publication_id>', methods=['DELETE'])
@admin_required
def delete_publication(publication_id, ctx):
    publication = Publication.find(publication_id)
    if publication is None:
        return not_found("Publication")

    try:
        publication_services.delete_publication(publication, ctx)
        return jsonify({"message": "Publication deleted successfully"}), 200
    except SQLAlchemyError:
        return store_failure("deleting publication")


@publications.route('/statistics', methods=['GET'])
@login_required
def statistics(ctx):
    return jsonify(publication_services.statistics()), 200


@publications.route('/get_project_data', methods=['GET'])
@login_required
def get_project_data(ctx):
    kind = request.args.get('type')
    if kind not in ('students', 'mentors'):
        return jsonify({"error": "type must be 'students' or 'mentors'"}), 400

    try:
        project_id = int(request.args.get('project_id', ''))
    except ValueError:
        return jsonify({"error": "project_id is required"}), 400

    project = Project.find(project_id)
    if project is None:
        return not_found("Project")
    return jsonify({kind: publication_services.project_people(project, kind)}), 200
