from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from models import Project
from schemas import parse_payload, read_payload
from schemas.project import (
    ProjectForm, StatusUpdateForm, StatusLookupForm, SubjectLookupForm, TagLookupForm
)
from services import project_services
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

projects = Blueprint('projects', __name__)

ASSIGNMENT_FIELDS = ('student_ids', 'mentor_ids', 'tag_ids')


@projects.route('/', methods=['GET'])
@login_required
def list_projects(ctx):
    try:
        rows = project_services.list_active_projects(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {
        "projects": [project_services.serialize_project(p) for p in rows],
        "filters": request.args.to_dict(),
    }
    if not rows:
        payload["message"] = "No projects found"
    return jsonify(payload), 200


@projects.route('/completed', methods=['GET'])
@login_required
def completed_projects(ctx):
    try:
        rows = project_services.list_completed_projects(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {
        "projects": [project_services.serialize_project(p) for p in rows],
        "total_completed": len(rows),
        "with_prototypes": sum(1 for p in rows if p.has_prototype == 'Yes'),
    }
    if not rows:
        payload["message"] = "No completed projects found"
    return jsonify(payload), 200


@projects.route('/create_project', methods=['POST'])
@login_required
def create_project(ctx):
    data = read_payload(ASSIGNMENT_FIELDS)
    form, error = parse_payload(ProjectForm, data)
    if error:
        return error

    try:
        project = project_services.create_project(form, ctx)
        return jsonify({
            "message": "Project created successfully",
            "id": project.id,
            "project_id": project.project_id
        }), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("creating project")


@projects.route('/<int:project_id>', methods=['GET'])
@login_required
def view_project(project_id, ctx):
    project = Project.find(project_id)
    if project is None:
        return not_found("Project")
    return jsonify(project_services.serialize_project(project, detail=True)), 200


@projects.route('/update_project/<int:project_id>', methods=['PUT', 'POST'])
@login_required
def update_project(project_id, ctx):
    project = Project.find(project_id)
    if project is None:
        return not_found("Project")

    data = read_payload(ASSIGNMENT_FIELDS)
    form, error = parse_payload(ProjectForm, data)
    if error:
        return error

    try:
        project_services.update_project(project, form, ctx)
        return jsonify({"message": "Project updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating project")


@projects.route('/update_status/<int:project_id>', methods=['POST'])
@login_required
def update_status(project_id, ctx):
    project = Project.find(project_id)
    if project is None:
        return not_found("Project")

    data = read_payload()
    form, error = parse_payload(StatusUpdateForm, data)
    if error:
        return error

    try:
        project_services.update_status(project, form, ctx)
        return jsonify({"message": "Project status updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating project status")


@projects.route('/move_back/<int:project_id>', methods=['POST'])
@admin_required
def move_back(project_id, ctx):
    project = Project.find(project_id)
    if project is None:
        return not_found("Project")

    try:
        project_services.move_back_to_active(project, ctx)
        return jsonify({"message": "Project moved back to active list successfully"}), 200
    except ValidationFailed as e:
        return e.response()
    except SQLAlchemyError:
        return store_failure("moving project back")


@projects.route('/delete_project/<int:project_id>', methods=['DELETE'])
@admin_required
def delete_project(project_id, ctx):
    project = Project.find(project_id)
    if project is None:
        return not_found("Project")

    try:
        project_services.delete_project(project, ctx)
        return jsonify({"message": "Project deleted successfully"}), 200
    except SQLAlchemyError:
        return store_failure("deleting project")


@projects.route('/add_status', methods=['POST'])
@login_required
def add_status(ctx):
    data = read_payload()
    form, error = parse_payload(StatusLookupForm, data)
    if error:
        return error

    try:
        status = project_services.add_status(form, ctx)
        return jsonify({"message": "Status added successfully", "status": status.to_dict()}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("adding status")


@projects.route('/add_subject', methods=['POST'])
@login_required
def add_subject(ctx):
    data = read_payload()
    form, error = parse_payload(SubjectLookupForm, data)
    if error:
        return error

    try:
        subject = project_services.add_subject(form, ctx)
        return jsonify({"message": "Subject added successfully", "subject": subject.to_dict()}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("adding subject")


@projects.route('/add_tag', methods=['POST'])
@login_required
def add_tag(ctx):
    data = read_payload()
    form, error = parse_payload(TagLookupForm, data)
    if error:
        return error

    try:
        tag = project_services.add_tag(form, ctx)
        return jsonify({"message": "Tag added successfully", "tag": tag.to_dict()}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("adding tag")


@projects.route('/lookups', methods=['GET'])
@login_required
def lookups(ctx):
    return jsonify(project_services.lookups()), 200


@projects.route('/statistics', methods=['GET'])
@login_required
def statistics(ctx):
    return jsonify(project_services.statistics()), 200
