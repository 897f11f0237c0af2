from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from models import ReadyForPublication
from schemas import parse_payload, read_payload
from schemas.pipeline import (
    ReadyFromProjectForm, ReadyManualForm, ReadyEditForm, StudentDetailsForm
)
from services import publication_pipeline
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

ready = Blueprint('ready', __name__)

DETAIL_COLUMNS = ('student_id', 'student_affiliation', 'student_address', 'author_order')


def read_student_details():
    """Author details come as a JSON list or as parallel form lists."""
    data = read_payload(DETAIL_COLUMNS)
    if 'students' in data:
        return data
    columns = {name: data.get(name) or [] for name in DETAIL_COLUMNS}
    if not isinstance(columns['student_id'], list):
        columns = {name: [value] for name, value in columns.items()}
    rows = []
    for i, student_id in enumerate(columns['student_id']):
        row = {'student_id': student_id}
        for name in DETAIL_COLUMNS[1:]:
            if i < len(columns[name]):
                row[name] = columns[name][i]
        rows.append(row)
    return {'students': rows}


@ready.route('/', methods=['GET'])
@login_required
def list_ready(ctx):
    try:
        rows = publication_pipeline.list_ready(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400
    except ValidationFailed as e:
        return e.response(request.args.to_dict())

    payload = {"ready_publications": [publication_pipeline.serialize_ready(r) for r in rows]}
    if not rows:
        payload["message"] = "No papers ready for publication found"
    return jsonify(payload), 200


@ready.route('/candidate_projects', methods=['GET'])
@login_required
def candidate_projects(ctx):
    return jsonify({"projects": publication_pipeline.candidate_projects()}), 200


@ready.route('/add_from_project', methods=['POST'])
@login_required
def add_from_project(ctx):
    data = read_payload()
    form, error = parse_payload(ReadyFromProjectForm, data)
    if error:
        return error

    try:
        entry = publication_pipeline.create_from_project(form, ctx)
        return jsonify({"message": "Project added to Ready for Publication", "id": entry.id}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("staging project for publication")


@ready.route('/add_manual', methods=['POST'])
@login_required
def add_manual(ctx):
    data = read_payload(('student_ids',))
    form, error = parse_payload(ReadyManualForm, data)
    if error:
        return error

    try:
        entry = publication_pipeline.create_manual(form, ctx)
        return jsonify({"message": "Paper added to Ready for Publication", "id": entry.id}), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("adding paper for publication")


@ready.route('/<int:entry_id>', methods=['GET'])
@login_required
def view_ready(entry_id, ctx):
    entry = ReadyForPublication.find(entry_id)
    if entry is None:
        return not_found("Publication")
    return jsonify(publication_pipeline.serialize_ready(entry, detail=True)), 200


@ready.route('/update/<int:entry_id>', methods=['PUT', 'POST'])
@login_required
def update_ready(entry_id, ctx):
    entry = ReadyForPublication.find(entry_id)
    if entry is None:
        return not_found("Publication")

    data = read_payload()
    form, error = parse_payload(ReadyEditForm, data)
    if error:
        return error

    try:
        publication_pipeline.update_ready(entry, form, ctx)
        return jsonify({"message": "Publication updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating ready publication")


@ready.route('/update_students/<int:entry_id>', methods=['PUT', 'POST'])
@login_required
def update_students(entry_id, ctx):
    entry = ReadyForPublication.find(entry_id)
    if entry is None:
        return not_found("Publication")

    data = read_student_details()
    form, error = parse_payload(StudentDetailsForm, data)
    if error:
        return error

    try:
        publication_pipeline.update_student_details(entry, form, ctx)
        return jsonify({"message": "Student details updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating author details")


@ready.route('/delete/<int:entry_id>', methods=['DELETE'])
@admin_required
def delete_ready(entry_id, ctx):
    entry = ReadyForPublication.find(entry_id)
    if entry is None:
        return not_found("Publication")

    try:
        publication_pipeline.delete_ready(entry, ctx)
        return jsonify({"message": "Publication removed successfully"}), 200
    except SQLAlchemyError:
        return store_failure("deleting ready publication")


@ready.route('/statistics', methods=['GET'])
@login_required
def statistics(ctx):
    return jsonify(publication_pipeline.ready_statistics()), 200
