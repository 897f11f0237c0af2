from datetime import date

from flask import Blueprint, jsonify, request, Response
from sqlalchemy.exc import SQLAlchemyError

from models import Student
from schemas import parse_payload, read_payload
from schemas.student import StudentForm
from services import student_services
from services.auth_services import admin_required, login_required
from services.errors import ValidationFailed, not_found, store_failure
from services.filters import FilterError

students = Blueprint('students', __name__)


@students.route('/', methods=['GET'])
@login_required
def list_students(ctx):
    try:
        rows = student_services.list_students(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    payload = {
        "students": [student_services.serialize_student(s) for s in rows],
        "application_years": student_services.application_years(),
    }
    if not rows:
        payload["message"] = "No students found"
    return jsonify(payload), 200


@students.route('/export', methods=['GET'])
@login_required
def export_students(ctx):
    try:
        rows = student_services.list_students(request.args)
    except FilterError as e:
        return jsonify({"error": str(e)}), 400

    csv_data = student_services.export_students_csv(rows)
    filename = f"students_{date.today().isoformat()}.csv"
    return Response(
        csv_data,
        mimetype='text/csv',
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@students.route('/create_student', methods=['POST'])
@login_required
def create_student(ctx):
    data = read_payload()
    form, error = parse_payload(StudentForm, data)
    if error:
        return error

    try:
        student = student_services.create_student(form, ctx)
        return jsonify({
            "message": "Student added successfully",
            "id": student.id,
            "student_id": student.student_id
        }), 201
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("creating student")


@students.route('/<int:student_id>', methods=['GET'])
@login_required
def view_student(student_id, ctx):
    student = Student.find(student_id)
    if student is None:
        return not_found("Student")

    data = student_services.serialize_student(student)
    data["dependencies"] = student_services.dependencies(student)
    return jsonify(data), 200


@students.route('/update_student/<int:student_id>', methods=['PUT', 'POST'])
@login_required
def update_student(student_id, ctx):
    student = Student.find(student_id)
    if student is None:
        return not_found("Student")

    data = read_payload()
    form, error = parse_payload(StudentForm, data)
    if error:
        return error

    try:
        student_services.update_student(student, form, ctx)
        return jsonify({"message": "Student updated successfully"}), 200
    except ValidationFailed as e:
        return e.response(data)
    except SQLAlchemyError:
        return store_failure("updating student")


@students.route('/delete_student/<int:student_id>', methods=['DELETE'])
@admin_required
def delete_student(student_id, ctx):
    student = Student.find(student_id)
    if student is None:
        return not_found("Student")

    try:
        student_services.delete_student(student, ctx)
        return jsonify({"message": "Student deleted successfully"}), 200
    except ValidationFailed as e:
        return e.response()
    except SQLAlchemyError:
        return store_failure("deleting student")


@students.route('/boards', methods=['GET'])
@login_required
def boards(ctx):
    return jsonify({"boards": student_services.boards()}), 200
