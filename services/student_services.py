import io

import pandas as pd
from sqlalchemy import func

from models import (
    db, Student, Board, User, ProjectStudent, PublicationStudent, ReadyForPublicationStudent
)
from services.auth_services import generate_code, log_audit_trail
from services.errors import ValidationFailed
from services.filters import apply_filters, eq, search

STUDENT_FILTERS = {
    'search': search(Student.full_name, Student.student_id, Student.email_address),
    'rbm': eq(Student.rbm_id),
    'counselor': eq(Student.counselor_id),
    'board': eq(Student.board_id),
    'application_year': eq(Student.application_year),
}

EXPORT_COLUMNS = [
    'student_id', 'full_name', 'affiliation', 'grade', 'board_name',
    'counselor_name', 'rbm_name', 'contact_no', 'email_address', 'application_year',
]


def list_students(args):
    query = apply_filters(Student.query, args, STUDENT_FILTERS)
    return query.order_by(Student.created_at.desc(), Student.id.desc()).all()


def serialize_student(student):
    data = student.to_dict()
    data.update({
        "board_name": student.board.name if student.board else None,
        "counselor_name": student.counselor.full_name if student.counselor else None,
        "rbm_name": student.rbm.full_name if student.rbm else None,
    })
    return data


def resolve_board(form):
    """Use the picked board, or create the typed-in one if it is new."""
    if form.board_id is not None:
        if db.session.get(Board, form.board_id) is None:
            raise ValidationFailed("Invalid board", {"board_id": f"Unknown id {form.board_id}"})
        return form.board_id
    if not form.custom_board:
        return None

    board = Board.query.filter(func.lower(Board.name) == form.custom_board.lower()).first()
    if board is None:
        board = Board(name=form.custom_board)
        db.session.add(board)
        db.session.flush()
    return board.id


def check_staff(form):
    fields = {}
    for name, user_type in (('counselor_id', 'councillor'), ('rbm_id', 'rbm')):
        value = getattr(form, name)
        if value is None:
            continue
        user = db.session.get(User, value)
        if user is None or user.user_type != user_type:
            fields[name] = f"No {user_type} with id {value}"
    if fields:
        raise ValidationFailed("Invalid references: " + ", ".join(fields), fields)


def apply_form(student, form):
    student.full_name = form.full_name
    student.affiliation = form.affiliation
    student.grade = form.grade
    student.counselor_id = form.counselor_id
    student.rbm_id = form.rbm_id
    student.board_id = resolve_board(form)
    student.contact_no = form.contact_no
    student.email_address = form.email_address
    student.application_year = form.application_year


def create_student(form, ctx):
    check_staff(form)
    student = Student(student_id=generate_code('STU', Student, 'student_id'))
    apply_form(student, form)
    db.session.add(student)
    db.session.commit()

    log_audit_trail(ctx.user, 'Student', student.student_id, 'CREATE',
                    f"Added student '{student.full_name}'")
    return student


def update_student(student, form, ctx):
    check_staff(form)
    apply_form(student, form)
    db.session.commit()

    log_audit_trail(ctx.user, 'Student', student.student_id, 'UPDATE',
                    f"Updated student '{student.full_name}'")
    return student


def dependencies(student):
    return {
        "projects": ProjectStudent.query.filter_by(student_id=student.id).count(),
        "publications": PublicationStudent.query.filter_by(student_id=student.id).count(),
        "ready_publications": ReadyForPublicationStudent.query.filter_by(student_id=student.id).count(),
    }


def delete_student(student, ctx):
    deps = dependencies(student)
    if any(deps.values()):
        raise ValidationFailed(
            "Cannot delete student: assigned to projects or publications",
            {name: f"{count} linked record(s)" for name, count in deps.items() if count}
        )

    code, name = student.student_id, student.full_name
    db.session.delete(student)
    db.session.commit()
    log_audit_trail(ctx.user, 'Student', code, 'DELETE', f"Deleted student '{name}'")


def export_students_csv(students):
    rows = [serialize_student(student) for student in students]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    return buffer.getvalue()


def boards():
    return [board.to_dict() for board in Board.query.order_by(Board.name).all()]


def application_years():
    rows = db.session.query(Student.application_year) \
        .filter(Student.application_year.isnot(None)) \
        .distinct() \
        .order_by(Student.application_year.desc()).all()
    return [year for (year,) in rows]
