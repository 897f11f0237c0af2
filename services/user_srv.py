from sqlalchemy import func, or_
from werkzeug.security import generate_password_hash

from models import (
    db, User, Project, ProjectMentor, Student, PublicationMentor, Conference, Journal,
    TimesheetEntry
)
from services.auth_services import log_audit_trail
from services.errors import ValidationFailed
from services.filters import apply_filters, eq, search

USER_FILTERS = {
    'user_type': eq(User.user_type, cast=str),
    'status': eq(User.status, cast=str),
    'search': search(User.full_name, User.username, User.email),
}


def list_users(args):
    query = apply_filters(User.query, args, USER_FILTERS)
    return query.order_by(User.full_name).all()


def serialize_user(user):
    return user.to_dict(exclude=('password_hash',))


def check_unique(form, user=None):
    clash = User.query.filter(func.lower(User.username) == form.username.lower())
    if user is not None:
        clash = clash.filter(User.id != user.id)
    if clash.first():
        raise ValidationFailed("Username already exists", {"username": "Already taken"})


def apply_form(user, form):
    for name in ('username', 'full_name', 'user_type', 'email', 'contact_no',
                 'specialization', 'branch', 'organization_name', 'status'):
        setattr(user, name, getattr(form, name))
    if form.password:
        user.password_hash = generate_password_hash(form.password)


def add_new_user(form, ctx):
    """Add a new staff account."""
    check_unique(form)
    user = User()
    apply_form(user, form)
    db.session.add(user)
    db.session.commit()
    log_audit_trail(ctx.user, 'User', user.id, 'CREATE', f"Added {user.user_type} '{user.username}'")
    return user


def update_user(user, form, ctx):
    check_unique(form, user)
    apply_form(user, form)
    db.session.commit()
    log_audit_trail(ctx.user, 'User', user.id, 'UPDATE', f"Updated user '{user.username}'")
    return user


def delete_user(user, ctx):
    if user.id == ctx.user.id:
        raise ValidationFailed("You cannot delete your own account")

    references = {
        "projects": Project.query.filter(
            or_(Project.lead_mentor_id == user.id, Project.rbm_id == user.id)).count()
            + ProjectMentor.query.filter_by(mentor_id=user.id).count(),
        "students": Student.query.filter(
            or_(Student.rbm_id == user.id, Student.counselor_id == user.id)).count(),
        "publications": PublicationMentor.query.filter_by(mentor_id=user.id).count(),
        "venues": Conference.query.filter_by(created_by=user.id).count()
            + Journal.query.filter_by(created_by=user.id).count(),
        "timesheets": TimesheetEntry.query.filter_by(mentor_id=user.id).count(),
    }
    if any(references.values()):
        raise ValidationFailed(
            "Cannot delete user with linked records, deactivate the account instead",
            {name: f"{count} linked record(s)" for name, count in references.items() if count}
        )

    user_id, username = user.id, user.username
    db.session.delete(user)
    db.session.commit()
    log_audit_trail(ctx.user, 'User', user_id, 'DELETE', f"Deleted user '{username}'")


def staff_lookup(user_type):
    users = User.query.filter_by(user_type=user_type, status='active').order_by(User.full_name).all()
    return [
        {"id": u.id, "full_name": u.full_name, "email": u.email,
         "specialization": u.specialization, "organization_name": u.organization_name}
        for u in users
    ]
