import datetime
from functools import wraps

from flask import current_app, jsonify
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import db, User
from models.audit_trail import AuditTrail

# user_type -> permissions it carries
PERMISSIONS = {
    'admin': frozenset({'admin', 'mentor', 'councillor'}),
    'mentor': frozenset({'mentor'}),
    'councillor': frozenset({'councillor'}),
    'rbm': frozenset(),
}


class RequestContext:
    """The authenticated user and what they may do, for one request."""

    def __init__(self, user, permissions):
        self.user = user
        self.permissions = permissions

    @classmethod
    def for_user(cls, user):
        return cls(user, PERMISSIONS.get(user.user_type, frozenset()))

    def has_permission(self, required):
        return required in self.permissions

    @property
    def is_admin(self):
        return self.has_permission('admin')


def formatting_id(indicator, model_class, id_field):
    """
    Generate a new audit ID based on the current date and last entry,
    formatted as 'indicator-YYYYMMDD-XXXXX'.
    """
    current_date_str = datetime.datetime.now().strftime('%Y%m%d')
    column = getattr(model_class, id_field)

    last_entry = model_class.query.filter(column.like(f'{indicator}-{current_date_str}-%')) \
                                  .order_by(column.desc()) \
                                  .first()

    if last_entry:
        last_sequence = int(getattr(last_entry, id_field).split('-')[-1])
    else:
        last_sequence = 0

    return f"{indicator}-{current_date_str}-{last_sequence + 1:05d}"


def generate_code(prefix, model_class, id_field, year=None):
    """
    Next human-readable code of the form PREFIX + year + 4-digit sequence,
    e.g. PRJ20250001. The sequence restarts every year and grows past
    four digits once a year has more than 9999 rows.
    """
    year = year or datetime.date.today().year
    column = getattr(model_class, id_field)
    stem = f"{prefix}{year}"

    # longer codes carry larger sequences, so compare length before text
    last_entry = model_class.query.filter(column.like(f'{stem}%')) \
                                  .order_by(func.length(column).desc(), column.desc()) \
                                  .first()

    if last_entry:
        last_sequence = int(getattr(last_entry, id_field)[len(stem):])
    else:
        last_sequence = 0

    return f"{stem}{last_sequence + 1:04d}"


def log_audit_trail(user, table_name, record_id, operation, action_desc):
    """Record a mutation. Never fails the request that triggered it."""
    try:
        new_audit = AuditTrail(
            audit_id=formatting_id('AUD', AuditTrail, 'audit_id'),
            username=user.username if user else None,
            role=user.user_type if user else None,
            table_name=table_name,
            record_id=str(record_id) if record_id is not None else None,
            operation=operation,
            change_datetime=datetime.datetime.now(),
            action_desc=action_desc
        )
        db.session.add(new_audit)
        db.session.commit()

    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error logging audit trail for %s %s", table_name, record_id)


def generate_tokens(user_id):
    """Generate access token for the user."""
    return create_access_token(identity=str(user_id))


def login_required(f):
    """
    Require a valid JWT for an active user and pass the request context
    to the view as ``ctx``.
    """
    @wraps(f)
    @jwt_required()
    def decorated_function(*args, **kwargs):
        user = db.session.get(User, int(get_jwt_identity()))
        if not user or user.status != 'active':
            return jsonify({"error": "Current user not found"}), 401

        kwargs['ctx'] = RequestContext.for_user(user)
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Like ``login_required`` but only admins get through."""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not kwargs['ctx'].has_permission('admin'):
            return jsonify({"error": "Admin privileges required"}), 403
        return f(*args, **kwargs)
    return decorated_function


def mentor_required(f):
    """Mentors and admins only."""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not kwargs['ctx'].has_permission('mentor'):
            return jsonify({"error": "Mentor privileges required"}), 403
        return f(*args, **kwargs)
    return decorated_function
