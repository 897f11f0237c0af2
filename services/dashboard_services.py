from datetime import timedelta

from sqlalchemy import func

from models import db, Project, Student, User, ReadyForPublication
from models.ready_publication import READY_STATUSES
from models.user import USER_TYPES
from services.deadlines import DUE_SOON_DAYS, today
from services.project_services import active_project_query


def deadline_counts(reference=None):
    """Missed and approaching end dates among projects that are not completed."""
    reference = reference or today()
    dated = active_project_query().filter(Project.end_date.isnot(None))
    return {
        "missed_deadlines": dated.filter(Project.end_date < reference).count(),
        "approaching_deadlines": dated.filter(
            Project.end_date.between(reference, reference + timedelta(days=DUE_SOON_DAYS))
        ).count(),
    }


def overview():
    user_counts = dict(
        db.session.query(User.user_type, func.count(User.id))
        .filter(User.status == 'active')
        .group_by(User.user_type).all()
    )
    ready_counts = dict(
        db.session.query(ReadyForPublication.status, func.count(ReadyForPublication.id))
        .group_by(ReadyForPublication.status).all()
    )

    data = {
        "active_users": {user_type: user_counts.get(user_type, 0) for user_type in USER_TYPES},
        "total_students": Student.query.count(),
        "active_projects": active_project_query().count(),
        "ready_for_publication": {
            "total": sum(ready_counts.values()),
            **{status: ready_counts.get(status, 0) for status in READY_STATUSES},
        },
    }
    data.update(deadline_counts())
    return data
