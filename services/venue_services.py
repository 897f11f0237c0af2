from sqlalchemy import case, func

from models import db, Conference, Journal, ConferenceApplication, JournalApplication
from services.auth_services import log_audit_trail
from services.deadlines import deadline_badge, is_upcoming, today
from services.errors import ValidationFailed
from services.filters import apply_filters, eq, search

CONFERENCE_FILTERS = {
    'affiliation': eq(Conference.affiliation, cast=str),
    'type': eq(Conference.conference_type, cast=str),
    'search': search(Conference.conference_name, Conference.conference_shortform),
}

JOURNAL_FILTERS = {
    'publisher': eq(Journal.publisher, cast=str),
    'acceptance': eq(Journal.acceptance_frequency, cast=str),
    'search': search(Journal.journal_name),
}

CONFERENCE_FIELDS = (
    'conference_name', 'conference_shortform', 'conference_link', 'affiliation',
    'conference_type', 'conference_date', 'submission_due_date',
)

JOURNAL_FIELDS = ('journal_name', 'publisher', 'journal_link', 'acceptance_frequency')


def list_conferences(args):
    query = apply_filters(Conference.query, args, CONFERENCE_FILTERS)
    # upcoming first, then by date
    upcoming_first = case((Conference.conference_date >= today(), 0), else_=1)
    return query.order_by(upcoming_first, Conference.conference_date.asc(), Conference.id).all()


def serialize_conference(conference):
    data = conference.to_dict()
    data["deadline"] = deadline_badge(conference.submission_due_date)
    data["is_upcoming"] = is_upcoming(conference.conference_date)
    return data


def create_conference(form, ctx):
    conference = Conference(created_by=ctx.user.id)
    for name in CONFERENCE_FIELDS:
        setattr(conference, name, getattr(form, name))
    db.session.add(conference)
    db.session.commit()
    log_audit_trail(ctx.user, 'Conference', conference.id, 'CREATE',
                    f"Added conference '{conference.conference_name}'")
    return conference


def update_conference(conference, form, ctx):
    for name in CONFERENCE_FIELDS:
        setattr(conference, name, getattr(form, name))
    db.session.commit()
    log_audit_trail(ctx.user, 'Conference', conference.id, 'UPDATE',
                    f"Updated conference '{conference.conference_name}'")
    return conference


def delete_conference(conference, ctx):
    in_use = ConferenceApplication.query.filter_by(conference_id=conference.id).count()
    if in_use:
        raise ValidationFailed("Cannot delete conference with applications",
                               {"applications": f"{in_use} linked record(s)"})
    conference_id, name = conference.id, conference.conference_name
    db.session.delete(conference)
    db.session.commit()
    log_audit_trail(ctx.user, 'Conference', conference_id, 'DELETE', f"Deleted conference '{name}'")


def conference_statistics():
    def grouped(column):
        rows = db.session.query(column, func.count(Conference.id)) \
            .group_by(column).order_by(func.count(Conference.id).desc()).all()
        return [{"name": name, "count": count} for name, count in rows]

    return {
        "total": Conference.query.count(),
        "upcoming": Conference.query.filter(Conference.conference_date >= today()).count(),
        "by_affiliation": grouped(Conference.affiliation),
        "by_type": grouped(Conference.conference_type),
    }


def conference_options():
    affiliations = db.session.query(Conference.affiliation) \
        .filter(Conference.affiliation.isnot(None)).distinct().order_by(Conference.affiliation).all()
    types = db.session.query(Conference.conference_type) \
        .filter(Conference.conference_type.isnot(None)).distinct().order_by(Conference.conference_type).all()
    return {
        "affiliations": [value for (value,) in affiliations],
        "types": [value for (value,) in types],
    }


def list_journals(args):
    query = apply_filters(Journal.query, args, JOURNAL_FILTERS)
    return query.order_by(Journal.journal_name.asc()).all()


def create_journal(form, ctx):
    journal = Journal(created_by=ctx.user.id)
    for name in JOURNAL_FIELDS:
        setattr(journal, name, getattr(form, name))
    db.session.add(journal)
    db.session.commit()
    log_audit_trail(ctx.user, 'Journal', journal.id, 'CREATE', f"Added journal '{journal.journal_name}'")
    return journal


def update_journal(journal, form, ctx):
    for name in JOURNAL_FIELDS:
        setattr(journal, name, getattr(form, name))
    db.session.commit()
    log_audit_trail(ctx.user, 'Journal', journal.id, 'UPDATE', f"Updated journal '{journal.journal_name}'")
    return journal


def delete_journal(journal, ctx):
    in_use = JournalApplication.query.filter_by(journal_id=journal.id).count()
    if in_use:
        raise ValidationFailed("Cannot delete journal with applications",
                               {"applications": f"{in_use} linked record(s)"})
    journal_id, name = journal.id, journal.journal_name
    db.session.delete(journal)
    db.session.commit()
    log_audit_trail(ctx.user, 'Journal', journal_id, 'DELETE', f"Deleted journal '{name}'")


def journal_statistics():
    def grouped(column):
        rows = db.session.query(column, func.count(Journal.id)) \
            .group_by(column).order_by(func.count(Journal.id).desc()).all()
        return [{"name": name, "count": count} for name, count in rows]

    return {
        "total": Journal.query.count(),
        "by_publisher": grouped(Journal.publisher),
        "by_acceptance": grouped(Journal.acceptance_frequency),
    }


def publishers():
    rows = db.session.query(Journal.publisher) \
        .filter(Journal.publisher.isnot(None)).distinct().order_by(Journal.publisher).all()
    return [value for (value,) in rows]
