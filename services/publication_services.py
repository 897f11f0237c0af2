from sqlalchemy import func

from models import (
    db, Project, Publication, PublicationStudent, PublicationMentor, Student, User
)
from models.publication import CONFERENCE_FIELDS, JOURNAL_FIELDS
from services.auth_services import generate_code, log_audit_trail
from services.errors import ValidationFailed
from services.filters import apply_filters, eq, search

PUBLICATION_FILTERS = {
    'venue_type': eq(Publication.venue_type, cast=str),
    'project_id': eq(Publication.project_id),
    'search': search(Publication.paper_title, Publication.publication_id),
}


def list_publications(args):
    query = apply_filters(Publication.query, args, PUBLICATION_FILTERS)
    return query.order_by(Publication.created_at.desc(), Publication.id.desc()).all()


def serialize_publication(publication, detail=False):
    data = publication.to_dict()
    project = publication.project
    data.update({
        "project_code": project.project_id if project else None,
        "project_name": project.project_name if project else None,
    })
    if detail:
        data["students"] = [
            {"id": link.student.id, "student_id": link.student.student_id,
             "full_name": link.student.full_name}
            for link in publication.student_links
        ]
        data["mentors"] = [
            {"id": link.mentor.id, "full_name": link.mentor.full_name,
             "is_lead_mentor": link.is_lead_mentor}
            for link in publication.mentor_links
        ]
    return data


def apply_form(publication, form):
    """Copy the form; columns of the other venue are always cleared."""
    publication.project_id = form.project_id
    publication.paper_title = form.paper_title
    publication.venue_type = form.venue_type

    kept, cleared = (CONFERENCE_FIELDS, JOURNAL_FIELDS) if form.venue_type == 'Conference' \
        else (JOURNAL_FIELDS, CONFERENCE_FIELDS)
    for name in kept:
        setattr(publication, name, getattr(form, name))
    for name in cleared:
        setattr(publication, name, None)


def check_references(form):
    fields = {}
    if db.session.get(Project, form.project_id) is None:
        fields['project_id'] = f"Unknown id {form.project_id}"

    for name, model in (('student_ids', Student), ('mentor_ids', User)):
        ids = set(getattr(form, name))
        if ids:
            found = {row.id for row in model.query.filter(model.id.in_(ids)).all()}
            if ids - found:
                fields[name] = "Unknown ids " + ", ".join(str(i) for i in sorted(ids - found))

    if fields:
        raise ValidationFailed("Invalid references: " + ", ".join(fields), fields)


def assign_authors(publication, form):
    publication.student_links = [
        PublicationStudent(student_id=i) for i in dict.fromkeys(form.student_ids)
    ]
    publication.mentor_links = [
        PublicationMentor(mentor_id=i, is_lead_mentor=(i == form.lead_mentor_id))
        for i in dict.fromkeys(form.mentor_ids)
    ]


def create_publication(form, ctx):
    check_references(form)
    publication = Publication(publication_id=generate_code('PUB', Publication, 'publication_id'))
    apply_form(publication, form)
    assign_authors(publication, form)
    db.session.add(publication)
    db.session.commit()

    log_audit_trail(ctx.user, 'Publication', publication.publication_id, 'CREATE',
                    f"Added {publication.venue_type.lower()} publication '{publication.paper_title}'")
    return publication


def update_publication(publication, form, ctx):
    check_references(form)
    apply_form(publication, form)
    assign_authors(publication, form)
    db.session.commit()

    log_audit_trail(ctx.user, 'Publication', publication.publication_id, 'UPDATE',
                    f"Updated publication '{publication.paper_title}'")
    return publication


def delete_publication(publication, ctx):
    code, title = publication.publication_id, publication.paper_title
    db.session.delete(publication)
    db.session.commit()
    log_audit_trail(ctx.user, 'Publication', code, 'DELETE', f"Deleted publication '{title}'")


def statistics():
    by_venue = dict(
        db.session.query(Publication.venue_type, func.count(Publication.id))
        .group_by(Publication.venue_type).all()
    )
    return {
        "total_publications": sum(by_venue.values()),
        "conference_publications": by_venue.get('Conference', 0),
        "journal_publications": by_venue.get('Journal', 0),
        "projects_with_publications": db.session.query(
            func.count(func.distinct(Publication.project_id))).scalar() or 0,
    }


def project_people(project, kind):
    """Students or mentors of a project, for populating dropdowns."""
    if kind == 'students':
        return [
            {"id": link.student.id, "student_id": link.student.student_id,
             "full_name": link.student.full_name}
            for link in project.student_links
        ]

    mentors = [link.mentor for link in project.mentor_links]
    if project.lead_mentor and project.lead_mentor not in mentors:
        mentors.insert(0, project.lead_mentor)
    return [
        {"id": mentor.id, "full_name": mentor.full_name,
         "is_lead_mentor": mentor.id == project.lead_mentor_id}
        for mentor in mentors
    ]
