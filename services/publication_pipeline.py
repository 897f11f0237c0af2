"""
Ready-for-publication staging and the in-publication view.

A ReadyForPublication row moves freely between its four statuses. Once it is
approved (or published) it shows up "in publication", where conference and
journal applications are filed against it. Application counts are recomputed
on every read.
"""

from sqlalchemy import func

from models import (
    db, Project, ProjectStatus, ReadyForPublication, ReadyForPublicationStudent,
    Student, Conference, Journal, ConferenceApplication, JournalApplication
)
from models.application import APPLICATION_STATUSES
from models.ready_publication import IN_PUBLICATION_STATUSES, READY_STATUSES
from services.auth_services import log_audit_trail
from services.deadlines import deadline_badge
from services.errors import ValidationFailed
from services.filters import apply_filters, eq, search
from services.mail import send_notification_email

READY_FILTERS = {
    'status': eq(ReadyForPublication.status, cast=str),
    'search': search(ReadyForPublication.paper_title, Project.project_name, Project.project_id),
}

IN_PUBLICATION_FILTERS = {
    'search': search(ReadyForPublication.paper_title, Project.project_name),
}

# Both links must be on file before an entry can be approved
APPROVAL_LINKS = ('first_draft_link', 'ai_detection_link')


def ready_query():
    return ReadyForPublication.query.join(Project, ReadyForPublication.project_id == Project.id)


def list_ready(args):
    status = args.get('status')
    if status and status not in READY_STATUSES:
        raise ValidationFailed(f"Invalid status: {status}", {"status": "Unknown status"})
    query = apply_filters(ready_query(), args, READY_FILTERS)
    return query.order_by(ReadyForPublication.created_at.desc(), ReadyForPublication.id.desc()).all()


def serialize_student_detail(detail):
    return {
        "id": detail.id,
        "student_id": detail.student_id,
        "student_code": detail.student.student_id if detail.student else None,
        "full_name": detail.student.full_name if detail.student else None,
        "student_affiliation": detail.student_affiliation,
        "student_address": detail.student_address,
        "author_order": detail.author_order,
    }


def serialize_ready(entry, detail=False):
    data = entry.to_dict()
    project = entry.project
    mentor = project.lead_mentor if project else None
    data.update({
        "project_code": project.project_id if project else None,
        "project_name": project.project_name if project else None,
        "mentor_name": mentor.full_name if mentor else None,
        "student_count": len(entry.student_details),
        "in_publication": entry.status in IN_PUBLICATION_STATUSES,
    })
    if detail:
        data["students"] = [serialize_student_detail(d) for d in entry.student_details]
    return data


def candidate_projects():
    """Projects without a ready-for-publication entry yet."""
    staged = db.select(ReadyForPublication.project_id)
    projects = Project.query.outerjoin(ProjectStatus, Project.status_id == ProjectStatus.id) \
        .filter(~Project.id.in_(staged)) \
        .order_by(Project.updated_at.desc()).all()
    return [
        {
            "id": p.id,
            "project_id": p.project_id,
            "project_name": p.project_name,
            "status_name": p.status.status_name if p.status else None,
            "mentor_name": p.lead_mentor.full_name if p.lead_mentor else None,
            "ready_by_status": bool(p.status and 'ready for publication' in p.status.status_name.lower()),
        }
        for p in projects
    ]


def get_unstaged_project(project_id):
    project = db.session.get(Project, project_id)
    if project is None:
        raise ValidationFailed("Project not found", {"project_id": f"Unknown id {project_id}"})
    if project.ready_publication is not None:
        raise ValidationFailed(
            "Project already has a Ready for Publication entry, edit the existing entry instead",
            {"project_id": f"Entry {project.ready_publication.id} exists"}
        )
    return project


def create_from_project(form, ctx):
    """Stage a project's paper; its assigned students become the authors."""
    project = get_unstaged_project(form.project_id)
    mentor = project.lead_mentor

    entry = ReadyForPublication(
        project_id=project.id,
        paper_title=form.paper_title or project.project_name,
        mentor_affiliation=form.mentor_affiliation or (mentor.specialization if mentor else None),
        first_draft_link=form.first_draft_link,
        plagiarism_report_link=form.plagiarism_report_link,
        ai_detection_link=form.ai_detection_link,
        notes=form.notes,
        status='pending',
    )
    entry.student_details = [
        ReadyForPublicationStudent(
            student_id=link.student_id,
            student_affiliation=link.student.affiliation if link.student else None,
            author_order=order
        )
        for order, link in enumerate(project.student_links, start=1)
    ]
    db.session.add(entry)
    db.session.commit()

    log_audit_trail(ctx.user, 'ReadyForPublication', entry.id, 'CREATE',
                    f"Staged project {project.project_id} for publication")
    return entry


def create_manual(form, ctx):
    project = get_unstaged_project(form.project_id)

    student_ids = list(dict.fromkeys(form.student_ids))
    students = {s.id: s for s in Student.query.filter(Student.id.in_(student_ids)).all()} if student_ids else {}
    missing = [str(i) for i in student_ids if i not in students]
    if missing:
        raise ValidationFailed("Invalid references: student_ids",
                               {"student_ids": f"Unknown ids {', '.join(missing)}"})

    entry = ReadyForPublication(
        project_id=project.id,
        paper_title=form.paper_title,
        mentor_affiliation=form.mentor_affiliation,
        first_draft_link=form.first_draft_link,
        plagiarism_report_link=form.plagiarism_report_link,
        ai_detection_link=form.ai_detection_link,
        notes=form.notes,
        status='pending',
    )
    entry.student_details = [
        ReadyForPublicationStudent(
            student_id=sid,
            student_affiliation=students[sid].affiliation,
            author_order=order
        )
        for order, sid in enumerate(student_ids, start=1)
    ]
    db.session.add(entry)
    db.session.commit()

    log_audit_trail(ctx.user, 'ReadyForPublication', entry.id, 'CREATE',
                    f"Manually staged '{entry.paper_title}'")
    return entry


def check_approval(entry):
    if entry.status != 'approved':
        return
    missing = {name: "Required for approval" for name in APPROVAL_LINKS if not getattr(entry, name)}
    if missing:
        raise ValidationFailed(
            "First draft and AI detection links are required before approval", missing
        )


def update_ready(entry, form, ctx):
    previous = entry.status
    for name in ('paper_title', 'mentor_affiliation', 'first_draft_link',
                 'plagiarism_report_link', 'ai_detection_link', 'final_paper_link',
                 'status', 'notes'):
        setattr(entry, name, getattr(form, name))
    check_approval(entry)
    db.session.commit()

    desc = f"Updated '{entry.paper_title}'"
    if previous != entry.status:
        desc += f", status {previous} -> {entry.status}"
    log_audit_trail(ctx.user, 'ReadyForPublication', entry.id, 'UPDATE', desc)
    return entry


def update_student_details(entry, form, ctx):
    by_student = {d.student_id: d for d in entry.student_details}
    unknown = [str(s.student_id) for s in form.students if s.student_id not in by_student]
    if unknown:
        raise ValidationFailed("Students are not authors of this paper",
                               {"students": f"Unknown student ids {', '.join(unknown)}"})

    for item in form.students:
        detail = by_student[item.student_id]
        detail.student_affiliation = item.student_affiliation
        detail.student_address = item.student_address
        detail.author_order = item.author_order
    db.session.commit()

    log_audit_trail(ctx.user, 'ReadyForPublication', entry.id, 'UPDATE', 'Updated author details')
    return entry


def delete_ready(entry, ctx):
    entry_id, title = entry.id, entry.paper_title
    db.session.delete(entry)
    db.session.commit()
    log_audit_trail(ctx.user, 'ReadyForPublication', entry_id, 'DELETE', f"Removed '{title}'")


def ready_statistics():
    counts = dict(
        db.session.query(ReadyForPublication.status, func.count(ReadyForPublication.id))
        .group_by(ReadyForPublication.status).all()
    )
    return {
        "total": sum(counts.values()),
        "by_status": {status: counts.get(status, 0) for status in READY_STATUSES},
    }


# In publication

def in_publication_query():
    return ready_query().filter(ReadyForPublication.status.in_(IN_PUBLICATION_STATUSES))


def get_in_publication(entry_id):
    return in_publication_query().filter(ReadyForPublication.id == entry_id).first()


def application_counts(entry):
    conference = entry.conference_applications
    journal = entry.journal_applications
    return {
        "conference_applications": len(conference),
        "journal_applications": len(journal),
        "accepted_conferences": sum(1 for a in conference if a.status == 'accepted'),
        "accepted_journals": sum(1 for a in journal if a.status == 'accepted'),
    }


def list_in_publication(args):
    query = apply_filters(in_publication_query(), args, IN_PUBLICATION_FILTERS)
    return query.order_by(ReadyForPublication.created_at.desc(), ReadyForPublication.id.desc()).all()


def serialize_conference_application(app):
    data = app.to_dict()
    conference = app.conference
    data.update({
        "conference_name": conference.conference_name if conference else None,
        "conference_shortform": conference.conference_shortform if conference else None,
        "deadline": deadline_badge(app.submission_deadline),
    })
    return data


def serialize_journal_application(app):
    data = app.to_dict()
    journal = app.journal
    data.update({
        "journal_name": journal.journal_name if journal else None,
        "publisher": journal.publisher if journal else None,
        "deadline": deadline_badge(app.submission_deadline),
    })
    return data


def serialize_in_publication(entry, detail=False):
    data = serialize_ready(entry, detail=detail)
    project = entry.project
    data["project_status"] = project.status.status_name if project and project.status else None
    data.update(application_counts(entry))
    if detail:
        data["conference_application_list"] = [
            serialize_conference_application(a) for a in entry.conference_applications
        ]
        data["journal_application_list"] = [
            serialize_journal_application(a) for a in entry.journal_applications
        ]
    return data


def update_links(entry, form, ctx):
    for name in ('first_draft_link', 'plagiarism_report_link', 'ai_detection_link',
                 'final_paper_link', 'notes'):
        setattr(entry, name, getattr(form, name))
    check_approval(entry)
    db.session.commit()
    log_audit_trail(ctx.user, 'ReadyForPublication', entry.id, 'UPDATE', 'Updated publication links')
    return entry


def apply_to_conference(entry, form, ctx):
    conference = db.session.get(Conference, form.conference_id)
    if conference is None:
        raise ValidationFailed("Conference not found", {"conference_id": f"Unknown id {form.conference_id}"})

    application = ConferenceApplication(
        ready_publication_id=entry.id,
        conference_id=conference.id,
        status='applied',
        application_date=form.application_date,
        submission_deadline=form.submission_deadline or conference.submission_due_date,
        submission_link=form.submission_link,
        notes=form.notes,
    )
    db.session.add(application)
    db.session.commit()

    log_audit_trail(ctx.user, 'ConferenceApplication', application.id, 'CREATE',
                    f"Applied '{entry.paper_title}' to {conference.conference_name}")
    return application


def apply_to_journal(entry, form, ctx):
    journal = db.session.get(Journal, form.journal_id)
    if journal is None:
        raise ValidationFailed("Journal not found", {"journal_id": f"Unknown id {form.journal_id}"})

    application = JournalApplication(
        ready_publication_id=entry.id,
        journal_id=journal.id,
        status='applied',
        application_date=form.application_date,
        submission_deadline=form.submission_deadline,
        submission_link=form.submission_link,
        manuscript_id=form.manuscript_id,
        notes=form.notes,
    )
    db.session.add(application)
    db.session.commit()

    log_audit_trail(ctx.user, 'JournalApplication', application.id, 'CREATE',
                    f"Applied '{entry.paper_title}' to {journal.journal_name}")
    return application


CONFERENCE_ACCEPTANCE_FIELDS = (
    'acceptance_date', 'reviewer_changes', 'formatted_paper_link',
    'presentation_link', 'attended', 'certificate_received',
)


def update_application_status(entry, form, ctx):
    """
    Set the status of one of the entry's applications. Admins are mailed
    when it becomes accepted; mail failures never undo the update.
    """
    if form.application_type == 'conference':
        model, table = ConferenceApplication, 'ConferenceApplication'
    else:
        model, table = JournalApplication, 'JournalApplication'

    application = model.query.filter_by(id=form.application_id, ready_publication_id=entry.id).first()
    if application is None:
        raise ValidationFailed("Application not found",
                               {"application_id": f"Unknown id {form.application_id}"})

    previous = application.status
    application.status = form.status
    application.feedback = form.feedback
    application.response_date = form.response_date
    if model is ConferenceApplication:
        for name in CONFERENCE_ACCEPTANCE_FIELDS:
            value = getattr(form, name)
            if value is not None:
                setattr(application, name, value)
    db.session.commit()

    log_audit_trail(ctx.user, table, application.id, 'UPDATE',
                    f"Application status {previous} -> {application.status}")

    if application.status == 'accepted' and previous != 'accepted':
        venue = application.conference.conference_name if model is ConferenceApplication \
            else application.journal.journal_name
        send_notification_email(
            "Paper accepted",
            f"'{entry.paper_title}' has been accepted by {venue}."
        )
    return application


def in_publication_statistics():
    def by_status(model):
        counts = dict(
            db.session.query(model.status, func.count(model.id)).group_by(model.status).all()
        )
        return {status: counts.get(status, 0) for status in APPLICATION_STATUSES}

    return {
        "total": in_publication_query().count(),
        "conference_applications": by_status(ConferenceApplication),
        "journal_applications": by_status(JournalApplication),
    }
