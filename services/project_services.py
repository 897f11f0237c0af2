from sqlalchemy import func, or_

from models import (
    db, Project, ProjectStatus, Subject, Tag, User, Student,
    ProjectStudent, ProjectMentor, ProjectTagAssignment
)
from services.auth_services import generate_code, log_audit_trail
from services.deadlines import compute_end_date, deadline_badge, status_badge_class
from services.errors import ValidationFailed
from services.filters import apply_filters, apply_sort, eq, search

COMPLETED_PATTERN = '%completed%'
IN_PROGRESS_PATTERN = '%in progress%'


def is_completed_clause():
    return ProjectStatus.status_name.ilike(COMPLETED_PATTERN)


def project_query():
    return Project.query.outerjoin(ProjectStatus, Project.status_id == ProjectStatus.id)


def by_any_mentor(value):
    mentor_id = int(value)
    return or_(
        Project.lead_mentor_id == mentor_id,
        Project.mentor_links.any(ProjectMentor.mentor_id == mentor_id)
    )


def by_tag(value):
    return Project.tag_links.any(ProjectTagAssignment.tag_id == int(value))


ACTIVE_FILTERS = {
    'search': search(Project.project_name, Project.project_id),
    'status': eq(Project.status_id),
    'mentor': by_any_mentor,
    'rbm': eq(Project.rbm_id),
    'subject': eq(Project.subject_id),
    'tag': by_tag,
}

COMPLETED_FILTERS = {
    'search': search(Project.project_name, Project.project_id),
    'mentor': by_any_mentor,
    'rbm': eq(Project.rbm_id),
}

COMPLETED_SORTS = {
    'completion_date': Project.completion_date.desc(),
    'project_name': Project.project_name.asc(),
    'project_id': Project.project_id.asc(),
}


def active_project_query():
    """Projects whose status is unset or not a completed one."""
    return project_query().filter(
        or_(ProjectStatus.status_name.is_(None), ~is_completed_clause())
    )


def list_active_projects(args):
    query = apply_filters(active_project_query(), args, ACTIVE_FILTERS)
    return query.order_by(Project.created_at.desc()).all()


def list_completed_projects(args):
    query = project_query().filter(is_completed_clause())
    query = apply_filters(query, args, COMPLETED_FILTERS)
    return apply_sort(query, args.get('sort_by'), COMPLETED_SORTS, 'completion_date').all()


def user_summary(user):
    if user is None:
        return None
    return {"id": user.id, "full_name": user.full_name, "email": user.email}


def serialize_project(project, detail=False):
    data = project.to_dict()
    status_name = project.status.status_name if project.status else None
    data.update({
        "status_name": status_name,
        "status_badge_class": status_badge_class(status_name),
        "subject_name": project.subject.subject_name if project.subject else None,
        "lead_mentor": user_summary(project.lead_mentor),
        "rbm": user_summary(project.rbm),
        "deadline": deadline_badge(project.end_date),
        "student_count": len(project.student_links),
        "mentors": [user_summary(link.mentor) for link in project.mentor_links],
        "tags": [
            {"id": link.tag.id, "tag_name": link.tag.tag_name, "tag_color": link.tag.tag_color}
            for link in project.tag_links
        ],
    })
    if detail:
        data["students"] = [
            {
                "id": link.student.id,
                "student_id": link.student.student_id,
                "full_name": link.student.full_name,
                "assigned_date": link.assigned_date.isoformat() if link.assigned_date else None,
            }
            for link in project.student_links
        ]
        data["publications"] = [
            {"id": pub.id, "publication_id": pub.publication_id,
             "paper_title": pub.paper_title, "venue_type": pub.venue_type}
            for pub in project.publications
        ]
    return data


def unique_ids(ids):
    return list(dict.fromkeys(ids))


def check_references(form):
    """Every referenced row must exist; reports the offending fields."""
    fields = {}
    single = (
        ('status_id', ProjectStatus), ('subject_id', Subject),
        ('lead_mentor_id', User), ('rbm_id', User),
    )
    for name, model in single:
        value = getattr(form, name)
        if value is not None and db.session.get(model, value) is None:
            fields[name] = f"Unknown id {value}"

    multiple = (('student_ids', Student), ('mentor_ids', User), ('tag_ids', Tag))
    for name, model in multiple:
        ids = unique_ids(getattr(form, name))
        if not ids:
            continue
        found = {row.id for row in model.query.filter(model.id.in_(ids)).all()}
        missing = [str(i) for i in ids if i not in found]
        if missing:
            fields[name] = f"Unknown ids {', '.join(missing)}"

    if fields:
        raise ValidationFailed("Invalid references: " + ", ".join(fields), fields)


def assign_people(project, form):
    """Replace the project's student, mentor and tag assignments wholesale."""
    project.student_links = [ProjectStudent(student_id=i) for i in unique_ids(form.student_ids)]
    project.mentor_links = [ProjectMentor(mentor_id=i) for i in unique_ids(form.mentor_ids)]
    project.tag_links = [ProjectTagAssignment(tag_id=i) for i in unique_ids(form.tag_ids)]


def apply_form(project, form):
    project.project_name = form.project_name
    project.status_id = form.status_id
    project.subject_id = form.subject_id
    project.lead_mentor_id = form.lead_mentor_id
    project.rbm_id = form.rbm_id
    project.has_prototype = form.has_prototype
    project.start_date = form.start_date
    project.assigned_date = form.assigned_date
    project.completion_date = form.completion_date
    project.end_date = compute_end_date(form.start_date)
    project.drive_link = form.drive_link
    project.description = form.description
    project.notes = form.notes


def create_project(form, ctx):
    check_references(form)
    project = Project(project_id=generate_code('PRJ', Project, 'project_id'))
    apply_form(project, form)
    assign_people(project, form)
    db.session.add(project)
    db.session.commit()

    log_audit_trail(ctx.user, 'Project', project.project_id, 'CREATE',
                    f"Created project '{project.project_name}'")
    return project


def update_project(project, form, ctx):
    check_references(form)
    apply_form(project, form)
    assign_people(project, form)
    db.session.commit()

    log_audit_trail(ctx.user, 'Project', project.project_id, 'UPDATE',
                    f"Updated project '{project.project_name}'")
    return project


def update_status(project, form, ctx):
    status = db.session.get(ProjectStatus, form.status_id)
    if status is None:
        raise ValidationFailed("Invalid status", {"status_id": f"Unknown id {form.status_id}"})

    project.status_id = status.id
    if form.notes is not None:
        project.notes = form.notes
    db.session.commit()

    log_audit_trail(ctx.user, 'Project', project.project_id, 'UPDATE',
                    f"Status changed to '{status.status_name}'")
    return project


def in_progress_status():
    return ProjectStatus.query.filter(ProjectStatus.status_name.ilike(IN_PROGRESS_PATTERN)) \
                              .order_by(ProjectStatus.status_order, ProjectStatus.id) \
                              .first()


def move_back_to_active(project, ctx):
    status = in_progress_status()
    if status is None:
        raise ValidationFailed("No in-progress status is configured")

    project.status_id = status.id
    project.completion_date = None
    db.session.commit()

    log_audit_trail(ctx.user, 'Project', project.project_id, 'UPDATE',
                    'Moved project back to active list')
    return project


def delete_project(project, ctx):
    code, name = project.project_id, project.project_name
    db.session.delete(project)
    db.session.commit()

    log_audit_trail(ctx.user, 'Project', code, 'DELETE', f"Deleted project '{name}'")


def add_status(form, ctx):
    if ProjectStatus.query.filter(func.lower(ProjectStatus.status_name) == form.status_name.lower()).first():
        raise ValidationFailed("Status already exists", {"status_name": "Already exists"})

    next_order = (db.session.query(func.max(ProjectStatus.status_order)).scalar() or 0) + 1
    status = ProjectStatus(status_name=form.status_name, status_order=next_order)
    db.session.add(status)
    db.session.commit()
    log_audit_trail(ctx.user, 'ProjectStatus', status.id, 'CREATE', f"Added status '{status.status_name}'")
    return status


def add_subject(form, ctx):
    if Subject.query.filter(func.lower(Subject.subject_name) == form.subject_name.lower()).first():
        raise ValidationFailed("Subject already exists", {"subject_name": "Already exists"})

    subject = Subject(subject_name=form.subject_name, subject_code=form.subject_code)
    db.session.add(subject)
    db.session.commit()
    log_audit_trail(ctx.user, 'Subject', subject.id, 'CREATE', f"Added subject '{subject.subject_name}'")
    return subject


def add_tag(form, ctx):
    if Tag.query.filter(func.lower(Tag.tag_name) == form.tag_name.lower()).first():
        raise ValidationFailed("Tag already exists", {"tag_name": "Already exists"})

    tag = Tag(tag_name=form.tag_name, tag_color=form.tag_color)
    db.session.add(tag)
    db.session.commit()
    log_audit_trail(ctx.user, 'Tag', tag.id, 'CREATE', f"Added tag '{tag.tag_name}'")
    return tag


def active_users(user_type):
    return User.query.filter_by(user_type=user_type, status='active') \
                     .order_by(User.full_name).all()


def lookups():
    return {
        "statuses": [s.to_dict() for s in ProjectStatus.query.filter_by(is_active=True)
                     .order_by(ProjectStatus.status_order).all()],
        "subjects": [s.to_dict() for s in Subject.query.filter_by(is_active=True)
                     .order_by(Subject.subject_name).all()],
        "tags": [t.to_dict() for t in Tag.query.filter_by(is_active=True)
                 .order_by(Tag.tag_name).all()],
        "mentors": [user_summary(u) for u in active_users('mentor')],
        "rbms": [user_summary(u) for u in active_users('rbm')],
        "students": [
            {"id": s.id, "student_id": s.student_id, "full_name": s.full_name}
            for s in Student.query.order_by(Student.full_name).all()
        ],
    }


def statistics():
    by_status = db.session.query(ProjectStatus.status_name, func.count(Project.id)) \
        .join(Project, Project.status_id == ProjectStatus.id) \
        .group_by(ProjectStatus.status_name, ProjectStatus.status_order) \
        .order_by(ProjectStatus.status_order).all()

    by_subject = db.session.query(Subject.subject_name, func.count(Project.id).label('count')) \
        .join(Project, Project.subject_id == Subject.id) \
        .group_by(Subject.subject_name) \
        .order_by(func.count(Project.id).desc()) \
        .limit(5).all()

    return {
        "total_projects": Project.query.count(),
        "completed_projects": project_query().filter(is_completed_clause()).count(),
        "with_prototypes": Project.query.filter_by(has_prototype='Yes').count(),
        "by_status": [{"status_name": name, "count": count} for name, count in by_status],
        "by_subject": [{"subject_name": name, "count": count} for name, count in by_subject],
    }
