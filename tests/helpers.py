from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from models import db, Student, Conference, Journal, User
from services.auth_services import generate_code


def make_user(username, user_type, **fields):
    user = User(
        username=username,
        password_hash=generate_password_hash(fields.pop('password', 'Secret123!')),
        full_name=fields.pop('full_name', username.title()),
        user_type=user_type,
        **fields
    )
    db.session.add(user)
    db.session.commit()
    return user


def headers_for(user):
    token = create_access_token(identity=str(user.id))
    return {"Authorization": f"Bearer {token}"}


def add_student(full_name='Asha Iyer', **fields):
    student = Student(student_id=generate_code('STU', Student, 'student_id'),
                      full_name=full_name, **fields)
    db.session.add(student)
    db.session.commit()
    return student


def add_conference(name='ICML', **fields):
    conference = Conference(conference_name=name, **fields)
    db.session.add(conference)
    db.session.commit()
    return conference


def add_journal(name='Nature', **fields):
    journal = Journal(journal_name=name, **fields)
    db.session.add(journal)
    db.session.commit()
    return journal


def create_project(client, headers, **form):
    form.setdefault('project_name', 'Solar Tracker')
    return client.post('/projects/create_project', data=form, headers=headers)
