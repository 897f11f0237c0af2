from models import db
from models.base import BaseModel
from datetime import date

class ProjectStudent(BaseModel):
    __tablename__ = 'project_students'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    assigned_date = db.Column(db.Date, default=date.today)
    student = db.relationship('Student')


class ProjectMentor(BaseModel):
    __tablename__ = 'project_mentors'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    mentor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    assigned_date = db.Column(db.Date, default=date.today)
    mentor = db.relationship('User')


class ProjectTagAssignment(BaseModel):
    __tablename__ = 'project_tag_assignments'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False)
    tag_id = db.Column(db.Integer, db.ForeignKey('project_tags.id'), nullable=False)
    tag = db.relationship('Tag')
